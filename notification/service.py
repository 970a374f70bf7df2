#!/usr/bin/env python3
"""
Notification Dispatch Service

Runs one inbound notification event through the email pipeline:

    ingress -> recipient -> preference gate -> template -> render
            -> deliver -> record outcome

Every stage may short-circuit with a definitive result. Nothing is retried
here; redelivery of the triggering event belongs to the caller.

Usage:
    from notification.service import NotificationDispatcher

    dispatcher = NotificationDispatcher(repo, channel)
    result = dispatcher.dispatch(webhook_payload)
    result.http_status, result.content
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union
from uuid import UUID

from notification.channels import EmailChannel
from notification.exceptions import InternalError, NotFoundError, ValidationError
from notification.ingress import parse_event
from notification.message_builder import DEFAULT_APP_NAME, NotificationMessageBuilder
from notification.preferences import evaluate_preferences
from notification.recipients import RecipientResolver
from notification.templates import TemplateResolver
from notification.tracker import OutcomeRecorder

logger = logging.getLogger(__name__)

IGNORED_BODY = "Ignored"


class DispatchStatus(Enum):
    """Terminal state of a pipeline invocation."""
    IGNORED = "ignored"
    SUPPRESSED = "suppressed"
    SENT = "sent"
    DELIVERY_FAILED = "delivery_failed"
    NOT_FOUND = "not_found"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class DispatchResult:
    """
    Pipeline outcome with the HTTP-equivalent response it maps to.

    ``content`` is plain text for ignored/suppressed/not-found outcomes and
    a JSON-serialisable dict otherwise.
    """
    status: DispatchStatus
    http_status: int
    content: Union[str, Dict[str, Any]]
    reason: Optional[str] = None
    notification_id: Optional[UUID] = None

    @property
    def is_json(self) -> bool:
        return isinstance(self.content, dict)

    @property
    def success(self) -> bool:
        return self.status in (DispatchStatus.SENT, DispatchStatus.SUPPRESSED, DispatchStatus.IGNORED)

    @classmethod
    def ignored(cls, reason: str) -> "DispatchResult":
        return cls(DispatchStatus.IGNORED, 200, IGNORED_BODY, reason=reason)

    @classmethod
    def suppressed(cls, reason: str, notification_id: UUID) -> "DispatchResult":
        return cls(DispatchStatus.SUPPRESSED, 200, reason, reason=reason, notification_id=notification_id)

    @classmethod
    def delivered(cls, sent: bool, notification_id: UUID, reason: Optional[str] = None) -> "DispatchResult":
        status = DispatchStatus.SENT if sent else DispatchStatus.DELIVERY_FAILED
        return cls(status, 200, {'success': sent}, reason=reason, notification_id=notification_id)

    @classmethod
    def not_found(cls, reason: str) -> "DispatchResult":
        return cls(DispatchStatus.NOT_FOUND, 400, reason, reason=reason)

    @classmethod
    def internal_error(cls, error: InternalError) -> "DispatchResult":
        return cls(DispatchStatus.INTERNAL_ERROR, 500, {'error': str(error)}, reason=str(error))


class NotificationDispatcher:
    """
    Email pipeline for newly inserted notifications.

    The store repository and the delivery channel are injected; the
    dispatcher itself keeps no state between invocations.
    """

    def __init__(self, repo, channel: EmailChannel, app_name: str = DEFAULT_APP_NAME):
        """
        Initialize the dispatcher.

        Args:
            repo: NotificationRepository bound to a request-scoped session
            channel: Delivery channel selected at startup
            app_name: Value of the {{appName}} template variable
        """
        self.repo = repo
        self.channel = channel
        self.app_name = app_name
        self.recipients = RecipientResolver(repo)
        self.templates = TemplateResolver(repo)
        self.recorder = OutcomeRecorder(repo)

    def dispatch(self, payload: Any) -> DispatchResult:
        """
        Process one webhook payload.

        Never raises: every failure is converted to a DispatchResult.
        """
        try:
            return self._process(payload)
        except ValidationError as e:
            logger.info(f"Ignoring event: {e}")
            return DispatchResult.ignored(str(e))
        except NotFoundError as e:
            return DispatchResult.not_found(str(e))
        except Exception as e:
            error = e if isinstance(e, InternalError) else InternalError(str(e) or e.__class__.__name__)
            logger.exception(f"Error processing webhook: {error}")
            self._rollback()
            return DispatchResult.internal_error(error)

    def _process(self, payload: Any) -> DispatchResult:
        notification = parse_event(payload)
        logger.info(f"Processing notification: {notification.id} {notification.type}")

        recipient, preferences = self.recipients.resolve(notification.user_id)

        decision = evaluate_preferences(preferences, notification.type)
        if not decision.allowed:
            logger.info(f"Suppressed notification {notification.id} ({notification.type}): {decision.reason}")
            return DispatchResult.suppressed(decision.reason, notification.id)

        template = self.templates.resolve(notification)
        email = NotificationMessageBuilder.build_email(template, notification, recipient, self.app_name)

        result = self.channel.send(recipient.email, email)
        if not result.success:
            logger.error(f"Email for notification {notification.id} was not sent: {result.error}")
            return DispatchResult.delivered(False, notification.id, reason=str(result.error))

        # The email is already out; a failed status write must not trigger redelivery
        try:
            self.recorder.record_delivery(notification.id)
        except Exception as db_error:
            logger.error(f"Failed to record delivery for notification {notification.id}: {db_error}")
            self._rollback()

        mode = "simulated" if result.simulated else self.channel.mode
        return DispatchResult.delivered(True, notification.id, reason=f"delivered ({mode})")

    def _rollback(self) -> None:
        try:
            self.repo.rollback()
        except Exception as e:
            logger.error(f"Rollback failed: {e}")
