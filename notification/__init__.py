"""
Notification Module

Email dispatch pipeline for newly inserted notification rows: preference
checks, templating, delivery through Resend (or simulation) and outcome
recording.

Usage:
    from notification import NotificationDispatcher, build_email_channel

    channel = build_email_channel(config.email)
    dispatcher = NotificationDispatcher(repo, channel)
    result = dispatcher.dispatch(webhook_payload)
"""

from notification.exceptions import (
    NotificationDispatchError,
    ValidationError,
    NotFoundError,
    DeliveryError,
    InternalError,
)

from notification.models import (
    NotificationCategory,
    PreferenceFlag,
    Notification,
    NotificationEvent,
    RecipientProfile,
    NotificationPreferences,
    EmailTemplate,
    RenderedEmail,
)

from notification.channels import (
    EmailChannel,
    ResendEmailChannel,
    SimulatedEmailChannel,
    DeliveryResult,
    build_email_channel,
)

from notification.ingress import parse_event, build_insert_event
from notification.preferences import CATEGORY_PREFERENCE_FLAGS, GateDecision, evaluate_preferences
from notification.recipients import RecipientResolver
from notification.templates import TemplateResolver, build_fallback_template
from notification.message_builder import NotificationMessageBuilder
from notification.tracker import OutcomeRecorder

from notification.service import (
    NotificationDispatcher,
    DispatchResult,
    DispatchStatus,
)

__all__ = [
    # Errors
    'NotificationDispatchError',
    'ValidationError',
    'NotFoundError',
    'DeliveryError',
    'InternalError',
    # Models
    'NotificationCategory',
    'PreferenceFlag',
    'Notification',
    'NotificationEvent',
    'RecipientProfile',
    'NotificationPreferences',
    'EmailTemplate',
    'RenderedEmail',
    # Channels
    'EmailChannel',
    'ResendEmailChannel',
    'SimulatedEmailChannel',
    'DeliveryResult',
    'build_email_channel',
    # Stages
    'parse_event',
    'build_insert_event',
    'CATEGORY_PREFERENCE_FLAGS',
    'GateDecision',
    'evaluate_preferences',
    'RecipientResolver',
    'TemplateResolver',
    'build_fallback_template',
    'NotificationMessageBuilder',
    'OutcomeRecorder',
    # Service
    'NotificationDispatcher',
    'DispatchResult',
    'DispatchStatus',
]
