#!/usr/bin/env python3
"""
Exceptions raised by the notification dispatch pipeline.

Every stage failure is converted to exactly one of these at the
dispatcher boundary (see notification.service.NotificationDispatcher).
"""


class NotificationDispatchError(Exception):
    """Base exception for pipeline errors."""
    pass


class ValidationError(NotificationDispatchError):
    """Raised when an inbound event is malformed or not a notification insert."""
    pass


class NotFoundError(NotificationDispatchError):
    """Raised when the recipient profile, email address or preferences are missing."""
    pass


class DeliveryError(NotificationDispatchError):
    """
    Mail gateway rejected the send.

    Channels never raise this; it is carried on DeliveryResult.error so the
    pipeline can record the failure without crashing.
    """

    def __init__(self, message: str, status_code: int = None, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class InternalError(NotificationDispatchError):
    """Wraps any unexpected exception raised while processing a notification."""
    pass
