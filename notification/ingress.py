"""
Ingress - validates inbound database change events.

Only inserts into the notifications table are processed; anything else is
rejected with ValidationError, which the dispatcher reports as "ignored".
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from notification.exceptions import ValidationError
from notification.models import (
    INSERT_EVENT,
    NOTIFICATIONS_TABLE,
    Notification,
    NotificationEvent,
)

logger = logging.getLogger(__name__)


def parse_event(payload: Any) -> Notification:
    """
    Unwrap a webhook payload into a typed Notification.

    Args:
        payload: Decoded JSON body of the webhook request

    Returns:
        The inserted notification record

    Raises:
        ValidationError: If the payload is malformed or is not an insert
            into the notifications table
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Event payload must be a JSON object")

    try:
        event = NotificationEvent.model_validate(dict(payload))
    except PydanticValidationError as e:
        raise ValidationError(f"Malformed event envelope ({e.error_count()} error(s))") from e

    logger.info(f"Received webhook payload: {event.type} on {event.table}")

    if event.type != INSERT_EVENT or event.table != NOTIFICATIONS_TABLE:
        raise ValidationError(f"Ignoring {event.type} event on table '{event.table}'")

    if event.record is None:
        raise ValidationError("Insert event carries no record")

    try:
        return Notification.model_validate(event.record)
    except PydanticValidationError as e:
        raise ValidationError(f"Malformed notification record ({e.error_count()} error(s))") from e


def build_insert_event(record: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a notification record in the envelope the database webhook sends."""
    return {
        'type': INSERT_EVENT,
        'table': NOTIFICATIONS_TABLE,
        'schema': 'public',
        'record': record,
        'old_record': None,
    }
