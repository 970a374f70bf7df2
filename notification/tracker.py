#!/usr/bin/env python3
"""
Notification Tracker - Delivery Outcome Recording

Marks a notification as emailed once delivery succeeded. The update is an
overwrite (email_sent=True, email_sent_at=now), so replaying the same
webhook leaves the row consistent.

Usage:
    from notification.tracker import OutcomeRecorder

    recorder = OutcomeRecorder(repo)
    recorder.record_delivery(notification.id)
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

logger = logging.getLogger(__name__)


class OutcomeRecorder:
    """Persists delivery status back onto notification rows."""

    def __init__(self, repo):
        self.repo = repo

    def record_delivery(self, notification_id: UUID, sent_at: Optional[datetime] = None) -> bool:
        """
        Mark a notification as emailed and commit.

        Args:
            notification_id: Notification row to update
            sent_at: Delivery time (defaults to now, UTC)

        Returns:
            True if a row was updated, False if the notification no longer exists
        """
        sent_at = sent_at or datetime.now(timezone.utc)

        updated = self.repo.mark_email_sent(notification_id, sent_at)
        self.repo.commit()

        if updated:
            logger.info(f"Marked notification {notification_id} as emailed at {sent_at.isoformat()}")
        else:
            logger.warning(f"Notification {notification_id} not found while recording delivery")

        return updated
