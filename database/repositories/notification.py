import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, update

from database.models import EmailTemplate, Notification, NotificationPreference, Profile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class NotificationRepository(BaseRepository):
    """Store access for the email dispatch pipeline."""

    def get_profile(self, user_id: Any) -> Optional[Profile]:
        stmt = select(Profile).where(Profile.id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_preferences(self, user_id: Any) -> Optional[NotificationPreference]:
        stmt = select(NotificationPreference).where(NotificationPreference.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_template(self, notification_type: str) -> Optional[EmailTemplate]:
        stmt = select(EmailTemplate).where(EmailTemplate.type == notification_type)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_notification(self, notification_id: Any) -> Optional[Notification]:
        stmt = select(Notification).where(Notification.id == notification_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def mark_email_sent(self, notification_id: Any, sent_at: datetime) -> bool:
        """Overwrite the email tracking columns. Returns False if no row matched."""
        stmt = (
            update(Notification)
            .where(Notification.id == notification_id)
            .values(email_sent=True, email_sent_at=sent_at)
        )
        result = self.db.execute(stmt)
        return result.rowcount > 0
