"""
Recipient resolution - loads who to email and what they opted into.
"""

import logging
from typing import Tuple
from uuid import UUID

from notification.exceptions import NotFoundError
from notification.models import NotificationPreferences, PreferenceFlag, RecipientProfile

logger = logging.getLogger(__name__)

REASON_EMAIL_NOT_FOUND = "User email not found"
REASON_PREFERENCES_NOT_FOUND = "Preferences not found"


class RecipientResolver:
    """
    Loads a user's profile and email preferences from the record store.

    The two lookups are independent; either one missing is terminal.
    """

    def __init__(self, repo):
        self.repo = repo

    def resolve(self, user_id: UUID) -> Tuple[RecipientProfile, NotificationPreferences]:
        """
        Raises:
            NotFoundError: If the profile, its email or the preference row is missing
        """
        profile = self.load_profile(user_id)
        preferences = self.load_preferences(user_id)
        return profile, preferences

    def load_profile(self, user_id: UUID) -> RecipientProfile:
        row = self.repo.get_profile(user_id)
        if row is None or not row.email:
            logger.error(f"User profile or email not found for user {user_id}")
            raise NotFoundError(REASON_EMAIL_NOT_FOUND)

        return RecipientProfile(user_id=row.id, email=row.email, full_name=row.full_name)

    def load_preferences(self, user_id: UUID) -> NotificationPreferences:
        row = self.repo.get_preferences(user_id)
        if row is None:
            logger.error(f"Notification preferences not found for user {user_id}")
            raise NotFoundError(REASON_PREFERENCES_NOT_FOUND)

        # NULL columns count as switched off
        return NotificationPreferences(
            user_id=row.user_id,
            email_enabled=bool(row.email_enabled),
            flags={flag: bool(getattr(row, flag.value)) for flag in PreferenceFlag},
        )
