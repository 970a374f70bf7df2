"""
Preference gate - decides whether a notification may be emailed.

Two tiers are checked in order: the global email switch, then the
per-category switch. Suppression is a normal outcome, not an error.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from notification.models import NotificationCategory, NotificationPreferences, PreferenceFlag

REASON_EMAIL_DISABLED = "Email disabled"
REASON_TYPE_DISABLED = "Email type disabled"

# Moderation outcomes share one switch per subject (approved/rejected,
# verified/rejected). Categories missing here are always allowed.
CATEGORY_PREFERENCE_FLAGS: Dict[NotificationCategory, PreferenceFlag] = {
    NotificationCategory.DONATION_RECEIVED: PreferenceFlag.DONATION_RECEIVED,
    NotificationCategory.DONATION_CONFIRMED: PreferenceFlag.DONATION_CONFIRMED,
    NotificationCategory.CAMPAIGN_UPDATE: PreferenceFlag.CAMPAIGN_UPDATE,
    NotificationCategory.MILESTONE_COMPLETED: PreferenceFlag.MILESTONE_COMPLETED,
    NotificationCategory.MILESTONE_VERIFIED: PreferenceFlag.MILESTONE_VERIFIED,
    NotificationCategory.FUND_RELEASED: PreferenceFlag.FUND_RELEASED,
    NotificationCategory.REVIEW_APPROVED: PreferenceFlag.REVIEW_MODERATED,
    NotificationCategory.REVIEW_REJECTED: PreferenceFlag.REVIEW_MODERATED,
    NotificationCategory.CAMPAIGN_APPROVED: PreferenceFlag.CAMPAIGN_MODERATED,
    NotificationCategory.CAMPAIGN_REJECTED: PreferenceFlag.CAMPAIGN_MODERATED,
    NotificationCategory.CHARITY_VERIFIED: PreferenceFlag.CHARITY_VERIFIED,
    NotificationCategory.CHARITY_REJECTED: PreferenceFlag.CHARITY_VERIFIED,
    NotificationCategory.THANK_YOU_MESSAGE: PreferenceFlag.THANK_YOU,
    NotificationCategory.SYSTEM_ANNOUNCEMENT: PreferenceFlag.SYSTEM_ANNOUNCEMENTS,
}


@dataclass(frozen=True)
class GateDecision:
    """Outcome of the preference gate."""
    allowed: bool
    reason: Optional[str] = None


PROCEED = GateDecision(allowed=True)


def preference_flag_for(category: str) -> Optional[PreferenceFlag]:
    """Return the switch governing a category, or None if it is unmapped."""
    return CATEGORY_PREFERENCE_FLAGS.get(category)


def evaluate_preferences(preferences: NotificationPreferences, category: str) -> GateDecision:
    if not preferences.email_enabled:
        return GateDecision(allowed=False, reason=REASON_EMAIL_DISABLED)

    flag = preference_flag_for(category)
    if flag is not None and not preferences.is_enabled(flag):
        return GateDecision(allowed=False, reason=REASON_TYPE_DISABLED)

    return PROCEED
