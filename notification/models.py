"""
Domain models for the notification dispatch pipeline.

These are request-scoped copies of rows owned by the record store; the
pipeline never caches them across invocations.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


INSERT_EVENT = "INSERT"
NOTIFICATIONS_TABLE = "notifications"


class NotificationCategory(str, Enum):
    """Business event that produced a notification."""
    DONATION_RECEIVED = "donation_received"
    DONATION_CONFIRMED = "donation_confirmed"
    CAMPAIGN_UPDATE = "campaign_update"
    MILESTONE_COMPLETED = "milestone_completed"
    MILESTONE_VERIFIED = "milestone_verified"
    FUND_RELEASED = "fund_released"
    REVIEW_APPROVED = "review_approved"
    REVIEW_REJECTED = "review_rejected"
    CAMPAIGN_APPROVED = "campaign_approved"
    CAMPAIGN_REJECTED = "campaign_rejected"
    CHARITY_VERIFIED = "charity_verified"
    CHARITY_REJECTED = "charity_rejected"
    THANK_YOU_MESSAGE = "thank_you_message"
    SYSTEM_ANNOUNCEMENT = "system_announcement"


class PreferenceFlag(str, Enum):
    """Per-category email switches on a notification_preferences row."""
    DONATION_RECEIVED = "email_donation_received"
    DONATION_CONFIRMED = "email_donation_confirmed"
    CAMPAIGN_UPDATE = "email_campaign_update"
    MILESTONE_COMPLETED = "email_milestone_completed"
    MILESTONE_VERIFIED = "email_milestone_verified"
    FUND_RELEASED = "email_fund_released"
    REVIEW_MODERATED = "email_review_moderated"
    CAMPAIGN_MODERATED = "email_campaign_moderated"
    CHARITY_VERIFIED = "email_charity_verified"
    THANK_YOU = "email_thank_you"
    SYSTEM_ANNOUNCEMENTS = "email_system_announcements"


class Notification(BaseModel):
    """A row from the notifications table as delivered by the webhook."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    id: UUID
    user_id: UUID
    type: str
    title: str
    message: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    email_sent: bool = False
    email_sent_at: Optional[datetime] = None

    @field_validator('metadata', mode='before')
    @classmethod
    def _null_metadata_is_empty(cls, value):
        return {} if value is None else value

    @field_validator('email_sent', mode='before')
    @classmethod
    def _null_email_sent_is_false(cls, value):
        return False if value is None else value


class NotificationEvent(BaseModel):
    """Database change event envelope."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str
    table: str
    db_schema: Optional[str] = Field(default=None, alias='schema')
    record: Optional[Dict[str, Any]] = None
    old_record: Optional[Dict[str, Any]] = None


class RecipientProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None


class NotificationPreferences(BaseModel):
    """
    Email preferences of a single user.

    A flag missing from ``flags`` is treated as enabled, matching the
    column defaults of the preferences table.
    """
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email_enabled: bool = True
    flags: Dict[PreferenceFlag, bool] = Field(default_factory=dict)

    def is_enabled(self, flag: PreferenceFlag) -> bool:
        return self.flags.get(flag, True)


class EmailTemplate(BaseModel):
    """Subject and bodies containing {{variable}} placeholders."""
    model_config = ConfigDict(frozen=True)

    type: str
    subject: str
    html_body: str
    text_body: str
    is_fallback: bool = False


class RenderedEmail(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str
    html_body: str
    text_body: str
