import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Boolean, Index, Uuid, func

from .base import Base, JSONType


class Notification(Base):
    """
    In-app notification row. Inserting one fires the send-email webhook.

    The mailer only ever writes email_sent / email_sent_at.
    """
    __tablename__ = 'notifications'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    type = Column(Text, nullable=False)  # notification_type enum in the database
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default='unread')

    # Related entities (optional)
    campaign_id = Column(Uuid(as_uuid=True), nullable=True)
    donation_id = Column(Uuid(as_uuid=True), nullable=True)
    milestone_id = Column(Uuid(as_uuid=True), nullable=True)
    action_url = Column(Text)

    # "metadata" is reserved on declarative classes
    metadata_ = Column('metadata', JSONType, default=dict)

    # Email tracking
    email_sent = Column(Boolean, default=False)
    email_sent_at = Column(TIMESTAMP(timezone=True))
    email_opened = Column(Boolean, default=False)
    email_opened_at = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_notifications_user_id', 'user_id'),
        Index('idx_notifications_type', 'type'),
    )

    def to_record(self) -> dict:
        """Serialise the row the way the database webhook does."""
        def _iso(value):
            return value.isoformat() if value is not None else None

        def _str(value):
            return str(value) if value is not None else None

        return {
            'id': str(self.id),
            'user_id': str(self.user_id),
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'status': self.status,
            'campaign_id': _str(self.campaign_id),
            'donation_id': _str(self.donation_id),
            'milestone_id': _str(self.milestone_id),
            'action_url': self.action_url,
            'metadata': self.metadata_ or {},
            'email_sent': bool(self.email_sent),
            'email_sent_at': _iso(self.email_sent_at),
            'created_at': _iso(self.created_at),
        }


class NotificationPreference(Base):
    """
    Per-user notification switches. Only the email columns are mapped.
    """
    __tablename__ = 'notification_preferences'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False, unique=True)

    email_enabled = Column(Boolean, default=True)
    email_donation_received = Column(Boolean, default=True)
    email_donation_confirmed = Column(Boolean, default=True)
    email_campaign_update = Column(Boolean, default=True)
    email_milestone_completed = Column(Boolean, default=True)
    email_milestone_verified = Column(Boolean, default=True)
    email_fund_released = Column(Boolean, default=True)
    email_review_moderated = Column(Boolean, default=True)
    email_campaign_moderated = Column(Boolean, default=True)
    email_charity_verified = Column(Boolean, default=True)
    email_thank_you = Column(Boolean, default=True)
    email_system_announcements = Column(Boolean, default=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class EmailTemplate(Base):
    """Editable email template, one per notification type."""
    __tablename__ = 'email_templates'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    type = Column(Text, nullable=False, unique=True)
    subject = Column(Text, nullable=False)
    html_body = Column(Text, nullable=False)
    text_body = Column(Text, nullable=False)
    variables = Column(JSONType, default=list)  # Documented placeholders, informational only
    is_active = Column(Boolean, default=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
