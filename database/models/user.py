import uuid

from sqlalchemy import Column, Text, TIMESTAMP, Uuid, func

from .base import Base


class Profile(Base):
    """
    Public profile of a platform user (donor, charity or admin).

    Only the contact fields read by the mailer are mapped.
    """
    __tablename__ = 'profiles'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text)
    full_name = Column(Text)
    role = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
