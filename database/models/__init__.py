from .base import Base
from .user import Profile
from .notification import Notification, NotificationPreference, EmailTemplate

__all__ = [
    'Base',
    'Profile',
    'Notification',
    'NotificationPreference',
    'EmailTemplate',
]
