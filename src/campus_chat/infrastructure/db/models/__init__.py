"""Import all models so Base.metadata sees every table."""
from campus_chat.infrastructure.db.models.conversation import ConversationModel
from campus_chat.infrastructure.db.models.listing import ListingModel
from campus_chat.infrastructure.db.models.message import MessageModel
from campus_chat.infrastructure.db.models.notification_preference import (
    NotificationPreferenceModel,
)
from campus_chat.infrastructure.db.models.user import UserModel

__all__ = [
    "ConversationModel",
    "ListingModel",
    "MessageModel",
    "NotificationPreferenceModel",
    "UserModel",
]
