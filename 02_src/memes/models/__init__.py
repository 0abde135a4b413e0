"""Core data models for the Memes workspace."""

from .conversations import Channel, ConversationRef, Dm, Standup
from .events import Topic, WorkspaceEvent
from .messages import Message, React
from .users import Notification, Permission, User
from .views import (
    ChannelDetails,
    DmDetails,
    MessagePage,
    SearchResults,
    StandupStatus,
    UserStats,
    WorkspaceStats,
)

__all__ = [
    # Users
    "User",
    "Permission",
    "Notification",
    # Conversations
    "Channel",
    "Dm",
    "Standup",
    "ConversationRef",
    # Messages
    "Message",
    "React",
    # Events
    "Topic",
    "WorkspaceEvent",
    # Views
    "MessagePage",
    "SearchResults",
    "ChannelDetails",
    "DmDetails",
    "StandupStatus",
    "UserStats",
    "WorkspaceStats",
]
