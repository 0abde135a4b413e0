"""Workspace events exchanged through the EventBus."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .conversations import ConversationRef


class Topic(str, Enum):
    """EventBus topics."""

    MESSAGE_POSTED = "message_posted"
    MESSAGE_REACTED = "message_reacted"
    CHANNEL_INVITED = "channel_invited"
    DM_CREATED = "dm_created"


@dataclass
class WorkspaceEvent:
    """Something that happened in a conversation, published after the mutation."""

    topic: Topic
    actor_id: int
    conversation: ConversationRef
    timestamp: datetime
    payload: dict = field(default_factory=dict)  # varies by topic
