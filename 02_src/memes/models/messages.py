"""Message-related data models."""

from dataclasses import dataclass, field

from .conversations import ConversationRef


@dataclass
class React:
    """Users who reacted to a message with one react kind."""

    react_id: int
    u_ids: list[int] = field(default_factory=list)


@dataclass
class Message:
    """A message posted to a channel or a DM."""

    message_id: int
    u_id: int
    channel_id: int
    dm_id: int
    message: str
    time_sent: int
    reacts: list[React] = field(default_factory=list)
    is_pinned: bool = False

    @property
    def conversation(self) -> ConversationRef:
        return ConversationRef(channel_id=self.channel_id, dm_id=self.dm_id)

    def react(self, react_id: int) -> React | None:
        return next((r for r in self.reacts if r.react_id == react_id), None)
