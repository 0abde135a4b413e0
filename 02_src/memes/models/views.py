"""Read models returned by query operations."""

from dataclasses import dataclass

from .messages import Message
from .users import User


@dataclass
class MessagePage:
    """One page of a conversation, newest first."""

    messages: list[Message]
    start: int
    end: int  # -1 once the oldest message is included
    viewer_id: int  # drives the per-caller react annotation


@dataclass
class ChannelDetails:
    name: str
    is_public: bool
    owner_members: list[User]
    all_members: list[User]


@dataclass
class DmDetails:
    name: str
    members: list[User]


@dataclass
class StandupStatus:
    is_active: bool
    time_finish: int | None


@dataclass
class UserStats:
    channels_joined: int
    dms_joined: int
    messages_sent: int
    involvement_rate: float
    time_stamp: int


@dataclass
class WorkspaceStats:
    channels_exist: int
    dms_exist: int
    messages_exist: int
    utilization_rate: float
    time_stamp: int


@dataclass
class SearchResults:
    """Unranked matches for one caller."""

    messages: list[Message]
    viewer_id: int
