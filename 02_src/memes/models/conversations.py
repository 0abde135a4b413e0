"""Channel and DM data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ConversationRef:
    """Points at exactly one channel or DM; the unused side is -1."""

    channel_id: int = -1
    dm_id: int = -1

    @classmethod
    def channel(cls, channel_id: int) -> "ConversationRef":
        return cls(channel_id=channel_id, dm_id=-1)

    @classmethod
    def dm(cls, dm_id: int) -> "ConversationRef":
        return cls(channel_id=-1, dm_id=dm_id)

    @property
    def is_channel(self) -> bool:
        return self.channel_id != -1


@dataclass
class Standup:
    """Timed buffering window of a channel."""

    initiator_id: int = -1
    is_active: bool = False
    time_finish: int | None = None  # whole-second ceiling of ``deadline``
    deadline: float | None = None
    buffer: list[str] = field(default_factory=list)

    def reset(self) -> None:
        self.initiator_id = -1
        self.is_active = False
        self.time_finish = None
        self.deadline = None
        self.buffer = []


@dataclass
class Channel:
    """A named conversation; owners are always a subset of members."""

    channel_id: int
    name: str
    is_public: bool
    owner_ids: list[int] = field(default_factory=list)
    member_ids: list[int] = field(default_factory=list)
    standup: Standup = field(default_factory=Standup)
    time_created: int = 0

    @property
    def ref(self) -> ConversationRef:
        return ConversationRef.channel(self.channel_id)

    def drop_member(self, u_id: int) -> None:
        """Remove ``u_id`` from members and owners.

        When the last owner goes while others remain, the earliest remaining
        member becomes owner.
        """
        if u_id in self.member_ids:
            self.member_ids.remove(u_id)
        if u_id in self.owner_ids:
            self.owner_ids.remove(u_id)
        if not self.owner_ids and self.member_ids:
            self.owner_ids.append(self.member_ids[0])


@dataclass
class Dm:
    """A direct-message group. Members only ever leave; the name never changes."""

    dm_id: int
    creator_id: int
    name: str
    member_ids: list[int] = field(default_factory=list)
    time_created: int = 0

    @property
    def ref(self) -> ConversationRef:
        return ConversationRef.dm(self.dm_id)
