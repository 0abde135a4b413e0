"""Request and response models for the HTTP API (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel

from ..models import (
    Channel,
    ChannelDetails,
    Dm,
    DmDetails,
    Message,
    Notification,
    User,
    UserStats,
    WorkspaceStats,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class LoginRequest(CamelModel):
    email: str
    password: str


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str
    name_first: str
    name_last: str


class PasswordResetRequestBody(CamelModel):
    email: str


class PasswordResetBody(CamelModel):
    reset_code: str
    new_password: str


class ChannelCreateRequest(CamelModel):
    name: str
    is_public: bool


class ChannelIdRequest(CamelModel):
    channel_id: int


class ChannelUserRequest(CamelModel):
    channel_id: int
    u_id: int


class MessageSendRequest(CamelModel):
    channel_id: int
    message: str


class MessageSendDmRequest(CamelModel):
    dm_id: int
    message: str


class MessageEditRequest(CamelModel):
    message_id: int
    message: str


class MessageIdRequest(CamelModel):
    message_id: int


class ReactRequest(CamelModel):
    message_id: int
    react_id: int


class ShareRequest(CamelModel):
    og_message_id: int
    message: str = ""
    channel_id: int = -1
    dm_id: int = -1


class SendLaterRequest(CamelModel):
    channel_id: int
    message: str
    time_sent: int


class SendLaterDmRequest(CamelModel):
    dm_id: int
    message: str
    time_sent: int


class DmCreateRequest(CamelModel):
    u_ids: list[int]


class DmIdRequest(CamelModel):
    dm_id: int


class SetNameRequest(CamelModel):
    name_first: str
    name_last: str


class SetEmailRequest(CamelModel):
    email: EmailStr


class SetHandleRequest(CamelModel):
    handle_str: str


class UploadPhotoRequest(CamelModel):
    img_url: str
    x_start: int
    y_start: int
    x_end: int
    y_end: int


class PermissionChangeRequest(CamelModel):
    u_id: int
    permission_id: int


class StandupStartRequest(CamelModel):
    channel_id: int
    length: int


class StandupSendRequest(CamelModel):
    channel_id: int
    message: str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class AuthResponse(CamelModel):
    token: str
    auth_user_id: int


class UserProfile(CamelModel):
    u_id: int
    email: str | None
    name_first: str
    name_last: str
    handle_str: str | None
    profile_img_url: str | None = None


class ChannelSummary(CamelModel):
    channel_id: int
    name: str


class ChannelIdResponse(CamelModel):
    channel_id: int


class ChannelsResponse(CamelModel):
    channels: list[ChannelSummary]


class ChannelDetailsResponse(CamelModel):
    name: str
    is_public: bool
    owner_members: list[UserProfile]
    all_members: list[UserProfile]


class ReactOut(CamelModel):
    react_id: int
    u_ids: list[int]
    is_this_user_reacted: bool


class MessageOut(CamelModel):
    message_id: int
    u_id: int
    message: str
    time_sent: int
    reacts: list[ReactOut]
    is_pinned: bool


class MessagesResponse(CamelModel):
    messages: list[MessageOut]
    start: int
    end: int


class MessageIdResponse(CamelModel):
    message_id: int


class SharedMessageIdResponse(CamelModel):
    shared_message_id: int


class DmIdResponse(CamelModel):
    dm_id: int


class DmSummary(CamelModel):
    dm_id: int
    name: str


class DmsResponse(CamelModel):
    dms: list[DmSummary]


class DmDetailsResponse(CamelModel):
    name: str
    members: list[UserProfile]


class UserResponse(CamelModel):
    user: UserProfile


class UsersResponse(CamelModel):
    users: list[UserProfile]


class UserStatsOut(CamelModel):
    channels_joined: int
    dms_joined: int
    messages_sent: int
    involvement_rate: float
    time_stamp: int


class UserStatsResponse(CamelModel):
    user_stats: UserStatsOut


class WorkspaceStatsOut(CamelModel):
    channels_exist: int
    dms_exist: int
    messages_exist: int
    utilization_rate: float
    time_stamp: int


class WorkspaceStatsResponse(CamelModel):
    workspace_stats: WorkspaceStatsOut


class NotificationOut(CamelModel):
    channel_id: int
    dm_id: int
    notification_message: str


class NotificationsResponse(CamelModel):
    notifications: list[NotificationOut]


class StandupStartResponse(CamelModel):
    time_finish: int


class StandupActiveResponse(CamelModel):
    is_active: bool
    time_finish: int | None


class SearchResponse(CamelModel):
    messages: list[MessageOut]


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------
def user_profile(user: User) -> UserProfile:
    return UserProfile(
        u_id=user.u_id,
        email=user.email,
        name_first=user.name_first,
        name_last=user.name_last,
        handle_str=user.handle_str,
        profile_img_url=user.profile_img_url,
    )


def message_out(message: Message, viewer_id: int) -> MessageOut:
    """Render a message with reacts annotated for ``viewer_id``."""
    return MessageOut(
        message_id=message.message_id,
        u_id=message.u_id,
        message=message.message,
        time_sent=message.time_sent,
        reacts=[
            ReactOut(
                react_id=r.react_id,
                u_ids=list(r.u_ids),
                is_this_user_reacted=viewer_id in r.u_ids,
            )
            for r in message.reacts
        ],
        is_pinned=message.is_pinned,
    )


def channel_summary(channel: Channel) -> ChannelSummary:
    return ChannelSummary(channel_id=channel.channel_id, name=channel.name)


def channel_details(details: ChannelDetails) -> ChannelDetailsResponse:
    return ChannelDetailsResponse(
        name=details.name,
        is_public=details.is_public,
        owner_members=[user_profile(u) for u in details.owner_members],
        all_members=[user_profile(u) for u in details.all_members],
    )


def dm_summary(dm: Dm) -> DmSummary:
    return DmSummary(dm_id=dm.dm_id, name=dm.name)


def dm_details(details: DmDetails) -> DmDetailsResponse:
    return DmDetailsResponse(
        name=details.name, members=[user_profile(u) for u in details.members]
    )


def notification_out(notification: Notification) -> NotificationOut:
    return NotificationOut(
        channel_id=notification.channel_id,
        dm_id=notification.dm_id,
        notification_message=notification.notification_message,
    )


def user_stats_out(stats: UserStats) -> UserStatsOut:
    return UserStatsOut(
        channels_joined=stats.channels_joined,
        dms_joined=stats.dms_joined,
        messages_sent=stats.messages_sent,
        involvement_rate=stats.involvement_rate,
        time_stamp=stats.time_stamp,
    )


def workspace_stats_out(stats: WorkspaceStats) -> WorkspaceStatsOut:
    return WorkspaceStatsOut(
        channels_exist=stats.channels_exist,
        dms_exist=stats.dms_exist,
        messages_exist=stats.messages_exist,
        utilization_rate=stats.utilization_rate,
        time_stamp=stats.time_stamp,
    )
