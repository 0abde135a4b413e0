"""Registration, sessions and password reset."""

import time
from dataclasses import dataclass
from typing import Callable

from email_validator import EmailNotValidError, validate_email

from ..config import NAME_MAX_LENGTH, PASSWORD_MIN_LENGTH, default_photo_url
from ..errors import ValidationFailure
from ..identity import Credentials, IdentityResolver, IMailer, generate_handle
from ..logging_config import context, get_logger
from ..messaging import Transaction
from ..models import Permission, User
from ..storage import WorkspaceStore
from .base import WorkspaceService

logger = get_logger(__name__)

RESET_SUBJECT = "Memes password reset"


@dataclass
class AuthSession:
    token: str
    auth_user_id: int


def check_email(email: str) -> None:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationFailure("email is not a valid email address") from e


def check_name(name: str, field_name: str) -> None:
    if not 1 <= len(name) <= NAME_MAX_LENGTH:
        raise ValidationFailure(f"{field_name} must be between 1 and 50 characters")


def check_password(password: str) -> None:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationFailure("password must be at least 6 characters")


class AuthService(WorkspaceService):
    """Account creation and session lifecycle.

    Tokens grow only through register and login, and shrink only through
    logout (or admin removal).
    """

    def __init__(
        self,
        store: WorkspaceStore,
        resolver: IdentityResolver,
        credentials: Credentials,
        mailer: IMailer,
        transaction: Transaction,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(store, resolver, transaction, clock)
        self._credentials = credentials
        self._mailer = mailer

    async def register(
        self, email: str, password: str, name_first: str, name_last: str
    ) -> AuthSession:
        async with self._transaction():
            check_email(email)
            if self._store.user_by_email(email) is not None:
                raise ValidationFailure("email is already in use")
            check_password(password)
            check_name(name_first, "name_first")
            check_name(name_last, "name_last")

            taken = {u.handle_str for u in self._store.users.values() if u.handle_str}
            user = User(
                u_id=self._store.allocate_id("user"),
                email=email,
                password_hash=self._credentials.hash_password(password),
                name_first=name_first,
                name_last=name_last,
                handle_str=generate_handle(name_first, name_last, taken),
                # First account owns the workspace
                permission=Permission.OWNER if not self._store.users else Permission.MEMBER,
                profile_img_url=default_photo_url(),
                time_created=self._now(),
            )
            self._store.add_user(user)
            token = self._issue_token(user)

            logger.info(
                "User registered",
                extra=context(u_id=user.u_id, handle=user.handle_str),
            )
            return AuthSession(token=token, auth_user_id=user.u_id)

    async def login(self, email: str, password: str) -> AuthSession:
        async with self._transaction():
            user = self._store.user_by_email(email)
            if user is None:
                raise ValidationFailure("email is not registered")
            if not self._credentials.verify_password(password, user.password_hash):
                raise ValidationFailure("password is incorrect")

            token = self._issue_token(user)
            logger.info("User logged in", extra=context(u_id=user.u_id))
            return AuthSession(token=token, auth_user_id=user.u_id)

    async def logout(self, token: str) -> None:
        async with self._transaction():
            user = self._resolver.require_session(token)
            user.tokens.remove(self._credentials.hash_token(token))
            logger.info("User logged out", extra=context(u_id=user.u_id))

    async def password_reset_request(self, email: str) -> None:
        """Store a one-shot reset code and mail it to the user."""
        async with self._transaction():
            user = self._store.user_by_email(email)
            if user is None:
                raise ValidationFailure("email is not registered")
            reset_code = self._credentials.new_reset_code()
            user.reset_code = reset_code

        # Mail goes out after the store is released
        await self._mailer.send(
            email, RESET_SUBJECT, f"Your password reset code is {reset_code}"
        )
        logger.info("Password reset requested", extra=context(u_id=user.u_id))

    async def password_reset(self, reset_code: str, new_password: str) -> None:
        async with self._transaction():
            check_password(new_password)
            user = self._store.user_by_reset_code(reset_code) if reset_code else None
            if user is None:
                raise ValidationFailure("reset_code is invalid")

            user.password_hash = self._credentials.hash_password(new_password)
            user.reset_code = None
            logger.info("Password reset", extra=context(u_id=user.u_id))

    def _issue_token(self, user: User) -> str:
        token = self._credentials.new_token()
        user.tokens.append(self._credentials.hash_token(token))
        return token
