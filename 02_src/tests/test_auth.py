"""Tests for AuthService and session handling."""

import pytest

from memes.errors import AuthorizationFailure, ValidationFailure
from memes.models import Permission


class TestRegister:
    """Tests for registration."""

    @pytest.mark.asyncio
    async def test_first_user_is_global_owner(self, app, owner, member):
        assert app.store.user(owner.auth_user_id).permission == Permission.OWNER
        assert app.store.user(member.auth_user_id).permission == Permission.MEMBER

    @pytest.mark.asyncio
    async def test_handle_generation(self, app, register):
        first = await register("Ada", "Lovelace", "ada1@example.com")
        second = await register("Ada", "Lovelace", "ada2@example.com")
        third = await register("Ada", "Lovelace", "ada3@example.com")
        long = await register("Abcdefghijklmno", "Pqrstuvwxyz", "long@example.com")
        punctuated = await register("Jean-Luc", "O'Neil", "jl@example.com")

        handles = [
            app.store.user(s.auth_user_id).handle_str
            for s in (first, second, third, long, punctuated)
        ]
        assert handles == [
            "adalovelace",
            "adalovelace0",
            "adalovelace1",
            "abcdefghijklmnopqrst",
            "jeanluconeil",
        ]

    @pytest.mark.asyncio
    async def test_profile_photo_defaults(self, app, owner):
        assert app.store.user(owner.auth_user_id).profile_img_url.endswith(
            "/default/default.jpg"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email,password,first,last",
        [
            ("not-an-email", "password123", "Ada", "Lovelace"),
            ("ada@example.com", "short", "Ada", "Lovelace"),
            ("ada@example.com", "password123", "", "Lovelace"),
            ("ada@example.com", "password123", "Ada", "x" * 51),
        ],
    )
    async def test_invalid_input(self, app, email, password, first, last):
        with pytest.raises(ValidationFailure):
            await app.auth.register(email, password, first, last)
        assert app.store.users == {}

    @pytest.mark.asyncio
    async def test_email_taken(self, app, owner):
        with pytest.raises(ValidationFailure):
            await app.auth.register("ada.lovelace@example.com", "password123", "A", "L")


class TestSessions:
    """Tests for login and logout."""

    @pytest.mark.asyncio
    async def test_login_issues_distinct_tokens(self, app, owner):
        session = await app.auth.login("ada.lovelace@example.com", "password123")

        assert session.auth_user_id == owner.auth_user_id
        assert session.token != owner.token
        assert len(app.store.user(owner.auth_user_id).tokens) == 2

    @pytest.mark.asyncio
    async def test_login_errors(self, app, owner):
        with pytest.raises(ValidationFailure):
            await app.auth.login("nobody@example.com", "password123")
        with pytest.raises(ValidationFailure):
            await app.auth.login("ada.lovelace@example.com", "wrong-password")

    @pytest.mark.asyncio
    async def test_logout_invalidates_only_that_token(self, app, owner):
        second = await app.auth.login("ada.lovelace@example.com", "password123")

        await app.auth.logout(owner.token)

        with pytest.raises(AuthorizationFailure):
            await app.channels.list_mine(owner.token)
        with pytest.raises(AuthorizationFailure):
            await app.auth.logout(owner.token)
        assert await app.channels.list_mine(second.token) == []

    @pytest.mark.asyncio
    async def test_tokens_are_stored_hashed(self, app, owner):
        assert owner.token not in app.store.user(owner.auth_user_id).tokens


class TestPasswordReset:
    """Tests for the reset-code flow."""

    @pytest.mark.asyncio
    async def test_reset_flow(self, app, mailer, owner):
        await app.auth.password_reset_request("ada.lovelace@example.com")

        to_email, subject, body = mailer.outbox[-1]
        assert to_email == "ada.lovelace@example.com"
        assert subject == "Memes password reset"
        code = body.rsplit(" ", 1)[-1]

        await app.auth.password_reset(code, "new-password")

        await app.auth.login("ada.lovelace@example.com", "new-password")
        with pytest.raises(ValidationFailure):
            await app.auth.login("ada.lovelace@example.com", "password123")
        # Codes are single use
        with pytest.raises(ValidationFailure):
            await app.auth.password_reset(code, "another-password")

    @pytest.mark.asyncio
    async def test_unknown_email(self, app, mailer):
        with pytest.raises(ValidationFailure):
            await app.auth.password_reset_request("nobody@example.com")
        assert mailer.outbox == []

    @pytest.mark.asyncio
    async def test_short_new_password(self, app, mailer, owner):
        await app.auth.password_reset_request("ada.lovelace@example.com")
        code = mailer.outbox[-1][2].rsplit(" ", 1)[-1]

        with pytest.raises(ValidationFailure):
            await app.auth.password_reset(code, "abc")

    @pytest.mark.asyncio
    async def test_invalid_code(self, app, owner):
        with pytest.raises(ValidationFailure):
            await app.auth.password_reset("", "new-password")
        with pytest.raises(ValidationFailure):
            await app.auth.password_reset("deadbeef00", "new-password")
