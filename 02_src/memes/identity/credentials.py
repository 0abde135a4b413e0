"""Password, session token and reset code primitives."""

import hashlib
import hmac
import os
import secrets

PBKDF2_ITERATIONS = 100_000


class Credentials:
    """Hashes secrets with a server-wide key; plain tokens are never stored."""

    def __init__(self, secret: str | None = None):
        self._secret = secret or os.getenv("MEMES_SECRET", "memes-dev-secret")

    def new_token(self) -> str:
        return secrets.token_urlsafe(24)

    def hash_token(self, token: str) -> str:
        return hashlib.sha512((token + self._secret).encode("utf-8")).hexdigest()

    def hash_password(self, password: str) -> str:
        salt = secrets.token_hex(16)
        digest = hashlib.pbkdf2_hmac(
            "sha256",
            (self._secret + password).encode("utf-8"),
            bytes.fromhex(salt),
            PBKDF2_ITERATIONS,
        )
        return f"{salt}${digest.hex()}"

    def verify_password(self, password: str, stored: str | None) -> bool:
        if not stored or "$" not in stored:
            return False
        salt, expected = stored.split("$", 1)
        digest = hashlib.pbkdf2_hmac(
            "sha256",
            (self._secret + password).encode("utf-8"),
            bytes.fromhex(salt),
            PBKDF2_ITERATIONS,
        )
        return hmac.compare_digest(digest.hex(), expected)

    def new_reset_code(self) -> str:
        return secrets.token_hex(5)
