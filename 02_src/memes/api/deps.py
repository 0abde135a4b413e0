"""Shared route dependencies."""

from fastapi import Header


def session_token(token: str = Header(default="")) -> str:
    """Session token from the ``token`` header; missing means empty."""
    return token
