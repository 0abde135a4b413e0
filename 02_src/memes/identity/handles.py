"""Handle generation and validation."""

import re

from ..config import HANDLE_MAX_LENGTH, HANDLE_MIN_LENGTH

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_ALNUM = re.compile(r"^[a-zA-Z0-9]+$")


def generate_handle(name_first: str, name_last: str, taken: set[str]) -> str:
    """Lowercase alphanumeric concatenation of both names, cut at 20 chars.

    When the base handle is taken, the smallest integer starting from 0 that
    makes it unique is appended, which may push it past 20 characters.
    """
    base = _NON_ALNUM.sub("", (name_first + name_last).lower())[:HANDLE_MAX_LENGTH]
    if base not in taken:
        return base

    suffix = 0
    while f"{base}{suffix}" in taken:
        suffix += 1
    return f"{base}{suffix}"


def is_valid_handle(handle: str) -> bool:
    return (
        HANDLE_MIN_LENGTH <= len(handle) <= HANDLE_MAX_LENGTH
        and _ALNUM.match(handle) is not None
    )
