"""@handle tag scanning."""

import re

_TAG = re.compile(r"@([a-z0-9]+)", re.IGNORECASE)


def unique_tags(body: str) -> list[str]:
    """Handles tagged in ``body``, first occurrence order, case-insensitively unique.

    Only the first tag of each space-separated word counts.
    """
    seen: set[str] = set()
    tags = []
    for word in body.split(" "):
        match = _TAG.search(word)
        if match is None:
            continue
        handle = match.group(1)
        if handle.lower() not in seen:
            seen.add(handle.lower())
            tags.append(handle)
    return tags
