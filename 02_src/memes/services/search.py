"""Message search across the caller's conversations."""

from ..config import MESSAGE_MAX_LENGTH
from ..errors import ValidationFailure
from ..models import SearchResults
from .base import WorkspaceService


class SearchService(WorkspaceService):
    async def search(self, token: str, query_str: str) -> SearchResults:
        """Case-insensitive substring match, unranked and unpaginated."""
        async with self._transaction(persist=False):
            if not 1 <= len(query_str) <= MESSAGE_MAX_LENGTH:
                raise ValidationFailure("query_str must be between 1 and 1000 characters")
            user = self._resolver.require_session(token)

            needle = query_str.lower()
            refs = {c.ref for c in self._store.conversations_of(user.u_id)}
            return SearchResults(
                messages=[
                    m
                    for m in self._store.messages.values()
                    if m.conversation in refs and needle in m.message.lower()
                ],
                viewer_id=user.u_id,
            )
