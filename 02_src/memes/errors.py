"""Failure kinds raised by workspace operations."""


class WorkspaceError(Exception):
    """Base class for failures reported back to the caller."""

    status_code = 500
    kind = "workspace_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_response(self) -> dict:
        """Body rendered by the HTTP layer."""
        return {"error": self.kind, "message": self.message}


class ValidationFailure(WorkspaceError):
    """Malformed input or a reference to something that does not exist."""

    status_code = 400
    kind = "validation_failure"


class AuthorizationFailure(WorkspaceError):
    """Valid request, but the session is invalid or lacks the rights."""

    status_code = 403
    kind = "authorization_failure"
