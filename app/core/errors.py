"""Domain error taxonomy.

Services raise these; ``app.main`` renders them as ``{"error": message}``
with the status code carried by the exception class.
"""


class DomainError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    status_code = 400
    default_message = "Invalid input"


class InvalidCredentials(DomainError):
    """Login failed. Deliberately identical for unknown user and bad password."""

    status_code = 400
    default_message = "Invalid credentials"


class Unauthenticated(DomainError):
    status_code = 401
    default_message = "Not authenticated"


class InvalidSession(DomainError):
    status_code = 403
    default_message = "Invalid session"


class ExpiredSession(InvalidSession):
    default_message = "Session expired"


class Forbidden(DomainError):
    status_code = 403
    default_message = "Forbidden"


class SelfDeletionForbidden(DomainError):
    status_code = 400
    default_message = "You cannot delete your own account"


class NotFound(DomainError):
    """Row absent or owned by another tenant; the two are not distinguished."""

    status_code = 404
    default_message = "Not found"


class Conflict(DomainError):
    status_code = 409
    default_message = "Conflict"


class UpstreamFailure(DomainError):
    """Blob store or storage engine unreachable."""

    status_code = 502
    default_message = "Upstream service failure"
