"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these exceptions; ``main.create_app`` registers
handlers that turn each of them into a response.  Handlers for
``Unauthenticated`` and ``NotFound`` send an empty body so that a
client cannot tell why a request was refused.
"""


class TodoApiError(Exception):
    """Base class for errors with a fixed HTTP status."""

    status_code = 400

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class ValidationError(TodoApiError):
    """Input was well formed JSON but its content is not acceptable."""


class DuplicateEmail(TodoApiError):
    """A user with the given email already exists."""


class InvalidCredentials(TodoApiError):
    """Unknown email or wrong password (deliberately not distinguished)."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class InvalidToken(TodoApiError):
    """Token signature mismatch or malformed token."""

    status_code = 401


class Unauthenticated(TodoApiError):
    status_code = 401


class NotFound(TodoApiError):
    """Unknown id, malformed id, or a document owned by someone else."""

    status_code = 404
