"""Error taxonomy shared by the services and the HTTP layer.

Each error carries the HTTP status it maps to; ``main.py`` renders them as
``{"message": ...}`` bodies.
"""


class TaskerError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskerError):
    """A required field is missing or malformed."""

    status_code = 400
    default_message = "Invalid request"


class AuthError(TaskerError):
    """Credentials did not verify. The message never says which check failed."""

    status_code = 401
    default_message = "Invalid email or password"


class NotFoundError(TaskerError):
    status_code = 404
    default_message = "Not found"


class ConflictError(TaskerError):
    status_code = 409
    default_message = "Already exists"


class InternalError(TaskerError):
    status_code = 500


class StoreUnavailableError(TaskerError):
    status_code = 503
    default_message = "Database not ready, please try again shortly"
