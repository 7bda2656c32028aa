"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the handlers registered in
app.main turn them into `{"message": ...}` responses.
"""


class RecipeAppError(Exception):
    """Base class for errors that are reported to the client as-is."""
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RecipeAppError):
    """Missing or malformed input."""
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(RecipeAppError):
    """Missing, invalid or expired token, or bad credentials."""
    status_code = 401
    default_message = "Not authenticated"


class NotFoundError(RecipeAppError):
    # Also used when the caller does not own the row, so the two cases look the same.
    status_code = 404
    default_message = "Not found"


class ConflictError(RecipeAppError):
    """Duplicate email or duplicate like."""
    status_code = 409
    default_message = "Conflict"


class ServerError(RecipeAppError):
    status_code = 500
