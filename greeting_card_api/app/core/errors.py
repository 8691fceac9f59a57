"""
Error taxonomy for greeting operations.

Services raise these exceptions; ``main.create_app`` registers handlers
that turn them into JSON responses of the form
``{"error": <code>, "message": <text>}``.  The ``code`` is meant for
programs, the ``message`` for people.
"""

from fastapi import status


class GreetingError(Exception):
    """Base class for all greeting errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "server_error"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, code: str | None = None) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class GreetingValidationError(GreetingError):
    """Client-correctable input problem (HTTP 400)."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid greeting data"


class GreetingNotFoundError(GreetingError):
    """No greeting exists for the requested identifier (HTTP 404)."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Greeting not found"


class GreetingStoreError(GreetingError):
    """The persistence store failed (HTTP 500).

    The message returned to clients is always generic; details go to the
    log only.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "store_error"
    default_message = "Failed to access greeting storage"


class GreetingConflictError(GreetingStoreError):
    """An insert hit an identifier that is already taken."""

    default_message = "Greeting identifier already exists"
