"""
Domain errors raised by the services and rendered by the API layer.

Each error knows the HTTP status it maps to; the handler registered in
``fresh_laundry.main`` turns it into a ``{"message": ...}`` JSON body.
"""

from typing import Optional

from fastapi import status


class LaundryError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None, headers: Optional[dict] = None):
        self.message = message or self.default_message
        self.headers = headers
        # Diagnostic detail returned to the caller, only set on the order placement path.
        self.error = error
        super().__init__(self.message)


class InvalidInput(LaundryError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Unauthorized(LaundryError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Forbidden(LaundryError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin role required"


class NotFound(LaundryError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(LaundryError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class Internal(LaundryError):
    pass
