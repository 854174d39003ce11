"""
Domain error codes and exceptions shared across layers.
"""

from typing import Optional

# Conflict
DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
DUPLICATE_USERNAME = "DUPLICATE_USERNAME"

# Unauthenticated
UNAUTHENTICATED = "UNAUTHENTICATED"
INVALID_ACCESS_TOKEN = "INVALID_ACCESS_TOKEN"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
ACCESS_DENIED = "ACCESS_DENIED"
INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"
TOKEN_EXPIRED = "TOKEN_EXPIRED"

# NotFound
USER_NOT_FOUND = "USER_NOT_FOUND"

# Infrastructure
INTERNAL_ERROR = "INTERNAL_ERROR"

# Validation
INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"


class UniqueConstraintViolation(Exception):
    """Raised by the user store when email or username is already taken."""

    def __init__(self, field: Optional[str] = None):
        self.field = field
        super().__init__(f"Unique constraint violated on {field or 'users'}")
