############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# errors.py: Domain error taxonomy and HTTP status mapping
#
############################################################

"""Domain errors raised by services and guards.

Every error carries the HTTP status it maps to and a short machine-readable
type. The exception handlers in ``main.py`` render them as::

    {"error": {"message": "...", "type": "..."}}
"""

from typing import Any, Dict, Optional


class CMSError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = 500
    error_type: str = "server_error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON error envelope."""
        return {"error": {"message": self.message, "type": self.error_type}}


# 400
class ValidationError(CMSError):
    status_code = 400
    error_type = "validation_error"
    default_message = "Invalid request"


class DuplicateError(CMSError):
    """Unique-constraint violation."""
    status_code = 400
    error_type = "duplicate_error"
    default_message = "Resource already exists"


class DuplicateEmail(DuplicateError):
    default_message = "An author with this email already exists"


class EmailInUse(DuplicateError):
    default_message = "Email is already in use by another author"


class DuplicateSlug(DuplicateError):
    default_message = "Slug already exists"


class DuplicateName(DuplicateError):
    default_message = "Name already exists"


class DuplicateTitle(DuplicateError):
    default_message = "Title already exists"


# 401
class Unauthorized(CMSError):
    status_code = 401
    error_type = "unauthorized"
    default_message = "Not authorized"


class TokenMissing(Unauthorized):
    default_message = "Not authorized, no token"


class TokenInvalid(Unauthorized):
    default_message = "Not authorized, token failed"


class TokenExpired(Unauthorized):
    default_message = "Not authorized, token expired"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid email or password"


# 403
class Forbidden(CMSError):
    status_code = 403
    error_type = "forbidden"
    default_message = "Forbidden"


# 404
class NotFound(CMSError):
    status_code = 404
    error_type = "not_found"
    default_message = "Not found"


# 500
class InternalError(CMSError):
    pass
