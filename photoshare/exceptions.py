"""
PhotoShare Backend - Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions, one per failure category.
Why:   Services raise typed errors; a single set of handlers in main.py maps
       them to HTTP status codes and localized messages.
How:   Every exception carries an i18n message key (resolved against the
       request language at response time), optional format params, and a
       context dict. Client errors return the context as `details`; server
       errors only log it.

Exception Hierarchy:
    PhotoShareError (base)
    ├── ValidationError          → 400 Bad Request
    ├── UnauthenticatedError     → 401 Unauthorized
    ├── ForbiddenError           → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── FileStorageError         → 500 Internal Server Error
"""

from typing import Any, Dict, Optional

from photoshare.i18n import translate


class PhotoShareError(Exception):
    """
    Base exception for all PhotoShare application errors.

    Attributes:
        message_key: Catalog key used to build the user-facing message
        params:      Values interpolated into the localized message
        context:     Debug info; sent as `details` for 4xx, logged only for 5xx
    """

    status_code: int = 500
    error_code: str = "server_error"
    default_key: str = "GLOBAL.INTERNAL_ERROR"

    def __init__(
        self,
        message_key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        **params: Any,
    ):
        self.message_key = message_key or self.default_key
        self.params = params
        self.context = context or {}
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Message in the default language; handlers localize per request."""
        return translate(self.message_key, **self.params)

    def localized(self, lang: Optional[str] = None) -> str:
        return translate(self.message_key, lang, **self.params)


class ValidationError(PhotoShareError):
    """
    Raised when client input breaks a business rule.

    Schema failures caught by FastAPI share this status and error code
    (see the RequestValidationError handler in main.py). This class covers
    rules that need the database or span fields, e.g. "exactly one like target" or "parent comment belongs elsewhere".
    """

    status_code = 400
    error_code = "validation_error"
    default_key = "VALIDATION.FAILED"

    def __init__(
        self,
        message_key: Optional[str] = None,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        **params: Any,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message_key, context=ctx, **params)
        self.field = field


class UnauthenticatedError(PhotoShareError):
    """Missing, malformed, expired token, or a token for a user that is gone."""

    status_code = 401
    error_code = "unauthenticated"
    default_key = "AUTH.AUTHENTICATION_TOKEN_REQUIRED"


class ForbiddenError(PhotoShareError):
    """Authenticated, but not entitled to the resource (private or not owned)."""

    status_code = 403
    error_code = "forbidden"
    default_key = "GLOBAL.FORBIDDEN"


class NotFoundError(PhotoShareError):
    """
    Raised when a requested resource does not exist or is soft-deleted.

    SQLAlchemy returns None for missing rows; services convert that None
    into this exception so routes stay free of existence checks.
    """

    status_code = 404
    error_code = "not_found"
    default_key = "GLOBAL.NOT_FOUND"

    def __init__(
        self,
        message_key: Optional[str] = None,
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
        **params: Any,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message_key, context=ctx, **params)


class ConflictError(PhotoShareError):
    """The resource already exists (duplicate email, photo already in a collection)."""

    status_code = 409
    error_code = "conflict"
    default_key = "GLOBAL.CONFLICT"


class RateLimitExceededError(PhotoShareError):
    """Client exceeded the per-IP request budget for the current window."""

    status_code = 429
    error_code = "rate_limit_exceeded"
    default_key = "GLOBAL.RATE_LIMITED"

    def __init__(self, retry_after: int = 60, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(context=ctx, retry_after=retry_after)
        self.retry_after = retry_after


class FileStorageError(PhotoShareError):
    """
    Raised when object storage fails (disk full, permission denied).

    The message returned to the client is generic; the OS error and path go
    into `context` for the server log.
    """

    status_code = 500
    error_code = "server_error"
    default_key = "PHOTO.STORAGE_FAILED"
