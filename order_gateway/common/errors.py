import functools
import logging
from typing import Any, Dict, Optional

_logger = logging.getLogger(__name__)

# Substrings of Google API error text and the message shown for them.
_BACKEND_HINTS = (
    ("Unable to parse range", "Sheet configuration error. Please verify the sheet name and column range."),
    ("Requested entity was not found", "Spreadsheet not found. Please verify the spreadsheet id configuration."),
    ("The caller does not have permission", "Access denied. Please share the spreadsheet with the service account email."),
)


class ApiError(Exception):
    """Base for errors rendered as a ``{success: false, ...}`` envelope."""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None, **extra: Any):
        super().__init__(message)
        self.message = message
        self.error = error
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
        body.update(self.extra)
        return body


class ValidationError(ApiError):
    status_code = 400


class AuthError(ApiError):
    status_code = 401


class NotFoundError(ApiError):
    status_code = 404


class BackendError(ApiError):
    status_code = 500


def describe_backend_error(exc: BaseException, default: str) -> str:
    text = str(exc)
    for needle, message in _BACKEND_HINTS:
        if needle in text:
            return message
    return default


def translate_errors(default_message: str):
    """Wrap an async handler so unexpected failures become a BackendError.

    ApiError subclasses pass through untouched; anything else (Google API
    errors, broken joins, lock timeouts) is logged and re-raised as a 500
    whose message is picked from the error text.
    """

    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except ApiError:
                raise
            except Exception as e:
                _logger.exception("%s | err=%s", default_message, e)
                raise BackendError(describe_backend_error(e, default_message), error=str(e)) from e

        return wrapper

    return decorator
