"""
Error taxonomy for the data-access layer.

Every error raised by repositories, stores and the cascade coordinator
derives from BlogContentError and carries:
- kind: ErrorKind tag, the value callers should branch on
- status_code: HTTP status a handler layer should translate it to
- details: structured context (field errors, keys, ...)

Handlers check ``err.kind`` rather than ``isinstance`` chains.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class ErrorKind(str, Enum):
    """Tag identifying the error variant."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    FOREIGN_KEY = "foreign_key"
    CONFLICT = "conflict"
    CASCADE = "cascade"
    DECODE = "decode"
    STORE_UNAVAILABLE = "store_unavailable"


class BlogContentError(Exception):
    """Base exception for the BlogContent data-access layer"""

    kind: ErrorKind
    status_code: int = 500
    retryable: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        retryable: Optional[bool] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}
        if retryable is not None:
            self.retryable = retryable

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the error for a response body or a log record.

        Returns:
            Dictionary with kind, message and details
        """
        return {
            "kind": self.kind.value,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class ValidationError(BlogContentError):
    """Raised when input is missing required fields or has the wrong shape"""

    kind = ErrorKind.VALIDATION
    status_code = 400


class NotFoundError(BlogContentError):
    """Raised when an entity does not exist"""

    kind = ErrorKind.NOT_FOUND
    status_code = 404


class ForeignKeyError(BlogContentError):
    """Raised when a referenced entity (user, blog) does not exist"""

    kind = ErrorKind.FOREIGN_KEY
    status_code = 400


class ConflictError(BlogContentError):
    """Raised when a conditional write finds an existing item"""

    kind = ErrorKind.CONFLICT
    status_code = 409


class DecodeError(BlogContentError):
    """Raised when the store returns an item that does not decode"""

    kind = ErrorKind.DECODE
    status_code = 500


class StoreUnavailable(BlogContentError):
    """Raised on transport, throttling or timeout failures; safe to retry"""

    kind = ErrorKind.STORE_UNAVAILABLE
    status_code = 503
    retryable = True


class CascadeError(BlogContentError):
    """
    Raised when a cascading delete stops part way.

    Already-deleted children are not restored. The message enumerates
    what was removed and what is still present.

    Attributes:
        deleted: Keys removed before the failure, in order
        remaining: Planned keys that were not removed
        cause: The error that stopped the cascade
    """

    kind = ErrorKind.CASCADE
    status_code = 500

    def __init__(
        self,
        root: str,
        deleted: Sequence[Any],
        remaining: Sequence[Any],
        cause: BaseException,
    ):
        self.deleted: List[Any] = list(deleted)
        self.remaining: List[Any] = list(remaining)
        self.cause = cause
        message = (
            f"Cascade delete of {root} stopped after {len(self.deleted)} deletions: "
            f"{cause}. Deleted: {_format_keys(self.deleted)}. "
            f"Not deleted: {_format_keys(self.remaining)}"
        )
        super().__init__(
            message,
            details={
                "root": root,
                "deleted": [str(k) for k in self.deleted],
                "remaining": [str(k) for k in self.remaining],
                "cause": repr(cause),
            },
        )


def _format_keys(keys: Sequence[Any]) -> str:
    if not keys:
        return "none"
    return ", ".join(str(k) for k in keys)
