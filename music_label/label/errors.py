"""Result type and error conventions for label ledger operations.

Every ledger operation returns a Result instead of raising for expected
conditions. A Result is either "ok" with a payload, or "err" with one of the
stable numeric codes below. The numeric values are relied on by existing
callers and must never change.

Usage:
    from music_label.label.errors import ErrorCode, ok, not_found

    if artist_id not in self.artists:
        return not_found(f"Artist {artist_id} not found", artist_id=artist_id)
    return ok(new_id)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Generic, Literal, TypeVar


T = TypeVar("T")


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - RESOURCE: Referenced entity missing or colliding
    - PERMISSION: Operation not allowed in the current state
    - VALIDATION: Caller supplied malformed arguments (host surface only)
    """

    RESOURCE = "resource"
    PERMISSION = "permission"
    VALIDATION = "validation"


class ErrorCode(IntEnum):
    """Stable numeric error codes."""

    NOT_FOUND = 101  # Referenced artist or song does not exist
    ALREADY_EXISTS = 102  # Id collision
    UNAUTHORIZED = 103  # Royalty distribution with no positive balance


_CATEGORIES: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.NOT_FOUND: ErrorCategory.RESOURCE,
    ErrorCode.ALREADY_EXISTS: ErrorCategory.RESOURCE,
    ErrorCode.UNAUTHORIZED: ErrorCategory.PERMISSION,
}


@dataclass(frozen=True)
class Result(Generic[T]):
    """Tagged success/error value.

    For "ok" results, value holds the payload. For "err" results, value holds
    the numeric error code, so callers written against the {type, value}
    shape keep working.
    """

    type: Literal["ok", "err"]
    value: Any
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_ok(self) -> bool:
        return self.type == "ok"

    @property
    def is_err(self) -> bool:
        return self.type == "err"

    @property
    def code(self) -> ErrorCode | None:
        """The error code, or None for ok results."""
        if self.is_ok:
            return None
        return ErrorCode(self.value)

    def unwrap(self) -> T:
        """Return the ok payload, raising ValueError on an error result."""
        if self.is_err:
            raise ValueError(f"unwrap() on error result {self.value}: {self.message}")
        return self.value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if self.is_ok:
            result: dict[str, Any] = {"success": True, "value": self.value}
            if self.details:
                result["details"] = dict(self.details)
            return result
        code = ErrorCode(self.value)
        result = {
            "success": False,
            "error": self.message,
            "code": int(code),
            "category": _CATEGORIES[code].value,
            "retriable": False,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result


# Factory functions for creating results


def ok(value: T, **details: Any) -> Result[T]:
    """Create a success result."""
    return Result(type="ok", value=value, details=dict(details))


def error(code: ErrorCode, message: str, **details: Any) -> Result[Any]:
    """Create an error result carrying the numeric code as its value."""
    return Result(type="err", value=int(code), message=message, details=dict(details))


def not_found(message: str, **details: Any) -> Result[Any]:
    """Referenced artist or song does not exist."""
    return error(ErrorCode.NOT_FOUND, message, **details)


def already_exists(message: str, **details: Any) -> Result[Any]:
    """Id collision on creation."""
    return error(ErrorCode.ALREADY_EXISTS, message, **details)


def unauthorized(message: str, **details: Any) -> Result[Any]:
    """Operation not permitted in the current state."""
    return error(ErrorCode.UNAUTHORIZED, message, **details)


def validation_error(
    message: str,
    code: str = "invalid_argument",
    **details: object,
) -> dict[str, object]:
    """Create a host-level validation error response.

    Used by the contract surface when invoke() arguments are malformed. These
    never reach the ledger, so they use string codes outside the stable
    numeric table.
    """
    response: dict[str, object] = {
        "success": False,
        "error": message,
        "code": code,
        "category": ErrorCategory.VALIDATION.value,
        "retriable": False,
    }
    if details:
        response["details"] = dict(details)
    return response
