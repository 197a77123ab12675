"""
Native status translation.

The native library reports the outcome of fallible calls as a small integer
(the canonical status code space used by sentencepiece). This module maps
every integer onto one of five outcomes and raises the matching exception.
"""

from enum import Enum, IntEnum
from typing import Any

from .exceptions import (
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    SentencePieceError,
    UnknownStatusError,
)

__all__ = ["Status", "StatusCode", "translate_status", "check_status", "status_name"]


class StatusCode(IntEnum):
    """Status codes returned by the native library."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class Status(Enum):
    """Outcome of a native call after translation."""

    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


_OUTCOMES = {
    StatusCode.OK: Status.OK,
    StatusCode.NOT_FOUND: Status.NOT_FOUND,
    StatusCode.INVALID_ARGUMENT: Status.INVALID_ARGUMENT,
    StatusCode.OUT_OF_RANGE: Status.INVALID_ARGUMENT,
    StatusCode.INTERNAL: Status.INTERNAL,
}

_EXCEPTIONS: dict[Status, type[SentencePieceError]] = {
    Status.NOT_FOUND: NotFoundError,
    Status.INVALID_ARGUMENT: InvalidArgumentError,
    Status.INTERNAL: InternalError,
    Status.UNKNOWN: UnknownStatusError,
}


def translate_status(code: int) -> Status:
    """
    Map a native status code to its outcome.

    Total over all integers: codes without an explicit mapping (including the
    native UNKNOWN code and values outside the native range) become
    ``Status.UNKNOWN``. Only 0 maps to ``Status.OK``.

    Example:
        >>> translate_status(11)
        <Status.INVALID_ARGUMENT: 'invalid_argument'>
        >>> translate_status(-7)
        <Status.UNKNOWN: 'unknown'>
    """
    return _OUTCOMES.get(code, Status.UNKNOWN)


def status_name(code: int) -> str:
    """Symbolic name of a native code, or ``"CODE_<n>"`` if it has none."""
    try:
        return StatusCode(code).name
    except ValueError:
        return f"CODE_{code}"


def check_status(code: int, message: str, details: dict[str, Any] | None = None) -> None:
    """
    Raise the exception for a native status code, unless it is OK.

    Args:
        code: Native status code.
        message: Description of the failed operation, e.g. "Decode failed".
        details: Extra context merged into the exception details.

    Raises
    ------
        NotFoundError, InvalidArgumentError, InternalError, UnknownStatusError
    """
    status = translate_status(code)
    if status is Status.OK:
        return

    name = status_name(code)
    error_details = dict(details) if details else {}
    error_details["status"] = name
    raise _EXCEPTIONS[status](
        f"{message}: {name.replace('_', ' ').lower()} (native status {code})",
        details=error_details,
        original_code=code,
    )
