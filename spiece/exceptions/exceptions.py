"""
spiece exceptions.

This module defines the exception hierarchy for spiece:

    SentencePieceError (base)
    ├── NotFoundError - Model file missing or unreadable
    ├── InvalidArgumentError - Malformed input (model bytes, ids, pieces, parameters)
    ├── InternalError - Native-side invariant violation or marshaling failure
    │   └── StateError - Processor has no model loaded, or was closed
    ├── UnknownStatusError - Native status code outside the recognized set
    ├── AllocationError - Native processor allocation failed (fatal)
    └── LibraryError - Native library or one of its symbols is missing

Usage:
    try:
        spp = spiece.SentencePieceProcessor.open("missing.model")
    except spiece.NotFoundError:
        print("no such model")
    except spiece.SentencePieceError as e:
        print(f"Error {e.code}: {e}")
        print(f"Details: {e.details}")
"""

from typing import Any

__all__ = [
    "SentencePieceError",
    "NotFoundError",
    "InvalidArgumentError",
    "InternalError",
    "StateError",
    "UnknownStatusError",
    "AllocationError",
    "LibraryError",
]


class SentencePieceError(Exception):
    """
    Base exception for all spiece errors.

    Attributes
    ----------
    message : str
        Human-readable error description.
    code : str
        Stable, string-based error code (e.g., "NOT_FOUND").
    details : dict[str, Any]
        Structured context (e.g., {"path": "...", "status": "OUT_OF_RANGE"}).
    original_code : int | None
        The native status code, when the error came from the native library.

    Example
    -------
    >>> try:
    ...     spp.decode([8, 100000])
    ... except spiece.SentencePieceError as e:
    ...     print(e.code, e.details)
    ID_OUT_OF_RANGE {'id': 100000, 'vocab_size': 1000}
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_code = original_code

    @property
    def message(self) -> str:
        return self.args[0]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, code={self.code!r})"


# =============================================================================
# Status Errors (one per translated native outcome)
# =============================================================================


class NotFoundError(SentencePieceError, FileNotFoundError):
    """
    Model file does not exist or cannot be read.

    Inherits from FileNotFoundError, so ``except FileNotFoundError`` works.
    """

    def __init__(
        self,
        message: str,
        code: str = "NOT_FOUND",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)


class InvalidArgumentError(SentencePieceError, ValueError):
    """
    Invalid input value.

    Raised for malformed serialized models, piece ids outside
    ``[0, vocab_size)``, strings with embedded NUL where the native side
    expects C strings, and out-of-range sampling parameters.

    Inherits from ValueError::

        except spiece.SentencePieceError:  # all spiece errors
        except ValueError:                 # validation errors (Pythonic)
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_ARGUMENT",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)


class InternalError(SentencePieceError, RuntimeError):
    """
    Native-side invariant violation.

    Raised when the native library reports an internal failure, returns a
    buffer that cannot be decoded, or an operation is attempted in a state
    where it cannot run.
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)


class StateError(InternalError):
    """
    Invalid processor state.

    Raised when an operation needs a loaded model but none is loaded
    (code "MODEL_NOT_LOADED"), or when the processor was already closed
    (code "PROCESSOR_CLOSED").
    """

    def __init__(
        self,
        message: str,
        code: str = "STATE_ERROR",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)


class UnknownStatusError(SentencePieceError, RuntimeError):
    """
    Native status code outside the recognized set.

    Never treated as success. ``original_code`` holds the raw value and
    ``details["status"]`` its symbolic name when the code is a known
    native status.
    """

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)


# =============================================================================
# Fatal / Environment Errors
# =============================================================================


class AllocationError(SentencePieceError, MemoryError):
    """
    The native library could not allocate a processor.

    This is not a recoverable status: it means the process is out of memory.
    """

    def __init__(
        self,
        message: str = "Native processor allocation failed",
        code: str = "ALLOCATION_FAILED",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)


class LibraryError(SentencePieceError, ImportError):
    """
    The native shared library could not be loaded.

    Raised when no library is found in any searched location, or when the
    library lacks one of the symbols the binding needs. ``details`` lists
    the searched paths or the missing symbols.

    Solutions:
    - Point ``SPIECE_LIBRARY`` at the built ``libsentencepiece_ffi`` library
    - Call ``spiece.load_library(path)`` before creating processors
    """

    def __init__(
        self,
        message: str,
        code: str = "LIBRARY_ERROR",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)
