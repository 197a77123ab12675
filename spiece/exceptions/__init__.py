"""
spiece exceptions.

This module defines the exception hierarchy for spiece:

    SentencePieceError (base)
    ├── NotFoundError - Model file missing or unreadable
    ├── InvalidArgumentError - Malformed input
    ├── InternalError - Native-side invariant violation
    │   └── StateError - No model loaded, or processor closed
    ├── UnknownStatusError - Unrecognized native status code
    ├── AllocationError - Native allocation failed (fatal)
    └── LibraryError - Native library or symbol missing
"""

from .exceptions import (
    AllocationError,
    InternalError,
    InvalidArgumentError,
    LibraryError,
    NotFoundError,
    SentencePieceError,
    StateError,
    UnknownStatusError,
)

__all__ = [
    # Base
    "SentencePieceError",
    # Status outcomes
    "NotFoundError",
    "InvalidArgumentError",
    "InternalError",
    "StateError",
    "UnknownStatusError",
    # Fatal / environment
    "AllocationError",
    "LibraryError",
]
