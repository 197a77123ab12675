"""
Native library loading and buffer marshaling.

Justification: Owns the single ctypes handle to the sentencepiece_ffi shim,
declares its signatures once (via _native.py), and provides the helpers every
call site uses to move bytes across the boundary: ``to_c_buffer`` for
host-to-native text and ``take_buffer`` for native-owned results, which are
copied and released immediately.
"""

import ctypes
import ctypes.util
import os
import sys
import threading
from pathlib import Path
from typing import Any

from . import _native
from ._logging import scoped_logger
from .exceptions import InternalError, InvalidArgumentError, LibraryError

logger = scoped_logger("ffi")

__all__ = [
    "get_lib",
    "set_lib",
    "load_library",
    "find_library_path",
    "to_c_buffer",
    "to_c_string",
    "take_buffer",
]

LIBRARY_ENV_VAR = "SPIECE_LIBRARY"
LIBRARY_NAME = "sentencepiece_ffi"

_lib: Any = None
_lib_lock = threading.RLock()


# =============================================================================
# Library Discovery
# =============================================================================


def _shared_library_filename() -> str:
    if sys.platform == "win32":
        return f"{LIBRARY_NAME}.dll"
    if sys.platform == "darwin":
        return f"lib{LIBRARY_NAME}.dylib"
    return f"lib{LIBRARY_NAME}.so"


def find_library_path() -> tuple[str | None, list[str]]:
    """
    Locate the native library.

    Search order: ``SPIECE_LIBRARY``, a library bundled next to this package,
    then the system loader path.

    Returns
    -------
        Tuple of (path_or_name, searched). path_or_name is None if nothing
        was found; searched lists every location tried.
    """
    searched: list[str] = []

    env_path = os.environ.get(LIBRARY_ENV_VAR)
    if env_path:
        searched.append(env_path)
        if Path(env_path).exists():
            return (env_path, searched)

    bundled = Path(__file__).parent / _shared_library_filename()
    searched.append(str(bundled))
    if bundled.exists():
        return (str(bundled), searched)

    searched.append(f"system:{LIBRARY_NAME}")
    system = ctypes.util.find_library(LIBRARY_NAME)
    if system:
        return (system, searched)

    return (None, searched)


def load_library(path: str | os.PathLike | None = None) -> Any:
    """
    Load the native library and make it the active one.

    Args:
        path: Explicit path to the shared library. If None, the search order
            of ``find_library_path()`` is used.

    Returns
    -------
        The configured ctypes library.

    Raises
    ------
        LibraryError: If the library cannot be found or opened, or lacks a
            required symbol.
    """
    global _lib

    if path is not None:
        resolved, searched = os.fspath(path), [os.fspath(path)]
    else:
        resolved, searched = find_library_path()
    if resolved is None:
        raise LibraryError(
            f"Native library '{LIBRARY_NAME}' not found. "
            f"Set {LIBRARY_ENV_VAR} to the path of the built library.",
            code="LIBRARY_NOT_FOUND",
            details={"searched": searched},
        )

    try:
        lib = ctypes.CDLL(resolved)
    except OSError as exc:
        raise LibraryError(
            f"Cannot load native library '{resolved}': {exc}",
            code="LIBRARY_NOT_FOUND",
            details={"path": resolved, "searched": searched},
        ) from exc

    missing = _native.missing_symbols(lib)
    if missing:
        raise LibraryError(
            f"Native library '{resolved}' is missing symbols: {', '.join(missing)}",
            code="LIBRARY_SYMBOL_MISSING",
            details={"path": resolved, "missing": missing},
        )

    _native.configure(lib)
    with _lib_lock:
        _lib = lib
    logger.debug("Native library loaded", extra={"path": resolved})
    return lib


def get_lib() -> Any:
    """Return the active native library, loading it on first use."""
    if _lib is not None:
        return _lib
    with _lib_lock:
        if _lib is None:
            load_library()
        return _lib


def set_lib(lib: Any) -> Any:
    """
    Replace the active native library.

    ``lib`` must expose every symbol in ``_native.SIGNATURES`` with its
    signature already declared. Handles created under the previous library
    must be released before they are used with another one.

    Returns
    -------
        The previously active library (None if none was loaded).
    """
    global _lib
    with _lib_lock:
        previous, _lib = _lib, lib
    return previous


# =============================================================================
# Host -> Native
# =============================================================================


def to_c_buffer(data: bytes) -> "ctypes.Array[ctypes.c_char]":
    """Copy bytes into a c_char array; the length travels separately."""
    return (ctypes.c_char * len(data)).from_buffer_copy(data)


def to_c_string(text: str | bytes, what: str) -> bytes:
    """
    Encode a value for a native parameter that is a NUL-terminated string.

    Raises
    ------
        InvalidArgumentError: If the value contains a NUL byte, which the
            native side would silently truncate.
    """
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    if b"\x00" in data:
        raise InvalidArgumentError(
            f"{what} contains a NUL byte",
            details={"param": what, "value": text},
        )
    return data


# =============================================================================
# Native -> Host
# =============================================================================


def take_buffer(ptr: int | None, length: int, lib: Any = None) -> bytes:
    """
    Copy a native-owned buffer into bytes and free it.

    The native allocation is released on every path, including when the
    copy fails. A null pointer with zero length is an empty result.

    Args:
        ptr: Address returned by the native call (None/0 for null).
        length: Number of valid bytes at ``ptr``.
        lib: Library whose allocator owns ``ptr``; defaults to the active one.

    Raises
    ------
        InternalError: If ``ptr`` is null but ``length`` is non-zero, or the
            host cannot allocate the copy.
    """
    if not ptr:
        if length:
            raise InternalError(
                "Native call returned a null buffer with non-zero length",
                details={"length": length},
            )
        return b""

    lib = lib if lib is not None else get_lib()
    try:
        return ctypes.string_at(ptr, length)
    except MemoryError as exc:
        raise InternalError(
            "Out of memory copying native buffer", details={"length": length}
        ) from exc
    finally:
        lib.free(ptr)
