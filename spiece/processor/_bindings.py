"""
FFI bindings for the processor.

Justification: Provides one call wrapper per spp_* entry point. Wrappers take
handles as integers and Python bytes, build the ctypes arguments
(from_buffer_copy arrays, byref out-params), and hand every native-owned
result to ``take_buffer`` so it is copied and freed before returning.
Status-returning calls return ``(code, result)``; callers translate codes.

Every wrapper takes the library the handle was created with. A handle must
never be used or freed through a different library.
"""

import ctypes
from collections.abc import Sequence
from typing import Any

from .. import _native
from .._bindings import take_buffer, to_c_buffer
from ..exceptions import LibraryError


# =============================================================================
# Lifecycle
# =============================================================================


def call_spp_new(lib: Any) -> int:
    """Call spp_new and return the handle as int (0 on allocation failure)."""
    return lib.spp_new() or 0


def call_spp_free(lib: Any, handle: int) -> None:
    lib.spp_free(handle)


# =============================================================================
# Load / Serialize
# =============================================================================


def call_spp_load(lib: Any, handle: int, path: bytes) -> int:
    """Call spp_load and return the native status code."""
    return lib.spp_load(handle, path)


def call_spp_from_serialized_proto(lib: Any, handle: int, data: bytes) -> int:
    """Call spp_from_serialized_proto and return the native status code."""
    return lib.spp_from_serialized_proto(handle, to_c_buffer(data), len(data))


def call_spp_to_serialized_proto(lib: Any, handle: int) -> bytes:
    """Call spp_to_serialized_proto and return the model bytes."""
    out_len = ctypes.c_size_t(0)
    ptr = lib.spp_to_serialized_proto(handle, ctypes.byref(out_len))
    return take_buffer(ptr, out_len.value, lib)


# =============================================================================
# Encode
# =============================================================================


def call_spp_encode(lib: Any, handle: int, text: bytes) -> bytes:
    """Call spp_encode_as_serialized_proto and return the SentencePieceText bytes."""
    out_len = ctypes.c_size_t(0)
    ptr = lib.spp_encode_as_serialized_proto(
        handle, to_c_buffer(text), len(text), ctypes.byref(out_len)
    )
    return take_buffer(ptr, out_len.value, lib)


def call_spp_sample_encode(
    lib: Any, handle: int, text: bytes, n_best: int, alpha: float
) -> bytes:
    """Call spp_sample_encode_as_serialized_proto and return the SentencePieceText bytes."""
    out_len = ctypes.c_size_t(0)
    ptr = lib.spp_sample_encode_as_serialized_proto(
        handle,
        to_c_buffer(text),
        len(text),
        ctypes.byref(out_len),
        n_best,
        alpha,
    )
    return take_buffer(ptr, out_len.value, lib)


# =============================================================================
# Decode
# =============================================================================


def call_spp_decode_piece_ids(lib: Any, handle: int, ids: Sequence[int]) -> tuple[int, bytes]:
    """Call spp_decode_piece_ids and return (error_code, decoded_bytes).

    The output buffer is freed whether or not the call succeeded. On error
    the decoded bytes are empty.
    """
    ids_array = (ctypes.c_uint32 * len(ids))(*ids)
    out = ctypes.c_void_p()
    out_len = ctypes.c_size_t(0)
    code = lib.spp_decode_piece_ids(
        handle, ids_array, len(ids), ctypes.byref(out), ctypes.byref(out_len)
    )
    data = take_buffer(out.value, out_len.value if out.value else 0, lib)
    return (code, data if code == 0 else b"")


def call_spp_decode_pieces(lib: Any, handle: int, pieces: Sequence[bytes]) -> tuple[int, bytes]:
    """Call spp_decode_pieces and return (error_code, decoded_bytes).

    ``pieces`` must already be NUL-free; the native side reads C strings.
    """
    pieces_array = (ctypes.c_char_p * len(pieces))(*pieces)
    out = ctypes.c_void_p()
    out_len = ctypes.c_size_t(0)
    code = lib.spp_decode_pieces(
        handle, pieces_array, len(pieces), ctypes.byref(out), ctypes.byref(out_len)
    )
    data = take_buffer(out.value, out_len.value if out.value else 0, lib)
    return (code, data if code == 0 else b"")


# =============================================================================
# Vocabulary
# =============================================================================


def call_spp_piece_to_id(lib: Any, handle: int, piece: bytes) -> int:
    return lib.spp_piece_to_id(handle, piece)


def call_spp_id_to_piece(lib: Any, handle: int, piece_id: int) -> bytes:
    """Call spp_id_to_piece and return the piece bytes.

    Raises
    ------
        LibraryError: If the library does not export spp_id_to_piece.
    """
    if not _native.has_symbol(lib, "spp_id_to_piece"):
        raise LibraryError(
            "Native library does not export spp_id_to_piece; "
            "id_to_piece() needs a sentencepiece_ffi build that provides it",
            code="LIBRARY_SYMBOL_MISSING",
            details={"missing": ["spp_id_to_piece"]},
        )
    out_len = ctypes.c_size_t(0)
    ptr = lib.spp_id_to_piece(handle, piece_id, ctypes.byref(out_len))
    return take_buffer(ptr, out_len.value, lib)


def call_spp_is_unknown(lib: Any, handle: int, piece_id: int) -> bool:
    return bool(lib.spp_is_unknown(handle, piece_id))


def call_spp_piece_size(lib: Any, handle: int) -> int:
    return lib.spp_piece_size(handle)


def call_spp_special_ids(lib: Any, handle: int) -> tuple[int, int, int, int]:
    """Return (bos_id, eos_id, pad_id, unk_id); absent tokens are -1."""
    return (
        lib.spp_bos_id(handle),
        lib.spp_eos_id(handle),
        lib.spp_pad_id(handle),
        lib.spp_unk_id(handle),
    )
