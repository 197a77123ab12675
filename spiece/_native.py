"""
C signatures of the sentencepiece_ffi shim.

One table declares argtypes/restype for every native symbol the binding
calls. ``configure()`` applies it to a loaded library; missing argtypes on
64-bit platforms truncate pointers, so every symbol must be listed here.
"""

import ctypes

__all__ = [
    "SIGNATURES",
    "HANDLE_SYMBOLS",
    "OPTIONAL_SYMBOLS",
    "configure",
    "has_symbol",
    "missing_symbols",
]

c_size_t_p = ctypes.POINTER(ctypes.c_size_t)
c_uint32_p = ctypes.POINTER(ctypes.c_uint32)
c_char_p_p = ctypes.POINTER(ctypes.c_char_p)

# Owned buffers come back as c_void_p so ctypes never copies or truncates
# them at an embedded NUL; the Buffer Marshal reads exactly `len` bytes.
SIGNATURES: dict[str, tuple[object, list]] = {
    # Lifecycle
    "spp_new": (ctypes.c_void_p, []),
    "spp_free": (None, [ctypes.c_void_p]),
    # Load / serialize
    "spp_load": (ctypes.c_int, [ctypes.c_void_p, ctypes.c_char_p]),
    "spp_from_serialized_proto": (
        ctypes.c_int,
        [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_size_t],
    ),
    "spp_to_serialized_proto": (ctypes.c_void_p, [ctypes.c_void_p, c_size_t_p]),
    # Encode
    "spp_encode_as_serialized_proto": (
        ctypes.c_void_p,
        [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_size_t, c_size_t_p],
    ),
    "spp_sample_encode_as_serialized_proto": (
        ctypes.c_void_p,
        [
            ctypes.c_void_p,
            ctypes.c_char_p,
            ctypes.c_size_t,
            c_size_t_p,
            ctypes.c_size_t,
            ctypes.c_float,
        ],
    ),
    # Decode
    "spp_decode_piece_ids": (
        ctypes.c_int,
        [
            ctypes.c_void_p,
            c_uint32_p,
            ctypes.c_size_t,
            ctypes.POINTER(ctypes.c_void_p),
            c_size_t_p,
        ],
    ),
    "spp_decode_pieces": (
        ctypes.c_int,
        [
            ctypes.c_void_p,
            c_char_p_p,
            ctypes.c_size_t,
            ctypes.POINTER(ctypes.c_void_p),
            c_size_t_p,
        ],
    ),
    # Vocabulary
    "spp_piece_to_id": (ctypes.c_int, [ctypes.c_void_p, ctypes.c_char_p]),
    "spp_id_to_piece": (ctypes.c_void_p, [ctypes.c_void_p, ctypes.c_int, c_size_t_p]),
    "spp_is_unknown": (ctypes.c_bool, [ctypes.c_void_p, ctypes.c_int]),
    "spp_piece_size": (ctypes.c_int, [ctypes.c_void_p]),
    "spp_bos_id": (ctypes.c_int, [ctypes.c_void_p]),
    "spp_eos_id": (ctypes.c_int, [ctypes.c_void_p]),
    "spp_pad_id": (ctypes.c_int, [ctypes.c_void_p]),
    "spp_unk_id": (ctypes.c_int, [ctypes.c_void_p]),
    # C allocator; resolves to the allocator the shim links against
    "free": (None, [ctypes.c_void_p]),
}

# Symbols whose first argument is a processor handle
HANDLE_SYMBOLS = frozenset(name for name in SIGNATURES if name.startswith("spp_") and name != "spp_new")

# Symbols a library may lack; the upstream shim has no spp_id_to_piece.
# Calls needing one raise LibraryError when it is absent.
OPTIONAL_SYMBOLS = frozenset({"spp_id_to_piece"})


def has_symbol(lib: object, name: str) -> bool:
    try:
        getattr(lib, name)
    except AttributeError:
        return False
    return True


def missing_symbols(lib: object) -> list[str]:
    """Required names from SIGNATURES that ``lib`` does not export."""
    return [
        name for name in SIGNATURES if name not in OPTIONAL_SYMBOLS and not has_symbol(lib, name)
    ]


def configure(lib: object) -> None:
    """Declare argtypes/restype for every symbol in SIGNATURES that ``lib`` exports."""
    for name, (restype, argtypes) in SIGNATURES.items():
        if name in OPTIONAL_SYMBOLS and not has_symbol(lib, name):
            continue
        func = getattr(lib, name)
        func.restype = restype
        func.argtypes = argtypes
