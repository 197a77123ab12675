"""
Shared test fixtures for spiece.

The fake native library lets every test below tests/ run without the
sentencepiece_ffi shared library. Tests against the real library live in
tests/reference/.
"""

from .fake_native import (
    SENTENCE,
    SENTENCE_IDS,
    SENTENCE_PIECES,
    TOY_PIECES,
    FakeModel,
    FakeNativeLibrary,
    encode_piece,
    encode_text,
    toy_model_bytes,
)

__all__ = [
    # Fake library
    "FakeNativeLibrary",
    "FakeModel",
    "toy_model_bytes",
    # Record encoding
    "encode_piece",
    "encode_text",
    # Toy data
    "TOY_PIECES",
    "SENTENCE",
    "SENTENCE_IDS",
    "SENTENCE_PIECES",
]
