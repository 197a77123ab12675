"""
Shared access to one processor from several threads.
"""

import os
import threading
from collections.abc import Iterable
from typing import Any

from .pieces import EncodedSequence
from .processor import SentencePieceProcessor

__all__ = ["SynchronizedProcessor"]


class SynchronizedProcessor:
    """
    Serializes every call on a wrapped SentencePieceProcessor.

    Use this when threads must share one processor, including when one of
    them may ``load()`` a different model or ``close()`` it. Calls block
    until the lock is free; nothing is queued or cancelled.

    Example:
        >>> shared = SynchronizedProcessor(SentencePieceProcessor.open("toy.model"))
        >>> with ThreadPoolExecutor() as pool:
        ...     results = list(pool.map(shared.encode, texts))
        >>> shared.close()
    """

    __slots__ = ("_processor", "_lock")

    def __init__(self, processor: SentencePieceProcessor | None = None):
        """
        Args:
            processor: Processor to wrap; the wrapper takes ownership. If
                None, a new processor without a model is created.
        """
        self._processor = processor if processor is not None else SentencePieceProcessor()
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """
        The lock guarding the processor.

        Hold it to run several calls as one unit:

            >>> with shared.lock:
            ...     if not shared.loaded:
            ...         shared.load("toy.model")
        """
        return self._lock

    def _call(self, name: str, *args: Any) -> Any:
        with self._lock:
            return getattr(self._processor, name)(*args)

    def load(self, path: str | os.PathLike) -> None:
        self._call("load", path)

    def load_from_bytes(self, data: bytes) -> None:
        self._call("load_from_bytes", data)

    def to_bytes(self) -> bytes:
        return self._call("to_bytes")

    def encode(self, text: str) -> EncodedSequence:
        return self._call("encode", text)

    def sample_encode(self, text: str, n_best: int, alpha: float) -> EncodedSequence:
        return self._call("sample_encode", text, n_best, alpha)

    def decode(self, items: Iterable[int] | Iterable[str] | EncodedSequence) -> str:
        return self._call("decode", items)

    def decode_ids(self, ids: Iterable[int]) -> str:
        return self._call("decode_ids", ids)

    def decode_pieces(self, pieces: Iterable[str]) -> str:
        return self._call("decode_pieces", pieces)

    def piece_to_id(self, piece: str) -> int:
        return self._call("piece_to_id", piece)

    def id_to_piece(self, piece_id: int) -> str:
        return self._call("id_to_piece", piece_id)

    def is_unknown(self, piece_id: int) -> bool:
        return self._call("is_unknown", piece_id)

    def __contains__(self, piece: object) -> bool:
        return self._call("__contains__", piece)

    def __len__(self) -> int:
        return self.vocab_size

    def __bool__(self) -> bool:
        return True

    @property
    def vocab_size(self) -> int:
        with self._lock:
            return self._processor.vocab_size

    @property
    def bos_id(self) -> int:
        with self._lock:
            return self._processor.bos_id

    @property
    def eos_id(self) -> int:
        with self._lock:
            return self._processor.eos_id

    @property
    def pad_id(self) -> int:
        with self._lock:
            return self._processor.pad_id

    @property
    def unk_id(self) -> int:
        with self._lock:
            return self._processor.unk_id

    @property
    def bos_piece(self) -> str | None:
        with self._lock:
            return self._processor.bos_piece

    @property
    def eos_piece(self) -> str | None:
        with self._lock:
            return self._processor.eos_piece

    @property
    def pad_piece(self) -> str | None:
        with self._lock:
            return self._processor.pad_piece

    @property
    def unk_piece(self) -> str | None:
        with self._lock:
            return self._processor.unk_piece

    @property
    def special_ids(self) -> frozenset[int]:
        with self._lock:
            return self._processor.special_ids

    def is_special_id(self, piece_id: int) -> bool:
        return self._call("is_special_id", piece_id)

    @property
    def loaded(self) -> bool:
        with self._lock:
            return self._processor.loaded

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._processor.closed

    def close(self) -> None:
        """Close the wrapped processor. Idempotent; never raises."""
        with self._lock:
            self._processor.close()

    def __enter__(self) -> "SynchronizedProcessor":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SynchronizedProcessor({self._processor!r})"
