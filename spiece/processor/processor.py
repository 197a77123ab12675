"""
Text encoding and decoding with a sentencepiece model.

Provides the SentencePieceProcessor class for loading a trained model,
encoding text into pieces and ids, and decoding them back to text.
"""

import math
import os
from collections.abc import Callable, Iterable
from typing import Any

from .._bindings import to_c_string
from .._logging import scoped_logger
from ..exceptions import InternalError, InvalidArgumentError, StateError
from ..status import Status, check_status, status_name, translate_status
from ._bindings import (
    call_spp_decode_piece_ids,
    call_spp_decode_pieces,
    call_spp_encode,
    call_spp_from_serialized_proto,
    call_spp_id_to_piece,
    call_spp_is_unknown,
    call_spp_load,
    call_spp_piece_size,
    call_spp_piece_to_id,
    call_spp_sample_encode,
    call_spp_special_ids,
    call_spp_to_serialized_proto,
)
from ._proto import parse_encoded
from .handle import ProcessorHandle
from .pieces import EncodedSequence
from .special_tokens import SpecialTokensMixin

logger = scoped_logger("processor")

MAX_N_BEST = 512

# Range of positive normal float32 values; alpha crosses the boundary as float
_FLOAT32_MIN_NORMAL = 1.1754943508222875e-38
_FLOAT32_MAX = 3.4028234663852886e38


class SentencePieceProcessor(SpecialTokensMixin):
    """
    Subword tokenizer backed by the native sentencepiece library.

    A processor starts without a model. ``load()`` or ``load_from_bytes()``
    attach one; every other operation needs a loaded model and raises
    StateError otherwise. ``close()`` (or leaving a ``with`` block) frees the
    native processor, after which every operation raises StateError.

    A processor is not synchronized. Share one across threads through
    SynchronizedProcessor, or give each thread its own.

    Attributes
    ----------
    vocab_size : int
        Number of pieces in the vocabulary.
    bos_id, eos_id, pad_id, unk_id : int
        Special token ids; -1 when the model does not define the token.

    Example:
        >>> with SentencePieceProcessor.open("toy.model") as spp:
        ...     seq = spp.encode("I saw a girl with a telescope.")
        ...     spp.decode(seq.ids)
        'I saw a girl with a telescope.'
    """

    __slots__ = ("_handle", "_loaded", "_vocab_size", "_special", "_source")

    def __init__(self):
        """
        Create a processor with no model loaded.

        Raises
        ------
            AllocationError: If the native library cannot allocate a processor.
        """
        self._handle: ProcessorHandle | None = None
        self._loaded = False
        self._vocab_size = 0
        self._special: tuple[int, int, int, int] = (-1, -1, -1, -1)
        self._source: str | None = None
        self._handle = ProcessorHandle()

    @classmethod
    def open(cls, path: str | os.PathLike) -> "SentencePieceProcessor":
        """
        Create a processor and load the model file at ``path``.

        Raises
        ------
            NotFoundError: If the file does not exist or cannot be read.
            InvalidArgumentError: If the file is not a valid model.
        """
        return cls._create_loaded(lambda spp: spp.load(path))

    @classmethod
    def from_bytes(cls, data: bytes) -> "SentencePieceProcessor":
        """
        Create a processor from a serialized model.

        Example:
            >>> data = Path("toy.model").read_bytes()
            >>> spp = SentencePieceProcessor.from_bytes(data)
        """
        return cls._create_loaded(lambda spp: spp.load_from_bytes(data))

    @classmethod
    def _create_loaded(
        cls, loader: Callable[["SentencePieceProcessor"], None]
    ) -> "SentencePieceProcessor":
        instance = cls()
        try:
            loader(instance)
        except BaseException:
            instance.close()
            raise
        return instance

    # =========================================================================
    # State
    # =========================================================================

    def _open_handle(self, *, require_model: bool = True) -> ProcessorHandle:
        """Get the native handle, raising if closed or (optionally) not loaded."""
        handle = self._handle
        if handle is None or handle.released:
            raise StateError("Processor is closed", code="PROCESSOR_CLOSED")
        if require_model and not self._loaded:
            raise StateError(
                "No model loaded. Call load() or load_from_bytes() first.",
                code="MODEL_NOT_LOADED",
            )
        return handle

    @property
    def loaded(self) -> bool:
        """True if a model is loaded and the processor is open."""
        return self._loaded and not self.closed

    @property
    def closed(self) -> bool:
        return self._handle is None or self._handle.released

    def close(self) -> None:
        """
        Release the native processor.

        After calling close(), every operation raises StateError. Safe to
        call multiple times (idempotent).

        Raises
        ------
            None. This method never raises.
        """
        self._loaded = False
        if self._handle is not None:
            self._handle.release()

    def __enter__(self) -> "SentencePieceProcessor":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __del__(self):
        try:
            self.close()
        except Exception:
            pass

    def __repr__(self) -> str:
        if self.closed:
            return "SentencePieceProcessor(closed)"
        if not self._loaded:
            return "SentencePieceProcessor(no model)"
        return f"SentencePieceProcessor(source={self._source!r}, vocab_size={self._vocab_size})"

    # =========================================================================
    # Loading
    # =========================================================================

    def load(self, path: str | os.PathLike) -> None:
        """
        Load a model file, replacing any model already loaded.

        The load is transactional: on failure the processor keeps its
        previous model (or stays without one).

        Args:
            path: Path to a trained ``.model`` file.

        Raises
        ------
            NotFoundError: If the file does not exist or cannot be read.
            InvalidArgumentError: If the file is not a valid model, or the
                path contains a NUL byte.
            StateError: If the processor is closed.
        """
        self._open_handle(require_model=False)
        path_bytes = to_c_string(os.fsencode(path), "path")
        source = os.fsdecode(path_bytes)
        logger.debug("Loading model", extra={"path": source})
        self._load_into_fresh_handle(
            lambda lib, ptr: call_spp_load(lib, ptr, path_bytes),
            f"Failed to load model from '{source}'",
            source,
        )

    def load_from_bytes(self, data: bytes) -> None:
        """
        Load a serialized model, replacing any model already loaded.

        Transactional like ``load()``.

        Args:
            data: Serialized model, e.g. the contents of a ``.model`` file
                or the result of ``to_bytes()``.

        Raises
        ------
            InvalidArgumentError: If the data is empty or not a valid model.
            StateError: If the processor is closed.
        """
        self._open_handle(require_model=False)
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise InvalidArgumentError(
                f"Model data must be bytes, got {type(data).__name__}",
                details={"param": "data"},
            )
        data = bytes(data)
        if not data:
            raise InvalidArgumentError("Model data is empty", details={"param": "data"})
        logger.debug("Loading model from bytes", extra={"size": len(data)})
        self._load_into_fresh_handle(
            lambda lib, ptr: call_spp_from_serialized_proto(lib, ptr, data),
            "Failed to load model from bytes",
            "<bytes>",
        )

    def _load_into_fresh_handle(
        self, loader: Callable[[Any, int], int], message: str, source: str
    ) -> None:
        fresh = ProcessorHandle()
        try:
            code = loader(fresh.lib, fresh.ptr)
            # The native loader reports unparsable models as INTERNAL
            if translate_status(code) is Status.INTERNAL:
                raise InvalidArgumentError(
                    f"{message}: not a valid sentencepiece model (native status {code})",
                    code="INVALID_MODEL",
                    details={"source": source, "status": status_name(code)},
                    original_code=code,
                )
            check_status(code, message, {"source": source})
            vocab_size = call_spp_piece_size(fresh.lib, fresh.ptr)
            special = call_spp_special_ids(fresh.lib, fresh.ptr)
        except BaseException:
            fresh.release()
            raise

        previous, self._handle = self._handle, fresh
        self._loaded = True
        self._vocab_size = vocab_size
        self._special = special
        self._source = source
        if previous is not None:
            previous.release()
        logger.debug("Model loaded", extra={"source": source, "vocab_size": vocab_size})

    def to_bytes(self) -> bytes:
        """
        Serialize the loaded model.

        The result can be passed to ``load_from_bytes()`` or written to a
        ``.model`` file.

        Raises
        ------
            StateError: If no model is loaded or the processor is closed.
        """
        handle = self._open_handle()
        return call_spp_to_serialized_proto(handle.lib, handle.ptr)

    # =========================================================================
    # Encoding
    # =========================================================================

    @staticmethod
    def _text_bytes(text: str) -> bytes:
        if not isinstance(text, str):
            raise InvalidArgumentError(
                f"text must be str, got {type(text).__name__}", details={"param": "text"}
            )
        return text.encode("utf-8")

    @staticmethod
    def _to_sequence(payload: bytes, data: bytes) -> EncodedSequence:
        if not payload:
            if data:
                raise InternalError(
                    "Encoding failed: native library returned no data",
                    code="ENCODE_FAILED",
                    details={"text_length": len(data)},
                )
            return EncodedSequence()
        return parse_encoded(payload)

    def encode(self, text: str) -> EncodedSequence:
        """
        Segment text into pieces.

        Args:
            text: Text to encode. May be empty and may contain NUL
                characters; the full string is encoded.

        Returns
        -------
            EncodedSequence of PieceWithId in left-to-right order. Spans are
            byte offsets into ``text.encode("utf-8")``.

        Raises
        ------
            InternalError: If the native library fails to encode.
            StateError: If no model is loaded or the processor is closed.

        Example:
            >>> seq = spp.encode("I saw a girl with a telescope.")
            >>> seq.ids
            [8, 465, 10, 947, 41, 10, 170, 168, 110, 28, 20, 143, 4]
            >>> seq.pieces[:3]
            ['▁I', '▁saw', '▁a']
        """
        handle = self._open_handle()
        data = self._text_bytes(text)
        return self._to_sequence(call_spp_encode(handle.lib, handle.ptr, data), data)

    def sample_encode(self, text: str, n_best: int, alpha: float) -> EncodedSequence:
        """
        Segment text by sampling (subword regularization).

        One segmentation is sampled from the ``n_best`` best candidates.

        Args:
            text: Text to encode.
            n_best: Number of candidates to sample from, 1 to 512.
            alpha: Smoothing of the candidate distribution; a positive,
                finite number representable as a normal 32-bit float.

        Raises
        ------
            InvalidArgumentError: If n_best or alpha is out of range.
            InternalError: If the native library fails to encode.
            StateError: If no model is loaded or the processor is closed.
        """
        handle = self._open_handle()
        if isinstance(n_best, bool) or not isinstance(n_best, int):
            raise InvalidArgumentError(
                f"n_best must be an int, got {type(n_best).__name__}",
                details={"param": "n_best"},
            )
        if not 1 <= n_best <= MAX_N_BEST:
            raise InvalidArgumentError(
                f"n_best must be between 1 and {MAX_N_BEST}, got {n_best}",
                details={"param": "n_best", "value": n_best},
            )
        try:
            alpha = float(alpha)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(
                f"alpha must be a number, got {alpha!r}", details={"param": "alpha"}
            ) from exc
        if not (math.isfinite(alpha) and _FLOAT32_MIN_NORMAL <= alpha <= _FLOAT32_MAX):
            raise InvalidArgumentError(
                f"alpha must be a positive normal float, got {alpha!r}",
                details={"param": "alpha", "value": alpha},
            )
        data = self._text_bytes(text)
        payload = call_spp_sample_encode(handle.lib, handle.ptr, data, n_best, alpha)
        return self._to_sequence(payload, data)

    # =========================================================================
    # Decoding
    # =========================================================================

    def decode(self, items: Iterable[int] | Iterable[str] | EncodedSequence) -> str:
        """
        Reconstruct text from ids or pieces.

        Dispatches on the element type: ints go to ``decode_ids()``, strings
        to ``decode_pieces()``. An EncodedSequence is decoded by its ids.

        Raises
        ------
            InvalidArgumentError: If the elements mix ints and strings, an id
                is out of range, or a piece contains a NUL character.
            StateError: If no model is loaded or the processor is closed.

        Example:
            >>> spp.decode([8, 465, 10, 947])
            'I saw a girl'
            >>> spp.decode(["▁I", "▁saw"])
            'I saw'
        """
        if isinstance(items, EncodedSequence):
            return self.decode_ids(items.ids)
        if isinstance(items, (str, bytes)):
            raise InvalidArgumentError(
                "decode() takes a sequence of ids or pieces, not a single string",
                details={"param": "items"},
            )
        items = list(items)
        if not items:
            self._open_handle()
            return ""
        if all(_is_id(item) for item in items):
            return self.decode_ids(items)
        if all(isinstance(item, str) for item in items):
            return self.decode_pieces(items)
        raise InvalidArgumentError(
            "decode() elements must be all ints or all strings",
            details={"types": sorted({type(item).__name__ for item in items})},
        )

    def decode_ids(self, ids: Iterable[int]) -> str:
        """
        Reconstruct text from piece ids.

        Raises
        ------
            InvalidArgumentError: If any id is outside ``[0, vocab_size)``.
            StateError: If no model is loaded or the processor is closed.
        """
        handle = self._open_handle()
        ids = list(ids)
        for piece_id in ids:
            self._check_id(piece_id)
        code, data = call_spp_decode_piece_ids(handle.lib, handle.ptr, ids)
        check_status(code, "Decode failed", {"count": len(ids)})
        return _decode_utf8(data, "decoded text")

    def decode_pieces(self, pieces: Iterable[str]) -> str:
        """
        Reconstruct text from pieces.

        Pieces not in the vocabulary decode like the unknown token.

        Raises
        ------
            InvalidArgumentError: If a piece is not a string or contains a
                NUL character.
            StateError: If no model is loaded or the processor is closed.
        """
        handle = self._open_handle()
        encoded = []
        for piece in pieces:
            if not isinstance(piece, str):
                raise InvalidArgumentError(
                    f"pieces must be str, got {type(piece).__name__}",
                    details={"param": "pieces"},
                )
            encoded.append(to_c_string(piece, "piece"))
        code, data = call_spp_decode_pieces(handle.lib, handle.ptr, encoded)
        check_status(code, "Decode failed", {"count": len(encoded)})
        return _decode_utf8(data, "decoded text")

    # =========================================================================
    # Vocabulary
    # =========================================================================

    def _special_tokens(self) -> tuple[int, int, int, int]:
        self._open_handle()
        return self._special

    @property
    def vocab_size(self) -> int:
        """
        Number of pieces in the vocabulary.

        Example:
            >>> spp.vocab_size
            1000
        """
        self._open_handle()
        return self._vocab_size

    def __len__(self) -> int:
        return self.vocab_size

    def __bool__(self) -> bool:
        # len() raises once closed; truthiness must not
        return True

    def _check_id(self, piece_id: int) -> None:
        if not _is_id(piece_id):
            raise InvalidArgumentError(
                f"Piece id must be an int, got {type(piece_id).__name__}",
                details={"id": piece_id},
            )
        if not 0 <= piece_id < self._vocab_size:
            raise InvalidArgumentError(
                f"Piece id {piece_id} out of range [0, {self._vocab_size})",
                code="ID_OUT_OF_RANGE",
                details={"id": piece_id, "vocab_size": self._vocab_size},
            )

    def piece_to_id(self, piece: str) -> int:
        """
        Get the id of a piece.

        Returns
        -------
            The piece id, or ``unk_id`` if the piece is not in the vocabulary.

        Example:
            >>> spp.piece_to_id("▁saw")
            465
            >>> spp.piece_to_id("no-such-piece") == spp.unk_id
            True
        """
        handle = self._open_handle()
        if not isinstance(piece, str):
            raise InvalidArgumentError(
                f"piece must be str, got {type(piece).__name__}", details={"param": "piece"}
            )
        data = piece.encode("utf-8")
        # No vocabulary entry contains NUL
        if b"\x00" in data:
            return self._special[3]
        return call_spp_piece_to_id(handle.lib, handle.ptr, data)

    def id_to_piece(self, piece_id: int) -> str:
        """
        Get the piece text for an id.

        Raises
        ------
            InvalidArgumentError: If the id is outside ``[0, vocab_size)``.
            LibraryError: If the native library was built without
                ``spp_id_to_piece``.
        """
        handle = self._open_handle()
        self._check_id(piece_id)
        return _decode_utf8(call_spp_id_to_piece(handle.lib, handle.ptr, piece_id), "piece")

    def is_unknown(self, piece_id: int) -> bool:
        """
        Check whether an id is the unknown token.

        Raises
        ------
            InvalidArgumentError: If the id is outside ``[0, vocab_size)``.
        """
        handle = self._open_handle()
        self._check_id(piece_id)
        return call_spp_is_unknown(handle.lib, handle.ptr, piece_id)

    def __contains__(self, piece: object) -> bool:
        """True if ``piece`` is a vocabulary entry other than the unknown token."""
        if not isinstance(piece, str):
            return False
        piece_id = self.piece_to_id(piece)
        handle = self._open_handle()
        return not call_spp_is_unknown(handle.lib, handle.ptr, piece_id)


def _is_id(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _decode_utf8(data: bytes, what: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InternalError(
            f"Native library returned {what} that is not valid UTF-8",
            details={"length": len(data)},
        ) from exc
