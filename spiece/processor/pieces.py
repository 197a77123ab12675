"""
Encoding results: byte spans, pieces, and the ordered sequence of pieces.

Provides PieceSpan, PieceWithId and EncodedSequence, returned by
``SentencePieceProcessor.encode()`` and ``sample_encode()``.
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import overload

__all__ = ["PieceSpan", "PieceWithId", "EncodedSequence"]


class PieceSpan:
    """
    Byte range a piece covers in the encoded input.

    Represents a ``[begin, end)`` range over the UTF-8 bytes of the text that
    was encoded. Pieces produced by byte fallback may cover part of a
    multi-byte character, so several consecutive pieces can share a span.
    Spans are immutable and hash like the equivalent ``(begin, end)`` tuple.

    Attributes
    ----------
    begin : int
        Start byte offset (inclusive).
    end : int
        End byte offset (exclusive).

    Notes
    -----
    Offsets are byte indices, not character indices. Use ``slice()`` rather
    than ``text[begin:end]``.

    Examples
    --------
        >>> seq = spp.encode("I saw a girl")
        >>> seq[1].span
        (1, 5)
        >>> seq[1].span.slice("I saw a girl")
        ' saw'
        >>> begin, end = seq[1].span
    """

    __slots__ = ("_begin", "_end")

    def __init__(self, begin: int, end: int):
        self._begin = begin
        self._end = end

    @property
    def begin(self) -> int:
        return self._begin

    @property
    def end(self) -> int:
        return self._end

    def __len__(self) -> int:
        return self.end - self.begin

    def slice(self, text: str | bytes, errors: str = "strict") -> str:
        """
        Extract the text this span covers.

        Args:
            text: The text that was encoded (str or bytes).
            errors: Decode error handling. Spans of byte-fallback pieces can
                split a character; pass "replace" to tolerate that.

        Raises
        ------
            UnicodeDecodeError: If the span is not valid UTF-8 and
                errors="strict".
        """
        if isinstance(text, str):
            text = text.encode("utf-8")
        return text[self.begin : self.end].decode("utf-8", errors=errors)

    def __repr__(self) -> str:
        return f"({self.begin}, {self.end})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PieceSpan):
            return self.begin == other.begin and self.end == other.end
        if isinstance(other, tuple) and len(other) == 2:
            return self.begin == other[0] and self.end == other[1]
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.begin, self.end))

    def __iter__(self):
        """Allow tuple unpacking: begin, end = span."""
        yield self.begin
        yield self.end


@dataclass(frozen=True, slots=True)
class PieceWithId:
    """One segment of an encoded text: piece text, vocabulary id and byte span."""

    piece: str
    id: int
    span: PieceSpan


class EncodedSequence(Sequence[PieceWithId]):
    """
    Ordered, immutable result of encoding one text.

    Behaves like a read-only list of ``PieceWithId`` in segmentation order
    and offers column views of the same data.

    Examples
    --------
        >>> seq = spp.encode("I saw a girl")
        >>> seq.ids
        [8, 465, 10, 947]
        >>> seq.pieces
        ['▁I', '▁saw', '▁a', '▁girl']
        >>> len(seq)
        4
        >>> seq[0].piece
        '▁I'
    """

    __slots__ = ("_items",)

    def __init__(self, pieces: Iterable[PieceWithId] = ()):
        self._items: tuple[PieceWithId, ...] = tuple(pieces)

    @property
    def ids(self) -> list[int]:
        """Vocabulary ids, in order."""
        return [p.id for p in self._items]

    @property
    def pieces(self) -> list[str]:
        """Piece texts, in order."""
        return [p.piece for p in self._items]

    @property
    def spans(self) -> list[PieceSpan]:
        """Byte spans, in order."""
        return [p.span for p in self._items]

    def __len__(self) -> int:
        return len(self._items)

    @overload
    def __getitem__(self, index: int) -> PieceWithId: ...

    @overload
    def __getitem__(self, index: slice) -> "EncodedSequence": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return EncodedSequence(self._items[index])
        return self._items[index]

    def __iter__(self) -> Iterator[PieceWithId]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EncodedSequence):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return list(self._items) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"EncodedSequence({self.pieces!r})"
