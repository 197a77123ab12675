"""
Special token handling for processors.

Provides properties and methods for the special tokens (BOS, EOS, PAD, UNK)
of a loaded model. This is a mixin class used by SentencePieceProcessor.
"""

from __future__ import annotations

#: Id reported for a special token the model does not define.
ABSENT_ID = -1


class SpecialTokensMixin:
    """
    Special token properties and methods for SentencePieceProcessor.

    Requires the following on the implementing class:
    - _special_tokens(): tuple[int, int, int, int] of (bos, eos, pad, unk)
    - id_to_piece: Callable[[int], str]
    """

    def _special_tokens(self) -> tuple[int, int, int, int]:
        """Return (bos, eos, pad, unk) ids (provided by SentencePieceProcessor)."""
        ...

    def id_to_piece(self, piece_id: int) -> str:
        """Get the piece for an id (provided by SentencePieceProcessor)."""
        ...

    @property
    def bos_id(self) -> int:
        """
        Beginning-of-sentence id, or -1 if the model has none.

        Example:
            >>> spp.bos_id
            1
        """
        return self._special_tokens()[0]

    @property
    def eos_id(self) -> int:
        """End-of-sentence id, or -1 if the model has none."""
        return self._special_tokens()[1]

    @property
    def pad_id(self) -> int:
        """
        Padding id, or -1 if the model has none.

        sentencepiece models are trained without padding unless requested,
        so -1 is the common value.
        """
        return self._special_tokens()[2]

    @property
    def unk_id(self) -> int:
        """Id that unknown pieces map to."""
        return self._special_tokens()[3]

    def _piece_or_none(self, piece_id: int) -> str | None:
        if piece_id == ABSENT_ID:
            return None
        return self.id_to_piece(piece_id)

    @property
    def bos_piece(self) -> str | None:
        """
        Piece text of the BOS token.

        Example:
            >>> spp.bos_piece
            '<s>'
        """
        return self._piece_or_none(self.bos_id)

    @property
    def eos_piece(self) -> str | None:
        """Piece text of the EOS token."""
        return self._piece_or_none(self.eos_id)

    @property
    def pad_piece(self) -> str | None:
        """Piece text of the PAD token."""
        return self._piece_or_none(self.pad_id)

    @property
    def unk_piece(self) -> str | None:
        """Piece text of the UNK token."""
        return self._piece_or_none(self.unk_id)

    @property
    def special_ids(self) -> frozenset[int]:
        """
        Immutable set of the special token ids the model defines.

        Absent tokens (-1) are left out.

        Example:
            >>> 2 in spp.special_ids
            True
        """
        return frozenset(i for i in self._special_tokens() if i != ABSENT_ID)

    def is_special_id(self, piece_id: int) -> bool:
        """
        Check if an id is one of the model's special tokens.

        Args:
            piece_id: The id to check.

        Example:
            >>> spp.is_special_id(spp.eos_id)
            True
        """
        return piece_id != ABSENT_ID and piece_id in self._special_tokens()
