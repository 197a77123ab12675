"""
Reference tests against the real library and sentencepiece's toy.model.

Expected values come from encoding with the upstream sentencepiece build.
"""

import pytest

SENTENCE = "I saw a girl with a telescope."

EXPECTED = [
    ("▁I", 8, (0, 1)),
    ("▁saw", 465, (1, 5)),
    ("▁a", 10, (5, 7)),
    ("▁girl", 947, (7, 12)),
    ("▁with", 41, (12, 17)),
    ("▁a", 10, (17, 19)),
    ("▁t", 170, (19, 21)),
    ("el", 168, (21, 23)),
    ("es", 110, (23, 25)),
    ("c", 28, (25, 26)),
    ("o", 20, (26, 27)),
    ("pe", 143, (27, 29)),
    (".", 4, (29, 30)),
]


class TestEncode:
    def test_sentence(self, toy):
        seq = toy.encode(SENTENCE)

        assert [(p.piece, p.id, tuple(p.span)) for p in seq] == EXPECTED

    def test_round_trip(self, toy):
        assert toy.decode(toy.encode(SENTENCE).ids) == SENTENCE
        assert toy.decode(toy.encode(SENTENCE).pieces) == SENTENCE

    def test_empty(self, toy):
        assert len(toy.encode("")) == 0

    def test_sample_encode_decodes_to_input(self, toy):
        for _ in range(5):
            assert toy.decode(toy.sample_encode(SENTENCE, 10, 0.5)) == SENTENCE


class TestVocabulary:
    def test_piece_to_id(self, toy):
        assert toy.piece_to_id("pe") == 143
        assert toy.piece_to_id("unknown") == toy.unk_id

    def test_id_to_piece(self, toy):
        assert toy.id_to_piece(143) == "pe"
        assert toy.id_to_piece(465) == "▁saw"

    def test_special_ids(self, toy):
        assert toy.unk_id == 0
        assert toy.is_unknown(toy.unk_id)
        assert not toy.is_unknown(143)

    def test_id_out_of_range(self, toy):
        from spiece.exceptions import InvalidArgumentError

        with pytest.raises(InvalidArgumentError):
            toy.decode([toy.vocab_size])


class TestLoad:
    def test_nonexistent_path(self, native_lib):
        from spiece import SentencePieceProcessor
        from spiece.exceptions import NotFoundError

        with pytest.raises(NotFoundError):
            SentencePieceProcessor.open("non-existing")

    def test_random_bytes(self, native_lib):
        from spiece import SentencePieceProcessor
        from spiece.exceptions import InvalidArgumentError

        with pytest.raises(InvalidArgumentError):
            SentencePieceProcessor.from_bytes(b"\x00\x01random\xffbytes")

    def test_to_bytes_round_trip(self, toy):
        from spiece import SentencePieceProcessor

        with SentencePieceProcessor.from_bytes(toy.to_bytes()) as clone:
            assert clone.vocab_size == toy.vocab_size
            assert (clone.bos_id, clone.eos_id, clone.pad_id, clone.unk_id) == (
                toy.bos_id,
                toy.eos_id,
                toy.pad_id,
                toy.unk_id,
            )
            assert clone.encode(SENTENCE) == toy.encode(SENTENCE)
