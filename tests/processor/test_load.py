"""
Model loading tests.

Covers load(), load_from_bytes(), the open()/from_bytes() constructors,
to_bytes(), and the transactional replacement of a loaded model.
"""

import pathlib

import pytest

from tests.fixtures import FakeModel


class TestLoad:
    """Loading from a file path."""

    @pytest.mark.parametrize("as_type", [str, pathlib.Path])
    def test_load_path(self, fake_lib, model_path, as_type):
        from spiece import SentencePieceProcessor

        with SentencePieceProcessor() as spp:
            spp.load(as_type(model_path))

            assert spp.loaded
            assert spp.vocab_size == 31

    def test_open(self, fake_lib, model_path):
        from spiece import SentencePieceProcessor

        with SentencePieceProcessor.open(model_path) as spp:
            assert spp.unk_id == 0

    def test_missing_file(self, fake_lib, tmp_path):
        """A nonexistent path raises NotFoundError (also a FileNotFoundError)."""
        from spiece import SentencePieceProcessor
        from spiece.exceptions import NotFoundError

        with pytest.raises(NotFoundError) as exc_info:
            SentencePieceProcessor.open(tmp_path / "non-existing")

        assert isinstance(exc_info.value, FileNotFoundError)
        assert exc_info.value.original_code == 5
        assert exc_info.value.details["source"] == str(tmp_path / "non-existing")

    def test_path_with_nul(self, fake_lib):
        """A path with NUL is rejected before reaching the native loader."""
        from spiece import SentencePieceProcessor
        from spiece.exceptions import InvalidArgumentError

        with SentencePieceProcessor() as spp:
            with pytest.raises(InvalidArgumentError, match="NUL"):
                spp.load("test\x00path")

        assert fake_lib.calls["spp_load"] == 0

    def test_malformed_file(self, fake_lib, tmp_path):
        from spiece import SentencePieceProcessor
        from spiece.exceptions import InvalidArgumentError

        path = tmp_path / "garbage.model"
        path.write_bytes(b"\x8a\x01not a model")

        with pytest.raises(InvalidArgumentError) as exc_info:
            SentencePieceProcessor.open(path)

        assert exc_info.value.code == "INVALID_MODEL"
        assert exc_info.value.original_code == 13


class TestLoadFromBytes:
    """Loading from memory."""

    def test_from_bytes(self, fake_lib, model_bytes):
        from spiece import SentencePieceProcessor

        with SentencePieceProcessor.from_bytes(model_bytes) as spp:
            assert spp.loaded
            assert (spp.bos_id, spp.eos_id, spp.pad_id, spp.unk_id) == (1, 2, -1, 0)

    @pytest.mark.parametrize("wrap", [bytearray, memoryview])
    def test_accepts_bytes_like(self, fake_lib, model_bytes, wrap):
        from spiece import SentencePieceProcessor

        with SentencePieceProcessor() as spp:
            spp.load_from_bytes(wrap(model_bytes))
            assert spp.vocab_size == 31

    def test_random_bytes(self, fake_lib):
        """Random bytes are reported as invalid input, not internal failure."""
        from spiece import SentencePieceProcessor
        from spiece.exceptions import InvalidArgumentError

        with pytest.raises(InvalidArgumentError):
            SentencePieceProcessor.from_bytes(b"\x00\x01random\xffbytes")

    def test_empty_bytes(self, fake_lib):
        from spiece import SentencePieceProcessor
        from spiece.exceptions import InvalidArgumentError

        with SentencePieceProcessor() as spp:
            with pytest.raises(InvalidArgumentError, match="empty"):
                spp.load_from_bytes(b"")

    def test_not_bytes(self, fake_lib):
        from spiece import SentencePieceProcessor
        from spiece.exceptions import InvalidArgumentError

        with SentencePieceProcessor() as spp:
            with pytest.raises(InvalidArgumentError, match="must be bytes"):
                spp.load_from_bytes("toy.model")

    def test_model_with_nul_bytes(self, fake_lib, model_bytes):
        """Serialized models cross the boundary with their full length."""
        from spiece import SentencePieceProcessor

        assert b"\x00" in model_bytes

        with SentencePieceProcessor.from_bytes(model_bytes) as spp:
            assert spp.to_bytes() == model_bytes

    @pytest.mark.parametrize(
        "status,exc_name",
        [
            (3, "InvalidArgumentError"),
            (13, "InvalidArgumentError"),
            (5, "NotFoundError"),
            (2, "UnknownStatusError"),
            (77, "UnknownStatusError"),
        ],
    )
    def test_native_status_translation(self, fake_lib, model_bytes, status, exc_name):
        from spiece import SentencePieceProcessor, exceptions

        fake_lib.load_status = status

        with pytest.raises(getattr(exceptions, exc_name)) as exc_info:
            SentencePieceProcessor.from_bytes(model_bytes)

        assert exc_info.value.original_code == status


class TestTransactionalLoad:
    """A failed load leaves the processor as it was."""

    def test_failed_load_keeps_previous_model(self, spp, fake_lib, tmp_path):
        from spiece.exceptions import NotFoundError

        before = spp.encode("I saw a girl")

        with pytest.raises(NotFoundError):
            spp.load(tmp_path / "missing.model")

        assert spp.loaded
        assert spp.encode("I saw a girl") == before
        assert fake_lib.live_handles == 1

    def test_failed_load_keeps_uninitialized(self, fake_lib):
        from spiece import SentencePieceProcessor
        from spiece.exceptions import InvalidArgumentError, StateError

        with SentencePieceProcessor() as spp:
            with pytest.raises(InvalidArgumentError):
                spp.load_from_bytes(b"junk")

            assert not spp.loaded
            with pytest.raises(StateError):
                spp.encode("I saw")

    def test_reload_replaces_model(self, spp, fake_lib):
        """A successful load swaps in the new model and frees the old handle."""
        small = FakeModel(pieces=["<unk>", "▁", "a", "b"], bos_id=-1, eos_id=-1)
        handles_before = fake_lib.live_handles

        spp.load_from_bytes(small.to_bytes())

        assert spp.vocab_size == 4
        assert spp.bos_id == -1
        assert spp.encode("ab").pieces == ["▁", "a", "b"]
        assert fake_lib.live_handles == handles_before

    def test_to_bytes_round_trip(self, spp):
        """load -> to_bytes -> load_from_bytes reproduces the model."""
        from spiece import SentencePieceProcessor

        with SentencePieceProcessor.from_bytes(spp.to_bytes()) as clone:
            assert clone.vocab_size == spp.vocab_size
            assert (clone.bos_id, clone.eos_id, clone.pad_id, clone.unk_id) == (
                spp.bos_id,
                spp.eos_id,
                spp.pad_id,
                spp.unk_id,
            )
            assert clone.encode("I saw a girl") == spp.encode("I saw a girl")


class TestLoadLogging:
    """Loads log at DEBUG with structured fields."""

    def test_model_loaded_record(self, fake_lib, model_bytes, captured_logs):
        from spiece import SentencePieceProcessor

        with SentencePieceProcessor.from_bytes(model_bytes):
            pass

        loaded = [r for r in captured_logs if r.getMessage() == "Model loaded"]
        assert len(loaded) == 1
        assert loaded[0].scope == "processor"
        assert loaded[0].vocab_size == 31
