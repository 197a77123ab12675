"""
Reference test fixtures.

Reference tests run spiece against the real sentencepiece_ffi library and
the ``toy.model`` shipped with sentencepiece's test data. They skip unless
both paths are configured (see tests/conftest.py).
"""

import os

import pytest

from tests.conftest import REFERENCE_LIBRARY, REFERENCE_MODEL


def pytest_collection_modifyitems(config, items):
    """Mark every test in this directory as requiring the library."""
    here = os.path.dirname(__file__)
    for item in items:
        if str(item.path).startswith(here):
            item.add_marker(pytest.mark.requires_library)


@pytest.fixture(scope="module")
def native_lib():
    """Load the real library and make it the active one for the module."""
    if not REFERENCE_LIBRARY:
        pytest.skip("SPIECE_LIBRARY not set")

    from spiece import load_library
    from spiece._bindings import get_lib, set_lib

    previous = set_lib(None)
    try:
        load_library(REFERENCE_LIBRARY)
        yield get_lib()
    finally:
        set_lib(previous)


@pytest.fixture(scope="module")
def toy_model_path():
    if not REFERENCE_MODEL:
        pytest.skip("SPIECE_TEST_MODEL not set")
    if not os.path.isfile(REFERENCE_MODEL):
        pytest.skip(f"SPIECE_TEST_MODEL does not exist: {REFERENCE_MODEL}")
    return REFERENCE_MODEL


@pytest.fixture(scope="module")
def toy(native_lib, toy_model_path):
    """Processor with toy.model loaded, shared by the module."""
    from spiece import SentencePieceProcessor

    spp = SentencePieceProcessor.open(toy_model_path)
    yield spp
    spp.close()
