"""
spiece - sentencepiece tokenization from Python.

spiece binds the native sentencepiece library through its small C
interface (``libsentencepiece_ffi``). Models are trained elsewhere; spiece
loads them, segments text into pieces, and turns pieces back into text.

Quick Start
-----------

    >>> from spiece import SentencePieceProcessor
    >>>
    >>> with SentencePieceProcessor.open("toy.model") as spp:
    ...     seq = spp.encode("I saw a girl with a telescope.")
    ...     print(seq.pieces[:4])
    ...     print(spp.decode(seq.ids))
    ['▁I', '▁saw', '▁a', '▁girl']
    I saw a girl with a telescope.

Subword regularization:

    >>> seq = spp.sample_encode("I saw a girl", n_best=10, alpha=0.5)

Models in memory:

    >>> data = spp.to_bytes()
    >>> clone = SentencePieceProcessor.from_bytes(data)


Native Library
--------------

The shared library is located on first use, in this order:

- ``SPIECE_LIBRARY`` environment variable (path to the library)
- a library shipped inside the package directory
- the system loader path (``sentencepiece_ffi``)

Call ``spiece.load_library(path)`` to choose one explicitly.


Threads
-------

A processor belongs to one owner. To share one across threads, wrap it in
``SynchronizedProcessor``; otherwise create one processor per thread.
"""

from spiece._bindings import load_library
from spiece._logging import setup_logging
from spiece._version import __version__ as __version__

# Exceptions (all via spiece.exceptions)
from spiece.exceptions import (
    AllocationError,
    InternalError,
    InvalidArgumentError,
    LibraryError,
    NotFoundError,
    SentencePieceError,
    StateError,
    UnknownStatusError,
)

# Processor
from spiece.processor import (
    EncodedSequence,
    PieceSpan,
    PieceWithId,
    SentencePieceProcessor,
    SynchronizedProcessor,
)

# Status
from spiece.status import Status, StatusCode, translate_status


def set_log_level(level: str) -> None:
    """Set logging verbosity level.

    Args:
        level: One of 'trace', 'debug', 'info', 'warn', 'error', 'off'.
               Default is 'warn' (silent operation).

    Example:
        >>> import spiece
        >>> spiece.set_log_level('debug')  # Enable debug output
        >>> spiece.set_log_level('warn')   # Back to silent (default)
    """
    setup_logging(level)


__all__ = [
    # Processor
    "SentencePieceProcessor",
    "SynchronizedProcessor",
    "EncodedSequence",
    "PieceWithId",
    "PieceSpan",
    # Native library
    "load_library",
    # Status
    "Status",
    "StatusCode",
    "translate_status",
    # Logging
    "setup_logging",
    "set_log_level",
    # Exceptions
    "SentencePieceError",
    "NotFoundError",
    "InvalidArgumentError",
    "InternalError",
    "StateError",
    "UnknownStatusError",
    "AllocationError",
    "LibraryError",
]
