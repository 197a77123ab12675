"""
Processor: load sentencepiece models, encode text, decode pieces.
"""

from .handle import ProcessorHandle
from .pieces import EncodedSequence, PieceSpan, PieceWithId
from .processor import MAX_N_BEST, SentencePieceProcessor
from .synchronized import SynchronizedProcessor

__all__ = [
    "SentencePieceProcessor",
    "SynchronizedProcessor",
    "ProcessorHandle",
    "EncodedSequence",
    "PieceWithId",
    "PieceSpan",
    "MAX_N_BEST",
]
