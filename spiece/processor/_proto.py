"""
Decoder for the serialized SentencePieceText record.

The encode entry points return a protobuf-encoded ``SentencePieceText``
(see ``sentencepiece_pb2``). Parsing is done by the protobuf runtime; this
module only checks that every piece carries its text, id and span.
"""

from google.protobuf.message import DecodeError

from ..exceptions import InternalError
from .pieces import EncodedSequence, PieceSpan, PieceWithId
from .sentencepiece_pb2 import SentencePieceText

__all__ = ["parse_encoded"]

_REQUIRED_FIELDS = ("piece", "id", "begin", "end")


def _decode_piece_text(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InternalError(
            "Encoding record field 'piece' is not valid UTF-8",
            code="MALFORMED_RECORD",
            details={"field": "piece"},
        ) from exc


def _to_piece(message) -> PieceWithId:
    for name in _REQUIRED_FIELDS:
        if not message.HasField(name):
            raise InternalError(
                f"Encoded text did not contain {name}",
                code="MISSING_DATA",
                details={"field": name},
            )

    return PieceWithId(
        piece=_decode_piece_text(message.piece),
        id=message.id,
        span=PieceSpan(message.begin, message.end),
    )


def parse_encoded(payload: bytes) -> EncodedSequence:
    """
    Decode a serialized SentencePieceText into an EncodedSequence.

    Raises
    ------
        InternalError: If the payload is malformed or a piece lacks its
            piece text, id, or span.
    """
    record = SentencePieceText()
    try:
        record.ParseFromString(payload)
    except DecodeError as exc:
        raise InternalError(
            f"Malformed encoding record from native library: {exc}",
            code="MALFORMED_RECORD",
            details={"length": len(payload)},
        ) from exc

    return EncodedSequence([_to_piece(piece) for piece in record.pieces])
