"""
Protobuf messages for the encode results of the native library.

Declares the subset of ``sentencepiece.proto`` the encode entry points
return::

    message SentencePieceText {
      optional string text = 1;
      repeated SentencePiece pieces = 2;
      optional float score = 3;
    }
    message SentencePiece {
      optional string piece = 1;
      optional uint32 id = 2;
      optional string surface = 3;
      optional uint32 begin = 4;
      optional uint32 end = 5;
    }

String fields are declared as ``bytes``, which shares their wire format, so
that UTF-8 errors surface from our decoder instead of the runtime. The
descriptors live in a private pool; installing the ``sentencepiece`` package
alongside does not collide with them.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

__all__ = ["SentencePiece", "SentencePieceText"]

_FieldProto = descriptor_pb2.FieldDescriptorProto

_OPTIONAL = _FieldProto.LABEL_OPTIONAL
_REPEATED = _FieldProto.LABEL_REPEATED


def _field(message, name: str, number: int, field_type: int, label: int = _OPTIONAL, type_name: str = ""):
    field = message.field.add(name=name, number=number, type=field_type, label=label)
    if type_name:
        field.type_name = type_name


def _file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto(
        name="spiece/sentencepiece_text.proto",
        package="spiece",
        syntax="proto2",
    )

    text = proto.message_type.add(name="SentencePieceText")
    _field(text, "text", 1, _FieldProto.TYPE_BYTES)
    _field(text, "pieces", 2, _FieldProto.TYPE_MESSAGE, _REPEATED, ".spiece.SentencePiece")
    _field(text, "score", 3, _FieldProto.TYPE_FLOAT)

    piece = proto.message_type.add(name="SentencePiece")
    _field(piece, "piece", 1, _FieldProto.TYPE_BYTES)
    _field(piece, "id", 2, _FieldProto.TYPE_UINT32)
    _field(piece, "surface", 3, _FieldProto.TYPE_BYTES)
    _field(piece, "begin", 4, _FieldProto.TYPE_UINT32)
    _field(piece, "end", 5, _FieldProto.TYPE_UINT32)
    return proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_file_descriptor().SerializeToString())
DESCRIPTOR = _pool.FindFileByName("spiece/sentencepiece_text.proto")

SentencePieceText = message_factory.GetMessageClass(_pool.FindMessageTypeByName("spiece.SentencePieceText"))
SentencePiece = message_factory.GetMessageClass(_pool.FindMessageTypeByName("spiece.SentencePiece"))
