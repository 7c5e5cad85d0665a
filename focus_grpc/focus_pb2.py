"""Protobuf message module for ``focus.proto``.

Mirrors what ``protoc --python_out`` emits for ``focus.proto``. The file
descriptor is assembled from a FileDescriptorProto at import time instead of
an embedded serialized byte string, so the module works across protobuf
runtime versions without a regeneration step.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2 as _descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import empty_pb2 as _empty_pb2  # noqa: F401  registers google/protobuf/empty.proto
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder

_EMPTY_TYPE = ".google.protobuf.Empty"


def _build_file_descriptor_proto() -> bytes:
    fdp = _descriptor_pb2.FileDescriptorProto()
    fdp.name = "focus.proto"
    fdp.package = "focus"
    fdp.syntax = "proto3"
    fdp.dependency.append("google/protobuf/empty.proto")

    # VersionResponse { string version = 1; }
    msg = fdp.message_type.add()
    msg.name = "VersionResponse"
    f = msg.field.add()
    f.name = "version"
    f.json_name = "version"
    f.number = 1
    f.type = _descriptor_pb2.FieldDescriptorProto.TYPE_STRING
    f.label = _descriptor_pb2.FieldDescriptorProto.LABEL_OPTIONAL

    svc = fdp.service.add()
    svc.name = "Focus"

    m = svc.method.add()
    m.name = "Raise"
    m.input_type = _EMPTY_TYPE
    m.output_type = _EMPTY_TYPE

    m = svc.method.add()
    m.name = "Version"
    m.input_type = _EMPTY_TYPE
    m.output_type = ".focus.VersionResponse"

    return fdp.SerializeToString()


_sym_db = _symbol_database.Default()

DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(
    _build_file_descriptor_proto()
)

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, "focus_grpc.focus_pb2", _globals)

VersionResponse = _globals["VersionResponse"]
