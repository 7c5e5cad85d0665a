"""VersionResponse wire codec.

Thin layer over the protobuf runtime: the runtime owns the message type,
merge semantics and unknown-field preservation, while this module walks the
wire format first so malformed input is reported as a typed DecodeError
carrying the failing byte offset.

Wire layout of the only known field:

    field 1 (version): tag 0x0A, varint length N, N bytes of UTF-8
"""

from __future__ import annotations

from typing import Iterator, NamedTuple, Tuple, Union

from google.protobuf import message as _message

from focus_grpc.focus_pb2 import VersionResponse

BytesLike = Union[bytes, bytearray, memoryview]

WIRETYPE_VARINT = 0
WIRETYPE_FIXED64 = 1
WIRETYPE_LENGTH_DELIMITED = 2
WIRETYPE_START_GROUP = 3
WIRETYPE_END_GROUP = 4
WIRETYPE_FIXED32 = 5

SUPPORTED_WIRE_TYPES = frozenset(
    {WIRETYPE_VARINT, WIRETYPE_FIXED64, WIRETYPE_LENGTH_DELIMITED, WIRETYPE_FIXED32}
)

MAX_VARINT_BYTES = 10
MAX_FIELD_NUMBER = (1 << 29) - 1

VERSION_FIELD_NUMBER = VersionResponse.VERSION_FIELD_NUMBER


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DecodeError(ValueError):
    """Raised when bytes do not form a valid VersionResponse."""

    def __init__(self, message: str, offset: int = 0) -> None:
        super().__init__(f"{message} (at byte {offset})")
        self.offset = offset


class TruncatedError(DecodeError):
    """Input ended inside a tag, varint, fixed-width value or length run."""


class MalformedVarintError(DecodeError):
    """Varint longer than ten bytes."""


class InvalidWireTypeError(DecodeError):
    """Wire type outside {0, 1, 2, 5}."""


class FieldNumberOutOfRangeError(DecodeError):
    """Field number of 0 or above 2**29 - 1."""


class InvalidUtf8Error(DecodeError):
    """The version payload is not UTF-8."""


class WireField(NamedTuple):
    """One field as laid out on the wire.

    ``start``/``end`` delimit the value: the payload for length-delimited
    fields, the raw bytes otherwise.
    """

    number: int
    wire_type: int
    start: int
    end: int


# ---------------------------------------------------------------------------
# Varints and tags
# ---------------------------------------------------------------------------

def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer (< 2**64) as a base-128 varint."""
    if value < 0 or value >= 1 << 64:
        raise ValueError(f"varint out of range: {value}")
    out = bytearray()
    while True:
        bits = value & 0x7F
        value >>= 7
        if value:
            out.append(bits | 0x80)
        else:
            out.append(bits)
            return bytes(out)


def decode_varint(data: BytesLike, pos: int = 0) -> Tuple[int, int]:
    """Read a varint at ``pos``. Returns ``(value, next_pos)``."""
    result = 0
    shift = 0
    start = pos
    while True:
        if pos - start >= MAX_VARINT_BYTES:
            raise MalformedVarintError(
                f"varint exceeds {MAX_VARINT_BYTES} bytes", start
            )
        if pos >= len(data):
            raise TruncatedError("input ends inside a varint", start)
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            break
        shift += 7
    if result >= 1 << 64:
        raise MalformedVarintError("varint overflows 64 bits", start)
    return result, pos


def decode_tag(data: BytesLike, pos: int = 0) -> Tuple[int, int, int]:
    """Read a field header. Returns ``(field_number, wire_type, next_pos)``."""
    tag, next_pos = decode_varint(data, pos)
    field_number = tag >> 3
    wire_type = tag & 0x07
    if field_number < 1 or field_number > MAX_FIELD_NUMBER:
        raise FieldNumberOutOfRangeError(
            f"field number {field_number} out of range", pos
        )
    if wire_type not in SUPPORTED_WIRE_TYPES:
        raise InvalidWireTypeError(f"invalid wire type {wire_type}", pos)
    return field_number, wire_type, next_pos


def skip_field(data: BytesLike, pos: int, wire_type: int) -> Tuple[int, int]:
    """Step over a field value. Returns ``(value_start, value_end)``."""
    if wire_type == WIRETYPE_VARINT:
        _, end = decode_varint(data, pos)
        return pos, end
    if wire_type == WIRETYPE_FIXED64:
        end = pos + 8
    elif wire_type == WIRETYPE_FIXED32:
        end = pos + 4
    elif wire_type == WIRETYPE_LENGTH_DELIMITED:
        length, pos = decode_varint(data, pos)
        end = pos + length
    elif wire_type in (WIRETYPE_START_GROUP, WIRETYPE_END_GROUP):
        raise InvalidWireTypeError(f"group wire type {wire_type} is not supported", pos)
    else:
        raise InvalidWireTypeError(f"invalid wire type {wire_type}", pos)
    if end > len(data):
        raise TruncatedError(
            f"field claims {end - pos} bytes, {len(data) - pos} remain", pos
        )
    return pos, end


def iter_fields(data: BytesLike) -> Iterator[WireField]:
    """Yield every field in ``data``, validating the framing as it goes."""
    pos = 0
    while pos < len(data):
        number, wire_type, pos = decode_tag(data, pos)
        start, end = skip_field(data, pos, wire_type)
        yield WireField(number, wire_type, start, end)
        pos = end


# ---------------------------------------------------------------------------
# Message operations
# ---------------------------------------------------------------------------

def encode(message: VersionResponse) -> bytes:
    """Serialize ``message``. An empty version yields ``b""``."""
    return message.SerializeToString(deterministic=True)


def decode(data: BytesLike) -> VersionResponse:
    """Parse ``data`` into a new VersionResponse.

    The last occurrence of the version field wins. Unknown fields are kept
    in the message and written back out by ``encode``.
    """
    data = bytes(data)
    for field in iter_fields(data):
        if (
            field.number == VERSION_FIELD_NUMBER
            and field.wire_type == WIRETYPE_LENGTH_DELIMITED
        ):
            try:
                data[field.start:field.end].decode("utf-8")
            except UnicodeDecodeError as exc:
                raise InvalidUtf8Error(
                    "version is not valid UTF-8", field.start + exc.start
                ) from exc

    message = VersionResponse()
    try:
        message.ParseFromString(data)
    except _message.DecodeError as exc:
        raise DecodeError(str(exc)) from exc
    return message


def merge(target: VersionResponse, source: VersionResponse) -> VersionResponse:
    """Merge ``source`` into ``target``.

    An empty source version is ignored. Unknown fields of ``source`` are
    appended to ``target``'s, so native ``==`` may then disagree with
    ``messages_equal``.
    """
    target.MergeFrom(source)
    return target


def clear(message: VersionResponse) -> VersionResponse:
    message.Clear()
    return message


def clone(message: VersionResponse) -> VersionResponse:
    copy = VersionResponse()
    copy.CopyFrom(message)
    return copy


def messages_equal(a: VersionResponse, b: VersionResponse) -> bool:
    """Value equality: only the version strings are compared."""
    return a.version == b.version
