"""Binary encoding of maps, sets and partition maps.

All lengths are unsigned 64-bit little-endian integers.
"""

from __future__ import annotations

import io
from collections.abc import Iterable, Mapping
from typing import BinaryIO

from skystore.model import Keyspace

LEN_SIZE = 8
OBJECT_ID_MAX_LEN = 64
_U64_MAX = (1 << 64) - 1


class CorruptDataError(ValueError):
    """Raised when encoded data is truncated, padded or otherwise malformed."""


def _as_bytes(value: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def encode_len(value: int) -> bytes:
    """Encode a length as 8 little-endian bytes."""
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"length out of range: {value}")
    return value.to_bytes(LEN_SIZE, "little")


def read_len(data: bytes | memoryview, offset: int) -> int:
    """Read an 8-byte little-endian length starting at ``offset``."""
    end = offset + LEN_SIZE
    if offset < 0 or end > len(data):
        raise CorruptDataError("not enough data for a length header")
    return int.from_bytes(bytes(data[offset:end]), "little")


def write_map(mapping: Mapping[bytes, bytes], stream: BinaryIO) -> None:
    """Write ``[LEN]([KLEN][VLEN][K][V])*`` for the mapping to the stream."""
    stream.write(encode_len(len(mapping)))
    for key, value in mapping.items():
        key_bytes, value_bytes = _as_bytes(key), _as_bytes(value)
        stream.write(encode_len(len(key_bytes)))
        stream.write(encode_len(len(value_bytes)))
        stream.write(key_bytes)
        stream.write(value_bytes)


def serialize_map(mapping: Mapping[bytes, bytes]) -> bytes:
    """Return the encoded form of a mapping."""
    buffer = io.BytesIO()
    write_map(mapping, buffer)
    return buffer.getvalue()


def write_set(keys: Iterable[bytes | str], stream: BinaryIO) -> None:
    """Write ``[LEN]([KLEN][K])*`` for the keys to the stream."""
    encoded = [_as_bytes(key) for key in keys]
    stream.write(encode_len(len(encoded)))
    for key in encoded:
        stream.write(encode_len(len(key)))
        stream.write(key)


def write_partmap(keyspace: Keyspace, stream: BinaryIO) -> None:
    """Write a keyspace's partition map.

    ``[EXTENT]([LEN][PARTITION ID][1B storage type][1B model type])*``
    """
    stream.write(encode_len(len(keyspace.tables)))
    for table_id, table in keyspace.tables.items():
        id_bytes = _as_bytes(table_id)
        stream.write(encode_len(len(id_bytes)))
        stream.write(id_bytes)
        stream.write(bytes([int(table.storage_type()), int(table.model_code())]))


def deserialize_map(data: bytes) -> dict[bytes, bytes]:
    """Decode an encoded map; raise CorruptDataError if it is malformed."""
    view = memoryview(data)
    end = len(view)
    if end < LEN_SIZE:
        raise CorruptDataError("missing length header")
    count = read_len(view, 0)
    offset = LEN_SIZE
    result: dict[bytes, bytes] = {}
    for _ in range(count):
        if offset + 2 * LEN_SIZE >= end:
            raise CorruptDataError("not enough data for an entry header")
        key_len = read_len(view, offset)
        value_len = read_len(view, offset + LEN_SIZE)
        offset += 2 * LEN_SIZE
        if offset + key_len + value_len > end:
            raise CorruptDataError("not enough data for an entry")
        key = bytes(view[offset : offset + key_len])
        offset += key_len
        result[key] = bytes(view[offset : offset + value_len])
        offset += value_len
    if offset != end:
        raise CorruptDataError("trailing data after the last entry")
    return result


def deserialize_set(data: bytes, max_len: int = OBJECT_ID_MAX_LEN) -> set[bytes]:
    """Decode an encoded set whose members are at most ``max_len`` bytes."""
    view = memoryview(data)
    end = len(view)
    if end < LEN_SIZE:
        raise CorruptDataError("missing length header")
    count = read_len(view, 0)
    offset = LEN_SIZE
    result: set[bytes] = set()
    for _ in range(count):
        if offset + LEN_SIZE >= end:
            raise CorruptDataError("not enough data for a member header")
        key_len = read_len(view, offset)
        offset += LEN_SIZE
        if offset + key_len > end:
            raise CorruptDataError("not enough data for a member")
        if key_len > max_len:
            raise CorruptDataError(f"member longer than {max_len} bytes")
        key = bytes(view[offset : offset + key_len])
        offset += key_len
        if key in result:
            raise CorruptDataError("duplicate member")
        result.add(key)
    if offset != end:
        raise CorruptDataError("trailing data after the last member")
    return result


def deserialize_set_bytemark(
    data: bytes, max_len: int = OBJECT_ID_MAX_LEN
) -> dict[bytes, tuple[int, int]]:
    """Decode a set whose members each carry two trailing bytemarks."""
    view = memoryview(data)
    end = len(view)
    if end < LEN_SIZE:
        raise CorruptDataError("missing length header")
    count = read_len(view, 0)
    offset = LEN_SIZE
    result: dict[bytes, tuple[int, int]] = {}
    for _ in range(count):
        if offset + LEN_SIZE >= end:
            raise CorruptDataError("not enough data for a member header")
        key_len = read_len(view, offset)
        offset += LEN_SIZE
        if offset + key_len + 2 > end:
            raise CorruptDataError("not enough data for a member")
        if key_len > max_len:
            raise CorruptDataError(f"member longer than {max_len} bytes")
        key = bytes(view[offset : offset + key_len])
        offset += key_len
        marks = (view[offset], view[offset + 1])
        offset += 2
        if key in result:
            raise CorruptDataError("duplicate member")
        result[key] = marks
    if offset != end:
        raise CorruptDataError("trailing data after the last member")
    return result