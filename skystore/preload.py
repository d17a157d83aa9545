"""Preload files: the store-wide ``PRELOAD`` and the per-keyspace ``PARTMAP``.

A preload is laid out as::

    [1B: meta segment][8B: extent]([8B: id len][id])*
"""

from __future__ import annotations

from typing import BinaryIO

from skystore import codec
from skystore.codec import CorruptDataError
from skystore.model import Memstore

# Version and endian marks share one byte; lengths are always little endian.
META_SEGMENT = 0b1000_0000
_MIN_PRELOAD_LEN = 16

LoadedPartfile = dict[str, tuple[int, int]]


class UnsupportedFormatError(ValueError):
    """Raised when a preload carries a meta segment this code cannot read."""


def _decode_id(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise CorruptDataError("object id is not valid UTF-8") from None


def write_preload(store: Memstore, stream: BinaryIO) -> None:
    """Write the ``PRELOAD`` for a store: the meta segment and its keyspace ids."""
    stream.write(bytes([META_SEGMENT]))
    codec.write_set(store.keyspaces.keys(), stream)


def read_preload_raw(data: bytes) -> set[str]:
    """Decode a ``PRELOAD`` into the set of keyspace ids it names."""
    if len(data) < _MIN_PRELOAD_LEN:
        raise CorruptDataError("preload is too short")
    if data[0] != META_SEGMENT:
        raise UnsupportedFormatError(f"unsupported meta segment: {data[0]:#04x}")
    return {_decode_id(raw) for raw in codec.deserialize_set(data[1:])}


def read_partfile_raw(data: bytes) -> LoadedPartfile:
    """Decode a ``PARTMAP`` into table ids mapped to (storage type, model code)."""
    return {
        _decode_id(raw): marks
        for raw, marks in codec.deserialize_set_bytemark(data).items()
    }