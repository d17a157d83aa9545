import io

import pytest

from skystore import preload
from skystore.codec import CorruptDataError, encode_len
from skystore.model import (
    Keyspace,
    ModelCode,
    StorageType,
    Table,
    default_keyspace,
    default_memstore,
)
from skystore.preload import UnsupportedFormatError


def _preload_bytes(store):
    buffer = io.BytesIO()
    preload.write_preload(store, buffer)
    return buffer.getvalue()


def _partmap_bytes(keyspace):
    from skystore.codec import write_partmap

    buffer = io.BytesIO()
    write_partmap(keyspace, buffer)
    return buffer.getvalue()


def test_preload_round_trip():
    data = _preload_bytes(default_memstore())
    assert preload.read_preload_raw(data) == {"default", "system"}


def test_preload_starts_with_meta_segment():
    data = _preload_bytes(default_memstore())
    assert data[0] == 0b1000_0000
    assert data[1:9] == encode_len(2)


def test_preload_bad_meta_segment():
    data = bytearray(_preload_bytes(default_memstore()))
    data[0] = 0x01
    with pytest.raises(UnsupportedFormatError):
        preload.read_preload_raw(bytes(data))


def test_preload_too_short():
    with pytest.raises(CorruptDataError):
        preload.read_preload_raw(bytes([0x80]) + encode_len(0))


def test_preload_trailing_data():
    data = _preload_bytes(default_memstore()) + b"\x00\x01"
    with pytest.raises(CorruptDataError):
        preload.read_preload_raw(data)


def test_preload_truncated():
    data = _preload_bytes(default_memstore())[:-2]
    with pytest.raises(CorruptDataError):
        preload.read_preload_raw(data)


def test_bytemark_for_nonvolatile():
    ret = preload.read_partfile_raw(_partmap_bytes(default_keyspace()))
    assert ret == {"default": (StorageType.PERSISTENT, ModelCode.KV_BIN_BIN)}


def test_bytemark_volatility_mixed():
    ks = Keyspace()
    ks.create_table("cache", Table(volatile=True))
    ks.create_table("supersafe", Table(volatile=False))
    ret = preload.read_partfile_raw(_partmap_bytes(ks))
    assert ret == {
        "cache": (StorageType.VOLATILE, ModelCode.KV_BIN_BIN),
        "supersafe": (StorageType.PERSISTENT, ModelCode.KV_BIN_BIN),
    }


def test_partfile_keeps_model_codes():
    ks = Keyspace()
    ks.create_table("strs", Table(key_is_str=True, value_is_str=True))
    ret = preload.read_partfile_raw(_partmap_bytes(ks))
    assert ret == {"strs": (0, 2)}


def test_partfile_garbage():
    with pytest.raises(CorruptDataError):
        preload.read_partfile_raw(b"\x01\x02\x03")