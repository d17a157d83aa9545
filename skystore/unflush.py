"""Unflush routines: read tables, keyspaces and the whole store back from disk."""

from __future__ import annotations

from pathlib import Path

from skystore import codec, interface, preload
from skystore.codec import CorruptDataError
from skystore.interface import DIR_KSROOT, DIR_ROOT
from skystore.model import (
    Keyspace,
    Memstore,
    StorageType,
    Table,
    default_memstore,
    table_from_model_code,
)
from skystore.preload import LoadedPartfile, UnsupportedFormatError

_PRELOAD_NAME = "PRELOAD"
_PARTMAP_NAME = "PARTMAP"
# The file whose presence marks an already initialised instance.
_INSTANCE_MARKER = DIR_ROOT / _PRELOAD_NAME


def read_table(
    ks_id: str,
    table_id: str,
    volatile: bool,
    model_code: int,
    root: str | Path = ".",
) -> Table:
    """Read a table from ``data/ks/<ks>/<table>``.

    Volatile tables have no file and come back empty. Raises CorruptDataError
    for a malformed file and UnsupportedFormatError for an unknown model code.
    """
    if volatile:
        data: dict[bytes, bytes] = {}
    else:
        path = Path(root) / DIR_KSROOT / ks_id / table_id
        data = codec.deserialize_map(path.read_bytes())
    try:
        return table_from_model_code(data, volatile, model_code)
    except ValueError:
        raise UnsupportedFormatError(
            f"unsupported model code: {model_code}"
        ) from None


def read_partmap(ks_id: str, root: str | Path = ".") -> LoadedPartfile:
    """Read the ``PARTMAP`` of a keyspace."""
    path = Path(root) / DIR_KSROOT / ks_id / _PARTMAP_NAME
    return preload.read_partfile_raw(path.read_bytes())


def read_keyspace(ks_id: str, root: str | Path = ".") -> dict[str, Table]:
    """Read every table listed in a keyspace's ``PARTMAP``."""
    tables: dict[str, Table] = {}
    for table_id, (storage_type, model_code) in read_partmap(ks_id, root).items():
        if storage_type > StorageType.VOLATILE:
            raise CorruptDataError(f"bad storage type: {storage_type}")
        is_volatile = storage_type == StorageType.VOLATILE
        tables.setdefault(
            table_id, read_table(ks_id, table_id, is_volatile, model_code, root)
        )
    return tables


def read_preload(root: str | Path = ".") -> set[str]:
    """Read the ``PRELOAD`` and return the keyspace ids it names."""
    path = Path(root) / DIR_KSROOT / _PRELOAD_NAME
    return preload.read_preload_raw(path.read_bytes())


def is_new_instance(root: str | Path = ".") -> bool:
    """Return True unless the instance marker file exists."""
    return not (Path(root) / _INSTANCE_MARKER).is_file()


def read_full(root: str | Path = ".") -> Memstore:
    """Load the whole store.

    On a new instance the directory tree is created and a default store is
    returned; otherwise every keyspace named by the ``PRELOAD`` is read.
    """
    if is_new_instance(root):
        store = default_memstore()
        interface.create_tree(store, root)
        return store
    keyspaces = {
        ks_id: Keyspace(tables=read_keyspace(ks_id, root))
        for ks_id in read_preload(root)
    }
    return Memstore(keyspaces=keyspaces)