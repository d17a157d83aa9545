"""Flush routines at the store, keyspace and table level.

Every file is written to a temporary name ending in ``_``, synced to disk and
then renamed into place.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

from skystore import interface
from skystore.interface import DIR_KSROOT, DIR_SNAPROOT
from skystore.model import Keyspace, Memstore, Table

_PRELOAD_NAME = "PRELOAD"
_PARTMAP_NAME = "PARTMAP"


def _atomic_write(final: Path, writer: Callable[[BinaryIO], None]) -> None:
    temp = final.with_name(final.name + "_")
    with open(temp, "wb") as file:
        writer(file)
        file.flush()
        os.fsync(file.fileno())
    os.replace(temp, final)


def _flush_table_to(path: Path, table: Table) -> None:
    if table.volatile:
        return
    _atomic_write(path, lambda f: interface.serialize_map_into(f, table.data))


def flush_table(
    table_id: str, ks_id: str, table: Table, root: str | Path = "."
) -> None:
    """Write a persistent table to ``data/ks/<ks>/<table>``; volatile tables are skipped."""
    _flush_table_to(Path(root) / DIR_KSROOT / ks_id / table_id, table)


def snap_flush_table(
    snapid: str, ks_id: str, table_id: str, table: Table, root: str | Path = "."
) -> None:
    """Write a persistent table into the snapshot ``snapid``."""
    _flush_table_to(Path(root) / DIR_SNAPROOT / snapid / ks_id / table_id, table)


def flush_keyspace(ks_id: str, keyspace: Keyspace, root: str | Path = ".") -> None:
    """Flush every table of a keyspace; the partition map is not written."""
    for table_id, table in keyspace.tables.items():
        flush_table(table_id, ks_id, table, root)


def snap_flush_keyspace(
    snapid: str, ks_id: str, keyspace: Keyspace, root: str | Path = "."
) -> None:
    """Flush every table of a keyspace into a snapshot."""
    for table_id, table in keyspace.tables.items():
        snap_flush_table(snapid, ks_id, table_id, table, root)


def flush_partmap(ks_id: str, keyspace: Keyspace, root: str | Path = ".") -> None:
    """Write a keyspace's ``PARTMAP``."""
    path = Path(root) / DIR_KSROOT / ks_id / _PARTMAP_NAME
    _atomic_write(path, lambda f: interface.serialize_partmap_into(f, keyspace))


def snap_flush_partmap(
    snapid: str, ks_id: str, keyspace: Keyspace, root: str | Path = "."
) -> None:
    """Write a keyspace's ``PARTMAP`` into a snapshot."""
    path = Path(root) / DIR_SNAPROOT / snapid / ks_id / _PARTMAP_NAME
    _atomic_write(path, lambda f: interface.serialize_partmap_into(f, keyspace))


def flush_preload(store: Memstore, root: str | Path = ".") -> None:
    """Write the store's ``PRELOAD`` to ``data/ks/PRELOAD``."""
    path = Path(root) / DIR_KSROOT / _PRELOAD_NAME
    _atomic_write(path, lambda f: interface.serialize_preload_into(f, store))


def snap_flush_preload(snapid: str, store: Memstore, root: str | Path = ".") -> None:
    """Write the store's ``PRELOAD`` into a snapshot."""
    path = Path(root) / DIR_SNAPROOT / snapid / _PRELOAD_NAME
    _atomic_write(path, lambda f: interface.serialize_preload_into(f, store))


def flush_keyspace_full(ks_id: str, keyspace: Keyspace, root: str | Path = ".") -> None:
    """Flush a keyspace's partition map and then all of its tables."""
    flush_partmap(ks_id, keyspace, root)
    flush_keyspace(ks_id, keyspace, root)


def flush_full(
    store: Memstore, root: str | Path = ".", preload_tripped: bool = False
) -> None:
    """Flush every keyspace in full.

    When ``preload_tripped`` is set, keyspaces or tables were added, so the
    directory tree is recreated and the ``PRELOAD`` rewritten first.
    """
    if preload_tripped:
        interface.create_tree(store, root)
        flush_preload(store, root)
    for ks_id, keyspace in store.keyspaces.items():
        flush_keyspace_full(ks_id, keyspace, root)


def snap_flush_keyspace_full(
    snapid: str, ks_id: str, keyspace: Keyspace, root: str | Path = "."
) -> None:
    """Flush a keyspace's partition map and tables into a snapshot."""
    snap_flush_partmap(snapid, ks_id, keyspace, root)
    snap_flush_keyspace(snapid, ks_id, keyspace, root)


def snap_flush_full(snapid: str, store: Memstore, root: str | Path = ".") -> None:
    """Write a complete snapshot of the store under ``data/snaps/<snapid>``."""
    interface.snap_create_tree(snapid, store, root)
    snap_flush_preload(snapid, store, root)
    for ks_id, keyspace in store.keyspaces.items():
        snap_flush_keyspace_full(snapid, ks_id, keyspace, root)