"""File-system layout of the store and buffered serialization helpers."""

from __future__ import annotations

import io
import shutil
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO

from skystore import codec, preload
from skystore.model import Keyspace, Memstore

DIR_ROOT = Path("data")
DIR_KSROOT = DIR_ROOT / "ks"
DIR_SNAPROOT = DIR_ROOT / "snaps"
DIR_BACKUPS = DIR_ROOT / "backups"

_PRELOAD_NAME = "PRELOAD"
_PARTMAP_NAME = "PARTMAP"


def _make_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except FileExistsError:
        pass


def create_tree(store: Memstore, root: str | Path = ".") -> None:
    """Create ``data/{ks,snaps,backups}`` and a directory per keyspace.

    Directories that already exist are left alone.
    """
    base = Path(root)
    for directory in (DIR_ROOT, DIR_KSROOT, DIR_BACKUPS, DIR_SNAPROOT):
        _make_dir(base / directory)
    for ks_id in store.keyspaces:
        _make_dir(base / DIR_KSROOT / ks_id)


def snap_create_tree(snapid: str, store: Memstore, root: str | Path = ".") -> None:
    """Create a snapshot directory with one subdirectory per keyspace."""
    base = Path(root)
    for ks_id in store.keyspaces:
        _make_dir(base / DIR_SNAPROOT / snapid / ks_id)


def _entry_names(path: Path) -> set[str]:
    return {entry.name for entry in path.iterdir()}


def cleanup_tree(store: Memstore, root: str | Path = ".", tripped: bool = False) -> None:
    """Remove keyspace directories and table files the store no longer holds.

    Nothing is done unless ``tripped`` says the set of keyspaces or tables changed.
    """
    if not tripped:
        return
    ks_root = Path(root) / DIR_KSROOT
    for folder in _entry_names(ks_root) - set(store.keyspaces):
        if folder != _PRELOAD_NAME:
            shutil.rmtree(ks_root / folder)
    for ks_id, keyspace in store.keyspaces.items():
        ks_path = ks_root / ks_id
        for old_file in _entry_names(ks_path) - set(keyspace.tables):
            if old_file != _PARTMAP_NAME:
                (ks_path / old_file).unlink()


def _write_buffered(stream: BinaryIO, buffer: io.BytesIO) -> None:
    stream.write(buffer.getvalue())
    stream.flush()


def serialize_map_into(stream: BinaryIO, mapping: Mapping[bytes, bytes]) -> None:
    """Serialize a map into a stream and flush it; syncing to disk is left to the caller."""
    buffer = io.BytesIO()
    codec.write_map(mapping, buffer)
    _write_buffered(stream, buffer)


def serialize_partmap_into(stream: BinaryIO, keyspace: Keyspace) -> None:
    """Serialize a keyspace's partition map into a stream and flush it."""
    buffer = io.BytesIO()
    codec.write_partmap(keyspace, buffer)
    _write_buffered(stream, buffer)


def serialize_preload_into(stream: BinaryIO, store: Memstore) -> None:
    """Serialize the store's preload into a stream and flush it."""
    buffer = io.BytesIO()
    preload.write_preload(store, buffer)
    _write_buffered(stream, buffer)