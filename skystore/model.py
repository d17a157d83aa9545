"""In-memory data model: tables, keyspaces and the store that holds them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class ModelCode(IntEnum):
    """Bytemark that records a key/value table's key and value types."""

    KV_BIN_BIN = 0
    KV_BIN_STR = 1
    KV_STR_STR = 2
    KV_STR_BIN = 3


class StorageType(IntEnum):
    """Bytemark that records whether a table is written to disk."""

    PERSISTENT = 0
    VOLATILE = 1


_TYPES_FOR_MODEL = {
    ModelCode.KV_BIN_BIN: (False, False),
    ModelCode.KV_BIN_STR: (False, True),
    ModelCode.KV_STR_STR: (True, True),
    ModelCode.KV_STR_BIN: (True, False),
}
_MODEL_FOR_TYPES = {types: code for code, types in _TYPES_FOR_MODEL.items()}


@dataclass
class Table:
    """A key/value table holding raw byte keys and values."""

    data: dict[bytes, bytes] = field(default_factory=dict)
    volatile: bool = False
    key_is_str: bool = False
    value_is_str: bool = False

    def model_code(self) -> ModelCode:
        """Return the bytemark describing this table's key and value types."""
        return _MODEL_FOR_TYPES[(self.key_is_str, self.value_is_str)]

    def storage_type(self) -> StorageType:
        """Return the bytemark describing this table's persistence."""
        return StorageType.VOLATILE if self.volatile else StorageType.PERSISTENT


def table_from_model_code(
    data: dict[bytes, bytes], volatile: bool, model_code: int
) -> Table:
    """Build a table from its data, volatility and model bytemark.

    Raises ValueError for an unknown model code.
    """
    try:
        key_is_str, value_is_str = _TYPES_FOR_MODEL[ModelCode(model_code)]
    except ValueError:
        raise ValueError(f"unsupported model code: {model_code}") from None
    return Table(
        data=data, volatile=volatile, key_is_str=key_is_str, value_is_str=value_is_str
    )


@dataclass
class Keyspace:
    """A named collection of tables."""

    tables: dict[str, Table] = field(default_factory=dict)

    def create_table(self, table_id: str, table: Table) -> bool:
        """Add a table; return False if one with this id already exists."""
        if table_id in self.tables:
            return False
        self.tables[table_id] = table
        return True


@dataclass
class Memstore:
    """The whole in-memory store: a map of keyspace ids to keyspaces."""

    keyspaces: dict[str, Keyspace] = field(default_factory=dict)


def default_keyspace() -> Keyspace:
    """Return a keyspace holding one persistent binary table named ``default``."""
    return Keyspace(tables={"default": Table()})


def default_memstore() -> Memstore:
    """Return a fresh store with the ``default`` and ``system`` keyspaces."""
    return Memstore(keyspaces={"default": default_keyspace(), "system": Keyspace()})