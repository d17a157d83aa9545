# skystore

`skystore` reads and writes the on-disk layout of a small key/value database.
It encodes tables, partition maps and the preload file in a compact binary
format, writes them into a data directory, and reads them back. It also has
helpers for sizing protocol frames, formatting benchmark results and
measuring how timings change as client counts grow.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## On-disk format

Every length is an unsigned 64-bit little-endian integer.

- **Table file**: `[LEN:8B]([KLEN:8B][VLEN:8B][K][V])*`
- **Partition map** (`PARTMAP`): `[EXTENT:8B]([LEN:8B][TABLE ID][1B storage type][1B model code])*`
- **Preload** (`PRELOAD`): a one-byte meta segment (`0x80`) followed by the
  set of keyspace ids, written as `[EXTENT:8B]([LEN:8B][ID])*`

Storage types and model codes are the `StorageType` and `ModelCode` enums in
`skystore.model`.

The directory tree under a root looks like this:

```
data/
    ks/
        PRELOAD
        <keyspace>/
            PARTMAP
            <table>
    snaps/
        <snapid>/
            PRELOAD
            <keyspace>/
                PARTMAP
                <table>
    backups/
```

## Usage

### Encoding and decoding (`skystore.codec`)

```python
from skystore.codec import serialize_map, deserialize_map, CorruptDataError

blob = serialize_map({b"hello": b"world"})
assert deserialize_map(blob) == {b"hello": b"world"}

try:
    deserialize_map(blob[:-1])
except CorruptDataError:
    print("truncated data is rejected")
```

Decoding raises `CorruptDataError` (a `ValueError`) for input that is
truncated, has bytes left over, or repeats a member. `deserialize_set` and
`deserialize_set_bytemark` also reject members longer than `max_len` bytes
(64 by default). `write_map`, `write_set` and `write_partmap` write to any
binary stream.

### Stores, keyspaces and tables (`skystore.model`)

```python
from skystore.model import Keyspace, Table, default_memstore

store = default_memstore()  # the "default" and "system" keyspaces
ks = Keyspace()
ks.create_table("cache", Table(volatile=True))   # True
ks.create_table("cache", Table())                # False: id already taken
store.keyspaces["myks"] = ks
```

A `Table` holds a `dict[bytes, bytes]` in `data`; `model_code()` and
`storage_type()` give the bytemarks written to the partition map.
`table_from_model_code` builds a table from those bytemarks and raises
`ValueError` for an unknown model code.

### Preload files (`skystore.preload`)

`write_preload` writes a store's preload to a stream, `read_preload_raw`
returns the set of keyspace ids in one, and `read_partfile_raw` maps each
table id in a partition map to its `(storage type, model code)` pair. A
preload with an unknown meta segment raises `UnsupportedFormatError`.

### Flushing to disk (`skystore.flush`, `skystore.interface`)

```python
from pathlib import Path
from skystore.flush import flush_full
from skystore.unflush import read_keyspace, read_preload

root = Path("/tmp/skydata")
flush_full(store, root, preload_tripped=True)

assert read_preload(root) == {"default", "system", "myks"}
tables = read_keyspace("myks", root)
```

With `preload_tripped=True`, `flush_full` first creates the directory tree
(`interface.create_tree`) and rewrites `data/ks/PRELOAD`; it then writes each
keyspace's `PARTMAP` and table files. Each file is written to a temporary
name ending in `_`, synced to disk and renamed into place. Volatile tables
are listed in the partition map but get no data file, and are read back
empty.

`snap_flush_full(snapid, store, root)` writes the same layout under
`data/snaps/<snapid>/`. `interface.cleanup_tree(store, root, tripped=True)`
removes keyspace directories and table files that the store no longer holds.

### Loading (`skystore.unflush`)

`read_table`, `read_partmap`, `read_keyspace` and `read_preload` read the
pieces back. `read_full(root)` loads a whole store: if `data/PRELOAD` does
not exist under the root, `is_new_instance` is true and `read_full` creates
the directory tree and returns a fresh default store; otherwise it reads
every keyspace named by `data/ks/PRELOAD`. Note that the flush routines write
the preload to `data/ks/PRELOAD`, not to `data/PRELOAD`.

### Benchmark reporting (`skystore.bench`)

```python
from skystore.bench import ReportBlock, calc, format_report, report_json

blocks = [ReportBlock("SET", calc(100_000, 2_000_000_000))]
print(format_report(blocks))
print(report_json(blocks))   # [{"report":"SET","stat":50000.0}]
```

`calculate_metaframe_size`, `calculate_monoelement_dataframe_size` and
`calculate_array_dataframe_size` give the byte sizes of protocol frames, and
`hoststr` joins a host and port. Reports are sorted by name.

### Linearity (`skystore.linearity`)

`LinearityMeter.get_delta(current)` takes the first timing as a baseline and
returns 0.0; every later call returns, and records in `measure`, the
percentage change from that baseline.

## What this package does not do

It is a storage and reporting library only. There is no database server, no
network client, no query protocol implementation, and no command-line
program: the benchmark and linearity helpers compute sizes, rates and
reports but do not connect to anything or run load themselves.