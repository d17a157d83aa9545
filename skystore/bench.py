"""Helpers for the benchmark tool: frame size estimates and result reports."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

DEFAULT_WORKER_COUNT = 10
DEFAULT_PACKET_SIZE = 8
DEFAULT_QUERY_COUNT = 100_000

# The size of ``*1\n``
SIMPLE_QUERY_SIZE = 3


def calculate_array_dataframe_size(element_count: int, per_element_size: int) -> int:
    """Size of an array dataframe ``&<n>\\n(+<size>\\n<element>\\n)*``."""
    header = 1 + len(str(element_count)) + 1
    per_element = 1 + len(str(per_element_size)) + 1 + per_element_size + 1
    return header + per_element * element_count


def calculate_monoelement_dataframe_size(per_element_size: int) -> int:
    """Size of a single-element dataframe ``<tsymbol><size>\\n<element>\\n``."""
    return 1 + len(str(per_element_size)) + 1 + per_element_size + 1


def calculate_metaframe_size(queries: int) -> int:
    """Size of the metaframe ``*<n>\\n``."""
    if queries == 1:
        return SIMPLE_QUERY_SIZE
    return 1 + len(str(queries)) + 1


def calc(reqs: int, time_ns: int) -> float:
    """Return the number of queries per second."""
    seconds = time_ns / 1_000_000_000
    if seconds == 0:
        return math.nan if reqs == 0 else math.inf
    return reqs / seconds


def hoststr(host: str, port: int) -> str:
    """Join a host and port as ``host:port``."""
    return f"{host}:{port}"


@dataclass(order=True)
class ReportBlock:
    """One benchmark result; blocks compare and sort by report name only."""

    report: str
    stat: float = field(compare=False)


def report_json(blocks: Iterable[ReportBlock]) -> str:
    """Serialize the blocks, sorted by name, as a compact JSON array."""
    return json.dumps(
        [{"report": b.report, "stat": b.stat} for b in sorted(blocks)],
        separators=(",", ":"),
    )


def format_report(blocks: Iterable[ReportBlock]) -> str:
    """Render the blocks, sorted by name, as the human-readable results table."""
    ordered = sorted(blocks)
    maxpad = max((len(b.report) for b in ordered), default=0)
    lines = ["===========RESULTS==========="]
    lines.extend(f"{b.report.ljust(maxpad)} {b.stat:.6f}/sec" for b in ordered)
    lines.append("=============================")
    return "\n".join(lines)