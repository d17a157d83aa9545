import json
import math

import pytest

from skystore import bench
from skystore.bench import ReportBlock


def test_monoelement_calculation():
    assert bench.calculate_monoelement_dataframe_size(1) == 5


def test_simple_query_metaframe_size():
    assert bench.calculate_metaframe_size(1) == bench.SIMPLE_QUERY_SIZE
    assert bench.SIMPLE_QUERY_SIZE == 3


def test_okay_response_size():
    # `*1\n!1\n0\n`
    okay = bench.calculate_monoelement_dataframe_size(1) + bench.SIMPLE_QUERY_SIZE
    assert okay == len(b"*1\n!1\n0\n")


@pytest.mark.parametrize("queries,frame", [(2, b"*2\n"), (10, b"*10\n"), (123, b"*123\n")])
def test_metaframe_size_matches_frame(queries, frame):
    assert bench.calculate_metaframe_size(queries) == len(frame)


def test_monoelement_size_matches_frame():
    frame = b"+10\n" + b"x" * 10 + b"\n"
    assert bench.calculate_monoelement_dataframe_size(10) == len(frame)


def test_array_dataframe_size_matches_frame():
    frame = b"&2\n" + b"+3\nabc\n" + b"+3\ndef\n"
    assert bench.calculate_array_dataframe_size(2, 3) == len(frame)


def test_calc():
    assert bench.calc(100, 1_000_000_000) == pytest.approx(100.0)
    assert bench.calc(50, 500_000_000) == pytest.approx(100.0)


def test_calc_zero_time():
    assert bench.calc(10, 0) == math.inf
    assert math.isnan(bench.calc(0, 0))


def test_hoststr():
    assert bench.hoststr("127.0.0.1", 2003) == "127.0.0.1:2003"


def test_report_blocks_order_by_name():
    blocks = [ReportBlock("UPDATE", 1.0), ReportBlock("GET", 3.0), ReportBlock("SET", 2.0)]
    assert [b.report for b in sorted(blocks)] == ["GET", "SET", "UPDATE"]
    assert ReportBlock("GET", 1.0) == ReportBlock("GET", 99.0)


def test_report_json():
    out = bench.report_json([ReportBlock("SET", 2.5), ReportBlock("GET", 1.5)])
    assert out == '[{"report":"GET","stat":1.5},{"report":"SET","stat":2.5}]'
    assert json.loads(out)[1]["stat"] == 2.5


def test_format_report():
    out = bench.format_report(
        [ReportBlock("UPDATE", 3.0), ReportBlock("GET", 1.5), ReportBlock("SET", 2.0)]
    )
    assert out.splitlines() == [
        "===========RESULTS===========",
        "GET    1.500000/sec",
        "SET    2.000000/sec",
        "UPDATE 3.000000/sec",
        "=============================",
    ]


def test_format_report_empty():
    assert bench.format_report([]) == (
        "===========RESULTS===========\n============================="
    )