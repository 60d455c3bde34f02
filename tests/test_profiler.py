import pytest

from grindprof import (
    ColumnMismatch,
    EmptyOutput,
    Profiler,
    ProfilerMode,
    UnknownMetric,
    profile_cachegrind,
    profile_callgrind,
)


def _function_lines(text):
    _, _, table = text.partition("\n\n")
    return table.splitlines()[1:]


def test_top_one_example():
    raw = "Ir  file:function\n1,000,000  foo::bar\n500,000  baz\n"
    text = profile_callgrind(raw, count="1")

    rows = _function_lines(text)
    assert len(rows) == 1
    assert rows[0].endswith("foo::bar")
    assert "1,000,000" in rows[0]
    assert "Total Ir:               1,500,000" in text


def test_every_record_listed_without_limits(read_data):
    text = profile_cachegrind(read_data("cg_annotate_legacy.txt"))
    assert len(_function_lines(text)) == 3
    assert "Total Ir:               1,900,000" in text


def test_column_mismatch_example():
    with pytest.raises(ColumnMismatch):
        profile_cachegrind("Ir  Dr  file:function\n1  2  3  foo\n")


def test_banner_only_example():
    raw = "==7== Callgrind, a call-graph generating cache profiler\n------------\n============\n"
    with pytest.raises(EmptyOutput):
        profile_callgrind(raw)


def test_unknown_metric_leaves_no_output(read_data):
    with pytest.raises(UnknownMetric):
        profile_cachegrind(read_data("cg_annotate_3_22.txt"), sort="D1mr")


def test_repeated_runs_are_identical(read_data):
    raw = read_data("cg_annotate_3_22.txt")
    first = profile_cachegrind(raw, count=2, sort="bcm")
    second = profile_cachegrind(raw, count=2, sort="bcm")
    assert first == second


def test_profiler_modes():
    assert Profiler.callgrind().mode is ProfilerMode.INSTRUCTION_COUNT
    assert Profiler.cachegrind().mode is ProfilerMode.CACHE_BEHAVIOR
    assert Profiler("cachegrind").mode is ProfilerMode.CACHE_BEHAVIOR


def test_profiler_select_keeps_full_totals(read_data):
    selected = Profiler.callgrind().select(read_data("callgrind_annotate.txt"), count=2)
    assert [record.cost for record in selected.records] == [1000000, 500000]
    assert selected.totals == {"Ir": 2151734}
    assert selected.record_count == 5
