import pytest

from grindprof.callgrind import parse_callgrind
from grindprof.errors import ColumnMismatch, EmptyOutput, MalformedHeader, UnparseableNumber
from grindprof.metrics import RecognitionTable
from grindprof.records import ProfilerMode
from grindprof.tokenizer import tokenize


def test_parses_annotate_output(read_data):
    report = parse_callgrind(tokenize(read_data("callgrind_annotate.txt")))

    assert report.mode is ProfilerMode.INSTRUCTION_COUNT
    assert report.metric_keys == ("Ir",)
    assert report.record_count == 5
    assert [record.cost for record in report.records] == [500000, 1000000, 400000, 151734, 100000]
    assert report.totals == {"Ir": 2151734}
    assert report.tool_totals == {"Ir": 2151734}


def test_call_counts_are_split_from_names(read_data):
    report = parse_callgrind(tokenize(read_data("callgrind_annotate.txt")))
    by_index = {record.index: record for record in report.records}

    assert by_index[0].calls is None
    assert by_index[1].name == "???:demo::main [/work/target/release/demo]"
    assert by_index[1].calls == 1
    assert by_index[2].name == "???:core::fmt::write<&mut alloc::string::String> [/work/target/release/demo]"
    assert by_index[2].calls == 12


def test_source_annotation_is_not_parsed(read_data):
    report = parse_callgrind(tokenize(read_data("callgrind_annotate.txt")))
    assert all("run();" not in record.name for record in report.records)


def test_name_is_everything_after_the_counts():
    report = parse_callgrind(tokenize("Ir  file:function\n1,000,000  foo::bar\n500,000  baz\n"))
    assert [record.name for record in report.records] == ["foo::bar", "baz"]
    assert [record.cost for record in report.records] == [1000000, 500000]


def test_cost_column_located_by_label():
    raw = (
        "Dr      Ir      calls  file:function\n"
        "10      3,000   7      hot\n"
        "20      1,000   2      cold\n"
    )
    report = parse_callgrind(tokenize(raw))
    assert [(record.name, record.cost, record.calls) for record in report.records] == [
        ("hot", 3000, 7),
        ("cold", 1000, 2),
    ]


def test_annotation_lines_are_skipped():
    raw = (
        "Ir  file:function\n"
        "100  foo\n"
        "note: some symbols were not found\n"
        "50  bar\n"
    )
    report = parse_callgrind(tokenize(raw))
    assert [record.name for record in report.records] == ["foo", "bar"]


def test_tree_context_lines_are_skipped():
    raw = (
        "Ir  file:function\n"
        "300  <  ???:caller (2x) [app]\n"
        "200  *  ???:callee [app]\n"
        "100  >  ???:leaf (4x) [app]\n"
    )
    report = parse_callgrind(tokenize(raw))
    assert [(record.name, record.cost) for record in report.records] == [("???:callee [app]", 200)]


def test_data_before_header_is_malformed():
    with pytest.raises(MalformedHeader) as info:
        parse_callgrind(tokenize("1,000  foo\nIr\n"))
    assert info.value.line_number == 1
    assert "Ir" in str(info.value)


def test_header_without_cost_column_is_malformed():
    with pytest.raises(MalformedHeader) as info:
        parse_callgrind(tokenize("Dr  file:function\n10  foo\n"))
    assert "no instruction cost column" in str(info.value)


def test_no_data_lines_is_empty_output():
    raw = "==1== Callgrind\n--------\nIr  file:function\n--------\n"
    with pytest.raises(EmptyOutput):
        parse_callgrind(tokenize(raw))


def test_column_count_mismatch():
    with pytest.raises(ColumnMismatch) as info:
        parse_callgrind(tokenize("Ir  file:function\n10  20  foo\n"))
    assert info.value.found == 2
    assert info.value.line_number == 2


def test_bad_number_reports_line():
    with pytest.raises(UnparseableNumber) as info:
        parse_callgrind(tokenize("Ir  file:function\n1,00  foo\n"))
    assert info.value.line_number == 2


def test_alternate_cost_label():
    table = RecognitionTable(cost_labels=["Instructions"])
    report = parse_callgrind(tokenize("Instructions  function\n42  foo\n"), table)
    assert report.records[0].cost == 42


def test_accepts_raw_text():
    report = parse_callgrind("Ir\n5  foo\n")
    assert report.records[0].name == "foo"


def test_names_starting_with_angle_bracket_are_records():
    raw = (
        "Ir  file:function\n"
        "1,000  <alloc::vec::Vec<T> as core::ops::drop::Drop>::drop\n"
        "500  baz\n"
        "250  *mut_ptr_helper\n"
    )
    report = parse_callgrind(tokenize(raw))
    assert [record.name for record in report.records] == [
        "<alloc::vec::Vec<T> as core::ops::drop::Drop>::drop",
        "baz",
        "*mut_ptr_helper",
    ]
    assert report.totals == {"Ir": 1750}


def test_bad_call_count_reports_line():
    with pytest.raises(UnparseableNumber) as info:
        parse_callgrind(tokenize("Ir  file:function\n10  foo (1.5x)\n"))
    assert info.value.line_number == 2
    assert info.value.column == "calls"
