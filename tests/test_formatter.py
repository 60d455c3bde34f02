from grindprof.cachegrind import parse_cachegrind
from grindprof.callgrind import parse_callgrind
from grindprof.formatter import format_number, format_report, format_share
from grindprof.selector import select

RULE = "-" * 80


def test_format_number_groups_thousands():
    assert format_number(0) == "0"
    assert format_number(1500000) == "1,500,000"


def test_format_share():
    assert format_share(1, 3) == "33.3%"
    assert format_share(5, 0) == "0.0%"


def test_instruction_report_layout():
    report = parse_callgrind("Ir  file:function\n1,000,000  foo::bar\n500,000  baz\n")
    text = format_report(select(report, count=1))

    assert text == "\n".join([
        "Profile summary (callgrind)",
        RULE,
        "Functions:              2",
        "Total Ir:               1,500,000  (instructions executed)",
        "Showing:                1 of 2",
        RULE,
        "",
        "       Ir  Share  Function",
        "1,000,000  66.7%  foo::bar",
    ]) + "\n"


def test_instruction_report_shows_calls_when_known():
    report = parse_callgrind("Ir  file:function\n900  hot (3x)\n100  cold\n")
    lines = format_report(select(report)).splitlines()

    assert lines[-3] == " Ir  Share  Calls  Function"
    assert lines[-2] == "900  90.0%      3  hot"
    assert lines[-1] == "100  10.0%      -  cold"


def test_cache_report_columns_follow_header():
    report = parse_cachegrind(
        "Ir  D1mr  file:function\n"
        "1,000  12  main\n"
        "20,000  3  ???:memcpy\n"
    )
    lines = format_report(select(report, sort="Ir")).splitlines()

    assert "Total Ir:               21,000  (instructions executed)" in lines
    assert "Total D1mr:             15  (L1 data read misses)" in lines
    assert lines[-3:] == [
        "    Ir  D1mr  Function",
        "20,000     3  ???:memcpy",
        " 1,000    12  main",
    ]


def test_program_totals_are_reported(read_data):
    report = parse_callgrind(read_data("callgrind_annotate.txt"))
    text = format_report(select(report, count=2))

    assert "Program totals Ir:      2,151,734" in text
    assert "Showing:                2 of 5" in text
