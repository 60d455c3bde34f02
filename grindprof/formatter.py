"""
Render ranked records as an aligned plain-text report.
"""

from typing import List

from .metrics import METRIC_DESCRIPTIONS
from .records import ParsedReport, ProfilerMode, Record

RULE = "-" * 80


def format_number(num: int) -> str:
    """Format large numbers with commas, the way the valgrind tools print them."""
    return f"{num:,}"


def format_share(value: int, total: int) -> str:
    """Percentage of total, as callgrind_annotate prints it."""
    share = (value / total * 100) if total > 0 else 0.0
    return f"{share:.1f}%"


def _summary_line(label: str, value: str) -> str:
    return f"{label:<24}{value}"


def _summary(full: ParsedReport, shown: int) -> List[str]:
    lines = [
        f"Profile summary ({full.mode.value})",
        RULE,
        _summary_line("Functions:", format_number(full.record_count)),
    ]

    for key in full.metric_keys:
        description = METRIC_DESCRIPTIONS.get(key, "")
        value = format_number(full.totals[key])
        if description:
            value = f"{value}  ({description})"
        lines.append(_summary_line(f"Total {key}:", value))

    if full.tool_totals:
        for key in full.metric_keys:
            if key in full.tool_totals:
                lines.append(_summary_line(f"Program totals {key}:", format_number(full.tool_totals[key])))

    lines.append(_summary_line("Showing:", f"{format_number(shown)} of {format_number(full.record_count)}"))
    lines.append(RULE)
    return lines


def _table(headers: List[str], rows: List[List[str]]) -> List[str]:
    """Right-align every column except the last, which holds the symbol name."""
    widths = [len(header) for header in headers[:-1]]
    for row in rows:
        for i, cell in enumerate(row[:-1]):
            widths[i] = max(widths[i], len(cell))

    lines = []
    for row in [headers] + rows:
        cells = [f"{cell:>{width}}" for cell, width in zip(row[:-1], widths)]
        lines.append("  ".join(cells + [row[-1]]).rstrip())
    return lines


def _instruction_rows(full: ParsedReport, records: List[Record]) -> List[str]:
    metric = full.primary_metric
    total = full.totals[metric]
    with_calls = any(record.calls is not None for record in records)

    headers = [metric, "Share"]
    if with_calls:
        headers.append("Calls")
    headers.append("Function")

    rows = []
    for record in records:
        row = [format_number(record.cost), format_share(record.cost, total)]
        if with_calls:
            row.append(format_number(record.calls) if record.calls is not None else "-")
        row.append(record.name)
        rows.append(row)
    return _table(headers, rows)


def _cache_rows(full: ParsedReport, records: List[Record]) -> List[str]:
    keys = list(full.metric_keys)
    rows = [
        [format_number(record.value(key)) for key in keys] + [record.name]
        for record in records
    ]
    return _table(keys + ["Function"], rows)


def format_report(report: ParsedReport) -> str:
    """
    Render the summary block and ranked records.

    `report` is normally the output of `select`: its records are listed in
    order while its totals and function count describe the full parse.
    """
    records = list(report.records)

    lines = _summary(report, len(records))
    lines.append("")
    if report.mode is ProfilerMode.INSTRUCTION_COUNT:
        lines.extend(_instruction_rows(report, records))
    else:
        lines.extend(_cache_rows(report, records))
    return "\n".join(lines) + "\n"
