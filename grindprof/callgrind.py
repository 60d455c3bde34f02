"""
Parse callgrind_annotate output into instruction-count records.

Example input (valgrind 3.18):

    --------------------------------------------------------------------------------
    Ir
    --------------------------------------------------------------------------------
    2,151,734 (100.0%)  PROGRAM TOTALS

    --------------------------------------------------------------------------------
    Ir                 file:function
    --------------------------------------------------------------------------------
    1,000,000 (46.47%)  ???:foo::bar [/tmp/app]
      500,000 (23.24%)  ???:baz (12x) [/tmp/app]
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ColumnMismatch, EmptyOutput, MalformedHeader
from .fields import header_labels, parse_count, split_data_line
from .metrics import COST_METRIC, DEFAULT_TABLE, RecognitionTable
from .records import InstructionRecord, ParsedReport, ProfilerMode
from .tokenizer import Line, TokenStream, tokenize

logger = logging.getLogger(__name__)

# "(12x)" after a symbol when callgrind_annotate knows the call count
CALL_COUNT = re.compile(r'\s*\((\d[\d,.]*)x\)')

# --tree markers: "<" caller, ">" callee, "*" the function itself, each
# followed by whitespace before the symbol
TREE_MARKER = re.compile(r'^([<>*])\s+')


class CallgrindColumns:
    """Positions of the cost and call-count columns on a header line."""

    def __init__(self, labels: List[str], cost_index: int, calls_index: Optional[int], line: Line):
        self.labels = labels
        self.cost_index = cost_index
        self.calls_index = calls_index
        self.line = line

    @classmethod
    def detect(cls, line: Line, table: RecognitionTable) -> Optional["CallgrindColumns"]:
        """Return the columns for a header line, or None if it is not a header."""
        labels = header_labels(line.text, table)
        if labels is None:
            return None

        cost_index = next((i for i, label in enumerate(labels) if table.is_cost_label(label)), None)
        if cost_index is None:
            raise MalformedHeader(
                line.number, line.text, table.cost_labels,
                reason="header has no instruction cost column",
            )
        calls_index = next((i for i, label in enumerate(labels) if table.is_call_label(label)), None)

        logger.debug("Line %d: header columns %s (cost at %d)", line.number, labels, cost_index)
        return cls(labels, cost_index, calls_index, line)


def _split_calls(name: str, line_number: int) -> Tuple[str, Optional[int]]:
    match = CALL_COUNT.search(name)
    if not match:
        return name, None
    calls = parse_count(match.group(1), line_number, "calls")
    return (name[:match.start()] + name[match.end():]).strip(), calls


def _parse_totals(totals: Optional[Line], columns: Optional[CallgrindColumns]) -> Optional[Dict[str, int]]:
    if totals is None or columns is None:
        return None
    data = split_data_line(totals.text)
    if data is None or len(data.fields) != len(columns.labels):
        logger.warning("Line %d: ignoring PROGRAM TOTALS line that does not match header", totals.number)
        return None
    return {COST_METRIC: parse_count(data.fields[columns.cost_index], totals.number, COST_METRIC)}


def parse_callgrind(lines: Iterable[Line], table: Optional[RecognitionTable] = None) -> ParsedReport:
    """Parse tokenized callgrind_annotate output into a report of instruction records."""
    table = table or DEFAULT_TABLE
    if isinstance(lines, str):
        lines = tokenize(lines)

    columns = None
    records: List[InstructionRecord] = []

    for line in lines:
        header = CallgrindColumns.detect(line, table)
        if header is not None:
            columns = header
            continue

        data = split_data_line(line.text)
        if data is None:
            logger.debug("Line %d: skipping non-data line %r", line.number, line.text)
            continue

        if columns is None:
            raise MalformedHeader(line.number, line.text, table.cost_labels)

        if len(data.fields) != len(columns.labels):
            raise ColumnMismatch(line.number, line.text, columns.labels, len(data.fields))

        name = data.name
        if not name:
            logger.debug("Line %d: skipping counts with no symbol", line.number)
            continue
        marker = TREE_MARKER.match(name)
        if marker and marker.group(1) != "*":
            logger.debug("Line %d: skipping call tree context %r", line.number, name)
            continue
        if marker:
            name = name[marker.end():]

        name, calls = _split_calls(name, line.number)
        if columns.calls_index is not None:
            label = columns.labels[columns.calls_index]
            calls = parse_count(data.fields[columns.calls_index], line.number, label)

        cost = parse_count(data.fields[columns.cost_index], line.number, columns.labels[columns.cost_index])
        records.append(InstructionRecord(name=name, cost=cost, calls=calls, index=len(records)))

    if not records:
        raise EmptyOutput("no instruction count lines")

    tool_totals = None
    if isinstance(lines, TokenStream):
        tool_totals = _parse_totals(lines.program_totals, columns)

    logger.debug("Parsed %d callgrind records", len(records))
    return ParsedReport.build(ProfilerMode.INSTRUCTION_COUNT, records, [COST_METRIC], tool_totals)
