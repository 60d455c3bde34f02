"""
Parse cg_annotate output into per-function cache and branch records.

Older releases print bare counts:

    Ir         I1mr ILmr Dr        D1mr  DLmr Dw        D1mw  DLmw  file:function
    1,000,000  100  50   300,000   2,000 10   200,000   1,000 5     ???:main

3.21 and later pad labels with underscores, print a percentage beside every
count and use "." for an empty cell. The columns present depend on the
options cachegrind ran with (--cache-sim, --branch-sim), so the metric set is
taken from each run's header rather than assumed.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .errors import ColumnMismatch, EmptyOutput, MalformedHeader
from .fields import header_labels, parse_count, split_data_line
from .metrics import CACHE_METRICS, DEFAULT_TABLE, RecognitionTable
from .records import CacheRecord, ParsedReport, ProfilerMode
from .tokenizer import Line, TokenStream, tokenize

logger = logging.getLogger(__name__)


def detect_metric_columns(line: Line, table: RecognitionTable) -> Optional[List[str]]:
    """Map a header line to canonical metric keys in column order.

    Returns None when the line is not a header at all.
    """
    labels = header_labels(line.text, table)
    if labels is None:
        return None

    keys = []
    for label in labels:
        key = table.canonical_metric(label)
        if key is None:
            raise MalformedHeader(
                line.number, line.text, table.known_metrics,
                reason=f"unrecognized column {label!r}",
            )
        if key in keys:
            raise MalformedHeader(
                line.number, line.text, table.known_metrics,
                reason=f"column {label!r} appears twice",
            )
        keys.append(key)

    logger.debug("Line %d: header columns %s", line.number, keys)
    return keys


def _parse_values(line: Line, fields: List[str], keys: List[str]) -> Dict[str, int]:
    return {key: parse_count(text, line.number, key) for key, text in zip(keys, fields)}


def parse_cachegrind(lines: Iterable[Line], table: Optional[RecognitionTable] = None) -> ParsedReport:
    """Parse tokenized cg_annotate output into a report of cache records."""
    table = table or DEFAULT_TABLE
    if isinstance(lines, str):
        lines = tokenize(lines)

    keys: Optional[List[str]] = None
    records: List[CacheRecord] = []

    for line in lines:
        header = detect_metric_columns(line, table)
        if header is not None:
            keys = header
            continue

        data = split_data_line(line.text)
        if data is None:
            logger.debug("Line %d: skipping non-data line %r", line.number, line.text)
            continue

        if keys is None:
            raise MalformedHeader(line.number, line.text, CACHE_METRICS)

        if len(data.fields) != len(keys):
            raise ColumnMismatch(line.number, line.text, keys, len(data.fields))

        if not data.name:
            logger.debug("Line %d: skipping counts with no symbol", line.number)
            continue

        records.append(CacheRecord(
            name=data.name,
            metrics=_parse_values(line, data.fields, keys),
            index=len(records),
        ))

    if not records:
        raise EmptyOutput("no cache event lines")

    tool_totals = None
    if isinstance(lines, TokenStream) and lines.program_totals is not None and keys is not None:
        totals = lines.program_totals
        data = split_data_line(totals.text)
        if data is not None and len(data.fields) == len(keys):
            tool_totals = _parse_values(totals, data.fields, keys)
        else:
            logger.warning("Line %d: ignoring PROGRAM TOTALS line that does not match header", totals.number)

    logger.debug("Parsed %d cachegrind records over %d metrics", len(records), len(keys))
    return ParsedReport.build(ProfilerMode.CACHE_BEHAVIOR, records, keys, tool_totals)
