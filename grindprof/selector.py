"""
Merge, rank and truncate parsed records.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional

from .errors import UnknownMetric
from .metrics import DEFAULT_TABLE, RecognitionTable
from .records import (
    InstructionRecord,
    ParsedReport,
    ProfilerMode,
    Record,
    SelectionCount,
    SortSpec,
)

logger = logging.getLogger(__name__)


def merge_duplicates(records: List[Record]) -> List[Record]:
    """
    Accumulate records that name the same function into the first occurrence.

    Inlined and library symbols can be reported more than once; their costs
    are summed and call counts added where known. Emission order of the first
    occurrence is kept.
    """
    merged: Dict[str, Record] = {}
    for record in records:
        existing = merged.get(record.name)
        if existing is None:
            merged[record.name] = record
            continue

        if isinstance(record, InstructionRecord):
            if existing.calls is None and record.calls is None:
                calls = None
            else:
                calls = (existing.calls or 0) + (record.calls or 0)
            merged[record.name] = replace(existing, cost=existing.cost + record.cost, calls=calls)
        else:
            metrics = dict(existing.metrics)
            for key, value in record.metrics.items():
                metrics[key] = metrics.get(key, 0) + value
            merged[record.name] = replace(existing, metrics=metrics)

    if len(merged) != len(records):
        logger.debug("Merged %d duplicate entries", len(records) - len(merged))
    return list(merged.values())


def resolve_sort_metric(report: ParsedReport, sort: SortSpec,
                        table: Optional[RecognitionTable] = None) -> Optional[str]:
    """Return the metric key to sort on, or None for the mode's default order."""
    table = table or DEFAULT_TABLE
    if sort.is_default:
        if report.mode is ProfilerMode.INSTRUCTION_COUNT:
            return report.primary_metric
        return None

    name = sort.metric_name
    if report.mode is ProfilerMode.INSTRUCTION_COUNT:
        if table.is_cost_label(name):
            return report.primary_metric
        raise UnknownMetric(name, report.metric_keys)

    key = table.canonical_metric(name)
    if key is None or key not in report.metric_keys:
        raise UnknownMetric(name, report.metric_keys)
    return key


def select(report: ParsedReport, sort=None, count=None, merge: bool = True,
           table: Optional[RecognitionTable] = None) -> ParsedReport:
    """
    Rank and truncate a report's records.

    Sorting is descending on the chosen metric and stable, so ties keep
    emission order. The returned report keeps the totals and record count
    of the full input.
    """
    sort = SortSpec.parse(sort)
    count = SelectionCount.parse(count)
    metric = resolve_sort_metric(report, sort, table)

    records = list(report.records)
    if merge:
        records = merge_duplicates(records)

    if metric is not None:
        records = sorted(records, key=lambda record: record.value(metric), reverse=True)
        # sorted(reverse=True) keeps ties in their original order
        logger.debug("Sorted %d records by %s", len(records), metric)

    selected = count.apply(records)
    return replace(report, records=tuple(selected), record_count=len(records))
