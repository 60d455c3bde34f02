"""
Record model for parsed Valgrind reports.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .errors import InvalidSelection


class ProfilerMode(Enum):
    """Which Valgrind tool produced the report."""
    INSTRUCTION_COUNT = "callgrind"
    CACHE_BEHAVIOR = "cachegrind"


@dataclass(frozen=True)
class InstructionRecord:
    """One function entry from callgrind_annotate output."""
    name: str
    cost: int
    calls: Optional[int] = None
    index: int = 0

    def value(self, metric: str) -> int:
        """Instruction records carry a single metric."""
        return self.cost


@dataclass(frozen=True)
class CacheRecord:
    """One function entry from cg_annotate output."""
    name: str
    metrics: Dict[str, int]
    index: int = 0

    def value(self, metric: str) -> int:
        return self.metrics.get(metric, 0)


Record = Union[InstructionRecord, CacheRecord]


@dataclass(frozen=True)
class ParsedReport:
    """
    Records parsed from one report, with totals over the whole set.

    `record_count` and `totals` always describe the full parse, so a report
    produced by selection still carries the pre-truncation numbers.
    """
    mode: ProfilerMode
    records: Tuple[Record, ...]
    metric_keys: Tuple[str, ...]
    totals: Dict[str, int]
    record_count: int
    tool_totals: Optional[Dict[str, int]] = None

    @classmethod
    def build(cls, mode: ProfilerMode, records: List[Record], metric_keys: List[str],
              tool_totals: Optional[Dict[str, int]] = None) -> "ParsedReport":
        """Construct a report, computing per-metric totals."""
        totals = {key: sum(record.value(key) for record in records) for key in metric_keys}
        return cls(
            mode=mode,
            records=tuple(records),
            metric_keys=tuple(metric_keys),
            totals=totals,
            record_count=len(records),
            tool_totals=tool_totals,
        )

    @property
    def primary_metric(self) -> str:
        return self.metric_keys[0]


@dataclass(frozen=True)
class SortSpec:
    """Either the mode's default ordering or a named metric."""
    metric_name: Optional[str] = None

    @classmethod
    def default(cls) -> "SortSpec":
        return cls(None)

    @classmethod
    def metric(cls, name: str) -> "SortSpec":
        return cls(name)

    @classmethod
    def parse(cls, value: Union[str, "SortSpec", None]) -> "SortSpec":
        """Parse the --sort flag; 'none' and 'default' mean default order."""
        if isinstance(value, SortSpec):
            return value
        if value is None or value.strip().lower() in ("", "none", "default"):
            return cls.default()
        return cls.metric(value.strip())

    @property
    def is_default(self) -> bool:
        return self.metric_name is None


@dataclass(frozen=True)
class SelectionCount:
    """Either every record or the first N after sorting."""
    limit: Optional[int] = None

    def __post_init__(self):
        if self.limit is not None and self.limit < 1:
            raise InvalidSelection(self.limit)

    @classmethod
    def all(cls) -> "SelectionCount":
        return cls(None)

    @classmethod
    def top(cls, limit: int) -> "SelectionCount":
        return cls(limit)

    @classmethod
    def parse(cls, value: Union[str, int, "SelectionCount", None]) -> "SelectionCount":
        """Parse the -n flag: 'all' or a positive integer."""
        if isinstance(value, SelectionCount):
            return value
        if value is None:
            return cls.all()
        if isinstance(value, int):
            return cls(value)
        text = value.strip().lower()
        if text == "all":
            return cls.all()
        if not text.isdecimal():
            raise InvalidSelection(value)
        return cls(int(text))

    @property
    def is_all(self) -> bool:
        return self.limit is None

    def apply(self, records: List[Record]) -> List[Record]:
        if self.limit is None:
            return list(records)
        return list(records[:self.limit])

