"""
Entry points tying tokenizer, parser, selector and formatter together.
"""

import logging
from typing import Optional

from .cachegrind import parse_cachegrind
from .callgrind import parse_callgrind
from .formatter import format_report
from .metrics import RecognitionTable
from .records import ParsedReport, ProfilerMode
from .selector import select
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

PARSERS = {
    ProfilerMode.INSTRUCTION_COUNT: parse_callgrind,
    ProfilerMode.CACHE_BEHAVIOR: parse_cachegrind,
}


class Profiler:
    """Parses and ranks the report of one Valgrind tool."""

    def __init__(self, mode: ProfilerMode, table: Optional[RecognitionTable] = None,
                 merge_duplicates: bool = True):
        self.mode = ProfilerMode(mode)
        self.table = table
        self.merge_duplicates = merge_duplicates

    @classmethod
    def callgrind(cls, **kwargs) -> "Profiler":
        return cls(ProfilerMode.INSTRUCTION_COUNT, **kwargs)

    @classmethod
    def cachegrind(cls, **kwargs) -> "Profiler":
        return cls(ProfilerMode.CACHE_BEHAVIOR, **kwargs)

    def parse(self, raw: str) -> ParsedReport:
        """Parse raw annotate output into the full record set."""
        return PARSERS[self.mode](tokenize(raw), self.table)

    def select(self, raw: str, count="all", sort="default") -> ParsedReport:
        """Parse and rank, returning the selected records with full totals."""
        report = self.parse(raw)
        return select(report, sort=sort, count=count, merge=self.merge_duplicates, table=self.table)

    def report(self, raw: str, count="all", sort="default") -> str:
        """Parse, rank and render raw annotate output."""
        selected = self.select(raw, count=count, sort=sort)
        logger.info("Selected %d of %d %s functions",
                    len(selected.records), selected.record_count, self.mode.value)
        return format_report(selected)


def profile_callgrind(raw: str, count="all", sort="default", table: Optional[RecognitionTable] = None,
                      merge_duplicates: bool = True) -> str:
    """Report the most expensive functions in callgrind_annotate output."""
    return Profiler.callgrind(table=table, merge_duplicates=merge_duplicates).report(raw, count, sort)


def profile_cachegrind(raw: str, count="all", sort="default", table: Optional[RecognitionTable] = None,
                       merge_duplicates: bool = True) -> str:
    """Report the most expensive functions in cg_annotate output."""
    return Profiler.cachegrind(table=table, merge_duplicates=merge_duplicates).report(raw, count, sort)
