"""
Split raw callgrind_annotate / cg_annotate output into logical lines.

Banner, separator and preamble lines are dropped, PROGRAM TOTALS lines are
set aside on the stream, and source annotation sections end the stream.
"""

import logging
import re
from typing import Iterator, List, NamedTuple, Optional

logger = logging.getLogger(__name__)

ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;]*m')

# Rows of dashes, equals signs or asterisks between report sections
SEPARATOR = re.compile(r'^[-=*]{3,}$')

# ==1234== Cachegrind, a cache and branch-prediction profiler
# --1234-- warning: ...
VALGRIND_BANNER = re.compile(r'^(==|--)\d+(==|--)')

PREAMBLE = re.compile(
    r'^(Profile data file|Data file|Command|Cmd|Creator|Desc|Events recorded|'
    r'Events shown|Event sort order|Thresholds|Threshold|Include dirs|User annotated|'
    r'Auto-annotation|Annotation|Invocation|Trigger|Part|Timerange|Positions|'
    r'I1 cache|D1 cache|LL cache|L2 cache)\b'
)

PROGRAM_TOTALS = re.compile(r'\bPROGRAM TOTALS\s*$')

# "-- Auto-annotated source: foo.c", "-- Annotated source file: ..." and
# friends; the function table is always printed before these
ANNOTATED_SOURCE = re.compile(r'^--\s*(Auto-annotated|User-annotated|Annotated)\s+source', re.IGNORECASE)

# "-- Function:file summary" repeats every function under its files
FUNCTION_FILE_SECTION = re.compile(r'^--\s*Function:file summary', re.IGNORECASE)

SECTION_TITLE = re.compile(r'^--\s+\S')


class Line(NamedTuple):
    """A trimmed line with its 1-based position in the raw output."""
    number: int
    text: str


class TokenStream:
    """
    Single-pass iterator over the meaningful lines of a report.

    `totals` fills in with PROGRAM TOTALS lines as the stream is consumed.
    """

    def __init__(self, raw: str):
        self._raw = raw
        self._consumed = False
        self.totals: List[Line] = []
        self.skipped = 0

    def __iter__(self) -> Iterator[Line]:
        if self._consumed:
            raise RuntimeError("token stream has already been consumed")
        self._consumed = True
        return self._lines()

    def _lines(self) -> Iterator[Line]:
        in_function_file_section = False

        for number, raw_line in enumerate(self._raw.splitlines(), start=1):
            text = ANSI_ESCAPE.sub('', raw_line).strip()
            if not text:
                continue

            if ANNOTATED_SOURCE.match(text):
                logger.debug("Line %d: source annotation starts, stopping", number)
                return

            if SECTION_TITLE.match(text) and not SEPARATOR.match(text):
                in_function_file_section = bool(FUNCTION_FILE_SECTION.match(text))
                self.skipped += 1
                continue

            if in_function_file_section or self._is_noise(text):
                self.skipped += 1
                continue

            if PROGRAM_TOTALS.search(text):
                self.totals.append(Line(number, text))
                continue

            yield Line(number, text)

    @staticmethod
    def _is_noise(text: str) -> bool:
        return bool(
            SEPARATOR.match(text)
            or VALGRIND_BANNER.match(text)
            or PREAMBLE.match(text)
        )

    @property
    def program_totals(self) -> Optional[Line]:
        """The last PROGRAM TOTALS line seen, if any."""
        return self.totals[-1] if self.totals else None


def tokenize(raw: str) -> TokenStream:
    """Wrap raw profiler output in a lazy line stream."""
    return TokenStream(raw)
