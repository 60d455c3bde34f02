"""
Rank the most expensive functions in Valgrind callgrind and cachegrind reports.
"""

from .cachegrind import parse_cachegrind
from .callgrind import parse_callgrind
from .errors import (
    ColumnMismatch,
    EmptyOutput,
    GrindprofError,
    InvalidSelection,
    MalformedHeader,
    RecognitionTableError,
    UnknownMetric,
    UnparseableNumber,
)
from .formatter import format_report
from .metrics import RecognitionTable
from .profiler import Profiler, profile_cachegrind, profile_callgrind
from .records import (
    CacheRecord,
    InstructionRecord,
    ParsedReport,
    ProfilerMode,
    SelectionCount,
    SortSpec,
)
from .selector import select
from .tokenizer import tokenize

__version__ = "0.1.0"
