"""
Errors raised while parsing and ranking profiler reports.
"""

from typing import Iterable, Optional


class GrindprofError(Exception):
    """Base error for report parsing and selection failures."""


class EmptyOutput(GrindprofError):
    """No function data lines were found in the report."""

    def __init__(self, detail: str = ""):
        message = "no function data lines found in profiler output"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class MalformedHeader(GrindprofError):
    """Header line is missing or names a column we do not recognize."""

    def __init__(self, line_number: int, line: str, expected: Iterable[str], reason: str = ""):
        self.line_number = line_number
        self.line = line
        self.expected = list(expected)
        reason = reason or "data line found before a header line"
        super().__init__(
            f"line {line_number}: {reason}; expected a header naming one of "
            f"{', '.join(self.expected)}: {line!r}"
        )


class ColumnMismatch(GrindprofError):
    """A data line has a different number of numeric columns than its header."""

    def __init__(self, line_number: int, line: str, expected: Iterable[str], found: int):
        self.line_number = line_number
        self.line = line
        self.expected = list(expected)
        self.found = found
        super().__init__(
            f"line {line_number}: expected {len(self.expected)} numeric column(s) "
            f"({' '.join(self.expected)}), found {found}: {line!r}"
        )


class UnknownMetric(GrindprofError):
    """A sort was requested on a metric absent from this report."""

    def __init__(self, metric: str, available: Iterable[str]):
        self.metric = metric
        self.available = list(available)
        super().__init__(
            f"unknown sort metric {metric!r}; available: {', '.join(self.available) or 'none'}"
        )


class UnparseableNumber(GrindprofError):
    """A value in a numeric column could not be converted to an integer."""

    def __init__(self, text: str, line_number: Optional[int] = None, column: Optional[str] = None):
        self.text = text
        self.line_number = line_number
        self.column = column
        where = ""
        if line_number is not None:
            where += f"line {line_number}: "
        if column:
            where += f"column {column}: "
        super().__init__(f"{where}cannot parse {text!r} as an integer")


class InvalidSelection(GrindprofError):
    """The requested function count is not 'all' or a positive integer."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"invalid function count {value!r}; use 'all' or a positive integer")


class RecognitionTableError(GrindprofError):
    """A header label table could not be loaded."""
