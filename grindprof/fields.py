"""
Column-level helpers shared by both report parsers.
"""

import re
from typing import List, NamedTuple, Optional

from .errors import UnparseableNumber
from .metrics import RecognitionTable, clean_label

# A count column, or a percentage annotation such as "(46.47%)" or
# "(50.0%, 50.0%)" printed beside it by newer annotate scripts
FIELD = re.compile(
    r'\s*(?:(?P<percent>\([^)]*%[^)]*\))|(?P<number>\d[\d,.]*|\.)(?=\s|\(|$))'
)

PLAIN = re.compile(r'^\d+$')
COMMA_GROUPED = re.compile(r'^\d{1,3}(?:,\d{3})+$')
DOT_GROUPED = re.compile(r'^\d{1,3}(?:\.\d{3})+$')


class DataLine(NamedTuple):
    """Raw numeric fields and symbol text split from one data line."""
    fields: List[str]
    name: str


def parse_count(text: str, line_number: Optional[int] = None, column: Optional[str] = None) -> int:
    """
    Convert a count column to an integer.

    Accepts plain digits, "," or "." thousands grouping, and a lone "." which
    cg_annotate prints for a zero count. Anything else (including decimals)
    is an error: these tools only ever print integer event counts.
    """
    if text == ".":
        return 0
    if PLAIN.match(text):
        return int(text)
    if COMMA_GROUPED.match(text):
        return int(text.replace(",", ""))
    if DOT_GROUPED.match(text):
        return int(text.replace(".", ""))
    raise UnparseableNumber(text, line_number, column)


def split_data_line(text: str) -> Optional[DataLine]:
    """Split a line into its leading count fields and the symbol name.

    Returns None when the line does not start with a count.
    """
    fields = []
    position = 0
    while True:
        match = FIELD.match(text, position)
        if not match or match.end() == position:
            break
        if match.group("number") is not None:
            fields.append(match.group("number"))
        elif not fields:
            break
        position = match.end()

    if not fields:
        return None
    return DataLine(fields, text[position:].strip())


def header_labels(text: str, table: RecognitionTable) -> Optional[List[str]]:
    """
    Return the column labels of a header line, or None if it is not one.

    A header starts with a recognised column label; the labels run up to the
    symbol column ("file:function" and similar), which is not a count column.
    """
    tokens = text.split()
    if not tokens or tokens[0][0].isdigit():
        return None

    first = tokens[0]
    if not (table.is_cost_label(first) or table.is_call_label(first)
            or table.canonical_metric(first) is not None):
        return None

    labels = []
    for token in tokens:
        if table.is_name_label(token):
            break
        labels.append(clean_label(token))
    return labels
