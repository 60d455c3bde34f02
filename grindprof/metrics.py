"""
Header label recognition for callgrind_annotate and cg_annotate reports.

Valgrind has renamed columns between releases (I2mr became ILmr when the
simulated last-level cache stopped being called L2, 3.21 pads labels with
underscores), so the labels accepted for each metric live in a table that
can be replaced from a JSON file.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .errors import RecognitionTableError

logger = logging.getLogger(__name__)

# Canonical cache/branch metric keys, in the order cg_annotate prints them
CACHE_METRICS = [
    "Ir", "I1mr", "ILmr",
    "Dr", "D1mr", "DLmr",
    "Dw", "D1mw", "DLmw",
    "Bc", "Bcm", "Bi", "Bim",
]

METRIC_DESCRIPTIONS = {
    "Ir": "instructions executed",
    "I1mr": "L1 instruction read misses",
    "ILmr": "LL instruction read misses",
    "Dr": "data reads",
    "D1mr": "L1 data read misses",
    "DLmr": "LL data read misses",
    "Dw": "data writes",
    "D1mw": "L1 data write misses",
    "DLmw": "LL data write misses",
    "Bc": "conditional branches",
    "Bcm": "conditional branch mispredicts",
    "Bi": "indirect branches",
    "Bim": "indirect branch mispredicts",
}

COST_METRIC = "Ir"

DEFAULT_METRIC_LABELS = {
    "Ir": ["Ir"],
    "I1mr": ["I1mr"],
    "ILmr": ["ILmr", "I2mr"],
    "Dr": ["Dr"],
    "D1mr": ["D1mr"],
    "DLmr": ["DLmr", "D2mr"],
    "Dw": ["Dw"],
    "D1mw": ["D1mw"],
    "DLmw": ["DLmw", "D2mw"],
    "Bc": ["Bc"],
    "Bcm": ["Bcm"],
    "Bi": ["Bi"],
    "Bim": ["Bim"],
}
DEFAULT_COST_LABELS = ["Ir", "Instructions"]
DEFAULT_CALL_LABELS = ["calls", "Calls"]
# The column that holds the symbol, printed last on the header line
DEFAULT_NAME_LABELS = ["file:function", "function:file", "function", "file"]


def clean_label(token: str) -> str:
    """Strip the underscore padding cg_annotate 3.21+ adds to column labels."""
    return token.strip().rstrip("_")


def _fold(labels: List[str]) -> Dict[str, str]:
    return {label.lower(): label for label in labels}


def _labels(value) -> List[str]:
    if isinstance(value, str):
        return [value]
    return [str(label) for label in value]


@dataclass
class RecognitionTable:
    """Header labels accepted for each column, matched case-insensitively."""
    cost_labels: List[str] = field(default_factory=lambda: list(DEFAULT_COST_LABELS))
    call_labels: List[str] = field(default_factory=lambda: list(DEFAULT_CALL_LABELS))
    metric_labels: Dict[str, List[str]] = field(
        default_factory=lambda: {key: list(labels) for key, labels in DEFAULT_METRIC_LABELS.items()}
    )
    name_labels: List[str] = field(default_factory=lambda: list(DEFAULT_NAME_LABELS))

    def __post_init__(self):
        self._metrics: Dict[str, str] = {}
        for key, labels in self.metric_labels.items():
            for label in list(labels) + [key]:
                self._metrics[label.lower()] = key
        self._cost = _fold(self.cost_labels)
        self._calls = _fold(self.call_labels)
        self._names = _fold(self.name_labels)

    def canonical_metric(self, label: str) -> Optional[str]:
        """Map a header label or sort name to its canonical metric key."""
        return self._metrics.get(clean_label(label).lower())

    def is_cost_label(self, label: str) -> bool:
        return clean_label(label).lower() in self._cost

    def is_call_label(self, label: str) -> bool:
        return clean_label(label).lower() in self._calls

    def is_name_label(self, label: str) -> bool:
        return clean_label(label).lower() in self._names

    @property
    def known_metrics(self) -> List[str]:
        return list(self.metric_labels)

    @classmethod
    def from_dict(cls, data: dict) -> "RecognitionTable":
        """
        Build a table from a mapping such as

            {"cost": ["Ir"], "calls": ["calls"],
             "metrics": {"ILmr": ["ILmr", "I2mr"]},
             "names": ["file:function"]}

        Missing sections keep their defaults; metric entries are merged over
        the default metric labels.
        """
        if not isinstance(data, dict):
            raise RecognitionTableError("label table must be a JSON object")

        table = cls()
        try:
            cost = _labels(data.get("cost", table.cost_labels))
            calls = _labels(data.get("calls", table.call_labels))
            names = _labels(data.get("names", table.name_labels))
            metrics = dict(table.metric_labels)
            for key, labels in data.get("metrics", {}).items():
                metrics[str(key)] = _labels(labels)
        except (AttributeError, TypeError) as exception:
            raise RecognitionTableError(f"invalid label table: {exception}") from exception

        if not cost:
            raise RecognitionTableError("label table must name at least one cost label")

        return cls(cost_labels=cost, call_labels=calls, metric_labels=metrics, name_labels=names)

    @classmethod
    def from_json(cls, path: Path) -> "RecognitionTable":
        """Load a table from a JSON file."""
        try:
            with open(path) as file:
                data = json.load(file)
        except OSError as exception:
            raise RecognitionTableError(f"cannot read label table {path}: {exception}") from exception
        except json.JSONDecodeError as exception:
            raise RecognitionTableError(f"invalid JSON in label table {path}: {exception}") from exception

        logger.debug("Loaded header label table from %s", path)
        return cls.from_dict(data)


DEFAULT_TABLE = RecognitionTable()
