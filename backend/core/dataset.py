"""
Dataset Model

Immutable in-memory dataset handed to the profiling engine.

Raw ingested values are normalised once into tagged cells
(missing, number or text) so downstream code never re-derives
"is this missing" or "is this a number".
"""

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence


_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INFINITY_RE = re.compile(r"^([+-]?)Infinity$")
_RADIX_RE = re.compile(r"^0(?:([xX])[0-9a-fA-F]+|([oO])[0-7]+|([bB])[01]+)$")

# Formats tried after ISO-8601
DATE_FORMATS = [
    "%m/%d/%Y",         # 01/15/2024
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d",         # 2024/01/15
    "%m-%d-%Y",         # 01-15-2024
    "%B %d, %Y",        # January 15, 2024
    "%b %d, %Y",        # Jan 15, 2024
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",         # 15 January 2024
    "%d %b %Y",         # 15 Jan 2024
    "%a %b %d %Y",      # Mon Jan 15 2024
    "%a, %d %b %Y %H:%M:%S GMT",
]


def _int_to_float(value: int) -> float:
    """Integers beyond the float range saturate to +/-Infinity."""
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a raw value the way a standard numeric conversion would.

    Accepts decimal and exponent notation, surrounding whitespace,
    hex/octal/binary literals and +/-Infinity. A whitespace-only
    string converts to 0. Returns None when the result would be NaN.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return _int_to_float(value)
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return 0.0 if value else None

    if _DECIMAL_RE.match(text):
        return float(text)

    match = _INFINITY_RE.match(text)
    if match:
        return -math.inf if match.group(1) == "-" else math.inf

    match = _RADIX_RE.match(text)
    if match:
        base = 16 if match.group(1) else 8 if match.group(2) else 2
        return _int_to_float(int(text[2:], base))

    return None


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a calendar date/time string, or return None."""
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(iso_text)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return None


def format_number(value: float) -> str:
    """Render a number without a trailing '.0' for integral values."""
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


class CellKind(str, Enum):
    """Normalised cell categories."""

    MISSING = "missing"
    NUMBER = "number"
    TEXT = "text"


@dataclass(frozen=True)
class Cell:
    """One row's value for one column."""

    kind: CellKind
    raw: Any = None
    number: Optional[float] = None

    @property
    def is_missing(self) -> bool:
        return self.kind is CellKind.MISSING

    @property
    def is_number(self) -> bool:
        return self.kind is CellKind.NUMBER

    @property
    def is_finite_number(self) -> bool:
        return self.kind is CellKind.NUMBER and math.isfinite(self.number)

    @property
    def text(self) -> str:
        """String form used as the frequency-table key."""
        if isinstance(self.raw, str):
            return self.raw
        if self.number is not None:
            return format_number(self.number)
        return "" if self.raw is None else str(self.raw)


MISSING = Cell(CellKind.MISSING)


def normalize_cell(value: Any) -> Cell:
    """Turn a raw ingested value into a tagged cell."""
    if value is None or value == "":
        return MISSING

    if isinstance(value, bool):
        return Cell(CellKind.TEXT, raw="true" if value else "false")

    if isinstance(value, float) and math.isnan(value):
        return Cell(CellKind.TEXT, raw="NaN")

    number = parse_number(value)
    if number is not None:
        return Cell(CellKind.NUMBER, raw=value, number=number)

    return Cell(CellKind.TEXT, raw=value if isinstance(value, str) else str(value))


@dataclass(frozen=True)
class Dataset:
    """
    Ordered headers plus rows of normalised cells.

    Headers are assumed unique; keys in a record that are not
    listed in the headers are ignored.
    """

    headers: tuple[str, ...]
    rows: tuple[Mapping[str, Cell], ...] = field(default_factory=tuple)

    @classmethod
    def from_records(
        cls,
        headers: Sequence[str],
        records: Iterable[Mapping[str, Any]],
    ) -> "Dataset":
        """Build a dataset from raw records (the single normalisation step)."""
        header_tuple = tuple(headers)
        rows = tuple(
            {header: normalize_cell(record.get(header)) for header in header_tuple}
            for record in records
        )
        return cls(headers=header_tuple, rows=rows)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def column(self, header: str) -> list[Cell]:
        """Cells of one column in row order."""
        if header not in self.headers:
            raise KeyError(header)
        return [row.get(header, MISSING) for row in self.rows]

    def column_pairs(self, x_header: str, y_header: str) -> list[tuple[Cell, Cell]]:
        """Row-aligned cells of two columns."""
        return list(zip(self.column(x_header), self.column(y_header)))

    def raw_rows(self, start: int = 0, stop: Optional[int] = None) -> list[dict[str, Any]]:
        """Raw values of a slice of rows, missing cells as None."""
        return [
            {header: row[header].raw for header in self.headers}
            for row in self.rows[start:stop]
        ]
