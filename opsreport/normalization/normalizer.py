"""
Record Normalization Module

Coerces flat records from the query layer into MetricRecords that every
downstream stage can trust:
- Missing or blank dimension labels become the "Unknown" label
- Missing or non-numeric measures become 0
- Subtractive measures (odometer spans) are clamped at 0
- Business dates are parsed from dates, datetimes or ISO strings

Normalization never raises. Upstream data is hand-entered and frequently
edited, so a malformed row degrades into Unknown groups and zero measures.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import structlog

from opsreport.classification.classifiers import to_date

logger = structlog.get_logger(__name__)

UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class Span:
    """A measure computed as end - start, never below zero"""
    start: str
    end: str


MeasureSource = Union[str, Span]


@dataclass(frozen=True)
class MetricRecord:
    """The unit of aggregation: a business date, labels and measures"""
    timestamp: Optional[date]
    dimensions: Dict[str, str] = field(default_factory=dict)
    measures: Dict[str, float] = field(default_factory=dict)

    def label(self, dimension: str) -> str:
        return self.dimensions.get(dimension, UNKNOWN_LABEL)

    def measure(self, name: str) -> float:
        return self.measures.get(name, 0.0)


def coerce_label(value: Any) -> str:
    """Turn a raw dimension value into a non-empty label"""
    if value is None:
        return UNKNOWN_LABEL
    text = str(value).strip()
    return text or UNKNOWN_LABEL


def coerce_number(value: Any) -> float:
    """
    Turn a raw numeric field into a finite float.

    Booleans, None, unparseable strings, NaN, infinities and integers too
    large for a float are 0. Currency symbols and thousands separators in
    strings are ignored.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (InvalidOperation, OverflowError, ValueError):
            return 0.0
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        for symbol in ("₹", "$", "€", "£"):
            text = text.replace(symbol, "")
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def _read_measure(raw: Mapping[str, Any], source: MeasureSource) -> float:
    if isinstance(source, Span):
        return max(0.0, coerce_number(raw.get(source.end)) - coerce_number(raw.get(source.start)))
    return max(0.0, coerce_number(raw.get(source)))


def normalize(
    raw: Mapping[str, Any],
    dimension_spec: Mapping[str, str],
    measure_spec: Mapping[str, MeasureSource],
    date_field: Optional[str] = None,
) -> MetricRecord:
    """
    Normalize one raw record.

    Args:
        raw: Flat record as returned by the query layer
        dimension_spec: Dimension name -> source field
        measure_spec: Measure name -> source field or Span
        date_field: Source field holding the business date

    Returns:
        A well-formed MetricRecord
    """
    if raw is None:
        raw = {}

    dimensions = {name: coerce_label(raw.get(source)) for name, source in dimension_spec.items()}
    measures = {name: _read_measure(raw, source) for name, source in measure_spec.items()}
    timestamp = to_date(raw.get(date_field)) if date_field else None

    return MetricRecord(timestamp=timestamp, dimensions=dimensions, measures=measures)


def normalize_many(
    rows: Iterable[Mapping[str, Any]],
    dimension_spec: Mapping[str, str],
    measure_spec: Mapping[str, MeasureSource],
    date_field: Optional[str] = None,
) -> List[MetricRecord]:
    """Normalize a batch of raw records, preserving their order"""
    records = [normalize(row, dimension_spec, measure_spec, date_field) for row in rows]

    unknown = sum(1 for r in records if UNKNOWN_LABEL in r.dimensions.values())
    logger.debug(
        "Records normalized",
        records=len(records),
        with_unknown_labels=unknown,
    )
    return records
