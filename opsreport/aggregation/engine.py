"""
Grouping/Aggregation Engine

Declarative multi-key reduce over normalized MetricRecords. One engine
replaces the per-report running-total loops:

    rollups = aggregate(
        records,
        dimension_key("route"),
        [Accumulator("weight"), Accumulator("bags"), Accumulator("distance")],
    )

Groups come back in the order their key is first seen in the input. Sorting
(for top-N views) is an explicit, separate step via sort_rollups.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

import polars as pl
import structlog

from opsreport.normalization.normalizer import UNKNOWN_LABEL, MetricRecord, coerce_label

logger = structlog.get_logger(__name__)

KEY_COLUMN = "__group_key__"
COUNT_COLUMN = "__group_count__"
COUNT = "count"

RatioValue = Union[float, str]
KeyFn = Callable[[MetricRecord], str]


class AccumulatorOp(str, Enum):
    """Reductions supported by the engine"""
    SUM = "sum"
    COUNT = "count"  # records in the group
    COUNT_NONZERO = "count_nonzero"  # records with a non-zero measure
    MAX = "max"


@dataclass(frozen=True)
class Accumulator:
    """A measure and the reduction applied to it within each group"""
    measure: str
    op: AccumulatorOp = AccumulatorOp.SUM
    name: Optional[str] = None

    @property
    def output_name(self) -> str:
        if self.name:
            return self.name
        if self.op == AccumulatorOp.SUM:
            return self.measure
        return f"{self.measure}_{self.op.value}"

    def expression(self) -> pl.Expr:
        column = pl.col(self.measure)
        if self.op == AccumulatorOp.COUNT:
            expr = column.count()
        elif self.op == AccumulatorOp.COUNT_NONZERO:
            expr = (column != 0).sum()
        elif self.op == AccumulatorOp.MAX:
            expr = column.max()
        else:
            expr = column.sum()
        return expr.alias(self.output_name)


@dataclass(frozen=True)
class GroupRollup:
    """Aggregated result for one group key"""
    key: str
    count: int
    totals: Dict[str, float] = field(default_factory=dict)
    ratios: Dict[str, RatioValue] = field(default_factory=dict)

    def value(self, name: str) -> RatioValue:
        """Look up a total, a derived ratio, or the record count"""
        if name == COUNT:
            return self.count
        if name in self.totals:
            return self.totals[name]
        if name in self.ratios:
            return self.ratios[name]
        return 0.0


def dimension_key(name: str) -> KeyFn:
    """Group by a single dimension label"""
    def key(record: MetricRecord) -> str:
        return record.label(name)
    return key


def composite_key(*names: str, separator: str = "|") -> KeyFn:
    """Group by several dimensions joined into one label, e.g. 'R1|Asha'"""
    def key(record: MetricRecord) -> str:
        return separator.join(record.label(n) for n in names)
    return key


def date_key(granularity: str = "day") -> KeyFn:
    """
    Group by the record's business date.

    Args:
        granularity: "day" (YYYY-MM-DD), "week" (YYYY-Www, ISO weeks) or
            "month" (YYYY-MM)
    """
    def key(record: MetricRecord) -> str:
        ts = record.timestamp
        if ts is None:
            return UNKNOWN_LABEL
        if granularity == "month":
            return ts.strftime("%Y-%m")
        if granularity == "week":
            year, week, _ = ts.isocalendar()
            return f"{year}-W{week:02d}"
        return ts.isoformat()
    return key


def _unique_accumulators(accumulators: Iterable[Accumulator]) -> List[Accumulator]:
    seen = set()
    unique = []
    for acc in accumulators:
        if acc.output_name in seen:
            continue
        seen.add(acc.output_name)
        unique.append(acc)
    return unique


def aggregate(
    records: Iterable[MetricRecord],
    key_fn: KeyFn,
    accumulators: Sequence[Accumulator],
) -> List[GroupRollup]:
    """
    Group records and reduce their measures.

    Keys are assigned in one pass over the input, then reduced with a polars
    group_by that keeps first-seen group order.

    Args:
        records: Normalized records
        key_fn: Maps a record to its group label
        accumulators: Measures to reduce and how

    Returns:
        One GroupRollup per distinct key, in first-seen order; [] for no records
    """
    records = list(records)
    if not records:
        return []

    accumulators = _unique_accumulators(accumulators)
    measures = sorted({acc.measure for acc in accumulators})

    data = {KEY_COLUMN: [coerce_label(key_fn(r)) for r in records]}
    for measure in measures:
        data[measure] = [float(r.measure(measure)) for r in records]

    schema = {KEY_COLUMN: pl.Utf8}
    schema.update({measure: pl.Float64 for measure in measures})
    frame = pl.DataFrame(data, schema=schema)

    grouped = frame.group_by(KEY_COLUMN, maintain_order=True).agg(
        [pl.len().alias(COUNT_COLUMN)] + [acc.expression() for acc in accumulators]
    )

    rollups = []
    for row in grouped.iter_rows(named=True):
        totals = {}
        for acc in accumulators:
            value = row[acc.output_name]
            if acc.op in (AccumulatorOp.COUNT, AccumulatorOp.COUNT_NONZERO):
                totals[acc.output_name] = int(value or 0)
            else:
                totals[acc.output_name] = float(value or 0.0)
        rollups.append(GroupRollup(key=row[KEY_COLUMN], count=int(row[COUNT_COLUMN]), totals=totals))

    logger.debug("Records aggregated", records=len(records), groups=len(rollups))
    return rollups


def sort_rollups(
    rollups: Sequence[GroupRollup],
    by: str,
    descending: bool = True,
    limit: Optional[int] = None,
) -> List[GroupRollup]:
    """
    Order rollups by a total, ratio or the count, for top-N views.

    The sort is stable; rollups whose value is undefined go last.
    """
    defined = [r for r in rollups if not isinstance(r.value(by), str)]
    undefined = [r for r in rollups if isinstance(r.value(by), str)]
    ordered = sorted(defined, key=lambda r: r.value(by), reverse=descending) + undefined
    if limit is not None:
        ordered = ordered[:limit]
    return ordered


def fill_keys(
    rollups: Sequence[GroupRollup],
    keys: Sequence[str],
    total_names: Sequence[str],
) -> List[GroupRollup]:
    """
    Lay rollups out over a fixed key universe.

    Keys absent from the input get an empty rollup. Rollups whose key is not
    in the universe are kept, after the universe, so no total is lost.
    """
    by_key = {r.key: r for r in rollups}
    filled = [
        by_key.get(k) or GroupRollup(key=k, count=0, totals={n: 0.0 for n in total_names})
        for k in keys
    ]
    filled.extend(r for r in rollups if r.key not in set(keys))
    return filled


def grand_total(rollups: Sequence[GroupRollup], name: str) -> float:
    """Sum a total across all rollups"""
    return sum(r.totals.get(name, 0.0) for r in rollups)
