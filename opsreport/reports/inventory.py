"""
Stock Report

Health of raw materials and finished goods against their minimum levels,
plus inventory value.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Sequence

import structlog

from opsreport.aggregation import (
    Accumulator,
    GroupRollup,
    aggregate,
    derive_shares,
    dimension_key,
    fill_keys,
    grand_total,
)
from opsreport.classification import StockItem, StockStatus
from opsreport.classification.classifiers import DEFAULT_STOCK_WARNING_MULTIPLIER
from opsreport.export import to_delimited_text
from opsreport.normalization import MetricRecord, coerce_label, coerce_number

logger = structlog.get_logger(__name__)

STATUS_ORDER = [s.value for s in StockStatus]
UNHEALTHY = (StockStatus.OUT_OF_STOCK, StockStatus.CRITICAL)
TOP_VALUE_ITEMS = 8

STOCK_HEADERS = ["Code", "Name", "Category", "Current", "Minimum", "Rate", "Value", "Status"]


@dataclass
class StockReport:
    total_value: float
    health_score: int  # percent of items neither out of stock nor critical
    items: List[StockItem] = field(default_factory=list)
    status_counts: List[GroupRollup] = field(default_factory=list)
    value_by_category: List[GroupRollup] = field(default_factory=list)
    critical_items: List[StockItem] = field(default_factory=list)
    top_by_value: List[StockItem] = field(default_factory=list)


def build_stock_items(
    rows: Sequence[Mapping[str, Any]],
    warning_multiplier: float = DEFAULT_STOCK_WARNING_MULTIPLIER,
) -> List[StockItem]:
    return [
        StockItem(
            code=coerce_label(row.get("code")),
            name=coerce_label(row.get("name")),
            category=coerce_label(row.get("category")),
            current_quantity=max(0.0, coerce_number(row.get("current_quantity"))),
            minimum_quantity=max(0.0, coerce_number(row.get("minimum_quantity"))),
            rate=max(0.0, coerce_number(row.get("rate"))),
            warning_multiplier=warning_multiplier,
        )
        for row in rows
    ]


def health_score(items: Sequence[StockItem]) -> int:
    """Share of healthy items as a whole percentage; 100 with no items"""
    if not items:
        return 100
    healthy = sum(1 for item in items if item.status not in UNHEALTHY)
    return round(healthy / len(items) * 100)


def build_stock_report(
    rows: Sequence[Mapping[str, Any]],
    warning_multiplier: float = DEFAULT_STOCK_WARNING_MULTIPLIER,
) -> StockReport:
    items = build_stock_items(rows, warning_multiplier)
    records = [
        MetricRecord(
            timestamp=None,
            dimensions={"status": item.status.value, "category": item.category},
            measures={"value": item.value},
        )
        for item in items
    ]

    status_counts = fill_keys(
        aggregate(records, dimension_key("status"), [Accumulator("value")]),
        STATUS_ORDER,
        ["value"],
    )
    value_by_category = derive_shares(
        aggregate(records, dimension_key("category"), [Accumulator("value")]),
        "value",
    )

    report = StockReport(
        total_value=grand_total(value_by_category, "value"),
        health_score=health_score(items),
        items=items,
        status_counts=status_counts,
        value_by_category=value_by_category,
        critical_items=sorted(
            (item for item in items if item.status in UNHEALTHY),
            key=lambda item: item.gap,
            reverse=True,
        ),
        top_by_value=sorted(items, key=lambda item: item.value, reverse=True)[:TOP_VALUE_ITEMS],
    )
    logger.info(
        "Stock report built",
        items=len(items),
        critical=len(report.critical_items),
        health_score=report.health_score,
    )
    return report


def export_stock(report: StockReport, delimiter: str = ",") -> str:
    lines = [
        [
            item.code, item.name, item.category,
            item.current_quantity, item.minimum_quantity, item.rate,
            item.value, item.status,
        ]
        for item in report.items
    ]
    return to_delimited_text(STOCK_HEADERS, lines, delimiter)
