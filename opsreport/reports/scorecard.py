"""
Business Scorecard

Cross-functional KPIs for a period: sales, collections, production and
purchases, with a zero-filled daily sales/collection trend.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Sequence

from opsreport.aggregation import (
    Accumulator,
    GroupRollup,
    aggregate,
    date_key,
    fill_keys,
    safe_ratio,
)
from opsreport.aggregation.engine import RatioValue
from opsreport.export import rollup_table, to_delimited_text
from opsreport.normalization import normalize_many
from .params import ReportParams

TREND_COLUMNS = [("Sales", "sales"), ("Collections", "collections")]


@dataclass
class Scorecard:
    total_sales: float
    total_collections: float
    total_production: float
    total_purchases: float
    invoice_count: int
    batch_count: int
    completed_batches: int
    outstanding: float
    gross_profit: float
    collection_rate: RatioValue  # percent of sales collected
    gross_margin: RatioValue  # percent of sales
    production_completion: RatioValue  # percent of batches completed
    trend: List[GroupRollup] = field(default_factory=list)


def build_scorecard(
    params: ReportParams,
    invoice_rows: Sequence[Mapping[str, Any]],
    payment_rows: Sequence[Mapping[str, Any]],
    production_rows: Sequence[Mapping[str, Any]],
    purchase_rows: Sequence[Mapping[str, Any]],
) -> Scorecard:
    sales = normalize_many(invoice_rows, {}, {"sales": "total_amount"}, date_field="date")
    collections = normalize_many(payment_rows, {}, {"collections": "amount"}, date_field="date")
    production = normalize_many(
        production_rows, {"status": "status"}, {"quantity": "quantity_produced"}, date_field="date"
    )
    purchases = normalize_many(purchase_rows, {}, {"amount": "total_amount"}, date_field="date")

    total_sales = sum(r.measure("sales") for r in sales)
    total_collections = sum(r.measure("collections") for r in collections)
    total_purchases = sum(r.measure("amount") for r in purchases)
    completed = sum(1 for r in production if r.label("status").lower() == "completed")

    trend = aggregate(
        sales + collections,
        date_key("day"),
        [Accumulator("sales"), Accumulator("collections")],
    )
    trend = fill_keys(trend, [d.isoformat() for d in params.days()], ["sales", "collections"])

    return Scorecard(
        total_sales=total_sales,
        total_collections=total_collections,
        total_production=sum(r.measure("quantity") for r in production),
        total_purchases=total_purchases,
        invoice_count=len(sales),
        batch_count=len(production),
        completed_batches=completed,
        outstanding=total_sales - total_collections,
        gross_profit=total_sales - total_purchases,
        collection_rate=safe_ratio(total_collections, total_sales, scale=100),
        gross_margin=safe_ratio(total_sales - total_purchases, total_sales, scale=100),
        production_completion=safe_ratio(completed, len(production), scale=100),
        trend=trend,
    )


def export_scorecard_trend(scorecard: Scorecard, delimiter: str = ",") -> str:
    headers, lines = rollup_table(scorecard.trend, "Date", TREND_COLUMNS)
    return to_delimited_text(headers, lines, delimiter)
