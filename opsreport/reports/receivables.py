"""
Receivables Reports

Aging of outstanding invoices and the sales summary.

Aging is always computed against an explicit as-of date. Outstanding is
total minus paid, clamped at zero; age is the days from invoice date to the
as-of date, clamped at zero for future-dated invoices.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence

import structlog

from opsreport.aggregation import (
    Accumulator,
    AccumulatorOp,
    GroupRollup,
    aggregate,
    date_key,
    derive_shares,
    dimension_key,
    fill_keys,
    grand_total,
    sort_rollups,
)
from opsreport.classification import AgingBucket, AgingItem
from opsreport.classification.classifiers import (
    DEFAULT_AGING_BOUNDARIES,
    DEFAULT_CREDIT_PERIOD_DAYS,
    to_date,
)
from opsreport.export import rollup_table, to_delimited_text
from opsreport.normalization import MetricRecord, coerce_label, coerce_number, normalize_many

logger = structlog.get_logger(__name__)

BUCKET_ORDER = [b.value for b in AgingBucket]

INVOICE_DIMENSIONS = {"customer": "customer_label"}
INVOICE_MEASURES = {"amount": "total_amount", "paid": "paid_amount"}
PAYMENT_DIMENSIONS = {"customer": "customer_label"}
PAYMENT_MEASURES = {"amount": "amount"}

AGING_HEADERS = [
    "Invoice No", "Customer", "Invoice Date", "Outstanding",
    "Days Old", "Credit Period", "Bucket", "Overdue",
]
SALES_COLUMNS = [
    ("Invoices", "count"),
    ("Sales", "amount"),
    ("Paid", "paid"),
    ("Share (%)", "amount_share"),
]


@dataclass
class AgingReport:
    as_of: date
    total_outstanding: float
    items: List[AgingItem] = field(default_factory=list)
    buckets: List[GroupRollup] = field(default_factory=list)
    by_customer: List[GroupRollup] = field(default_factory=list)
    overdue: List[AgingItem] = field(default_factory=list)


@dataclass
class SalesReport:
    total_sales: float
    total_collections: float
    outstanding: float
    invoice_count: int
    unique_customers: int
    by_date: List[GroupRollup] = field(default_factory=list)
    by_customer: List[GroupRollup] = field(default_factory=list)
    top_customers: List[GroupRollup] = field(default_factory=list)


def build_aging_items(
    rows: Sequence[Mapping[str, Any]],
    as_of: date,
    default_credit_period: int = DEFAULT_CREDIT_PERIOD_DAYS,
    boundaries: Sequence[int] = DEFAULT_AGING_BOUNDARIES,
) -> List[AgingItem]:
    """
    Age each invoice against the as-of date.

    A missing or zero credit period falls back to the default.
    """
    items = []
    for row in rows:
        invoice_date = to_date(row.get("date"))
        age = max(0, (as_of - invoice_date).days) if invoice_date else 0
        outstanding = max(0.0, coerce_number(row.get("total_amount")) - coerce_number(row.get("paid_amount")))
        credit_period = int(coerce_number(row.get("credit_period_days"))) or default_credit_period
        items.append(
            AgingItem(
                customer=coerce_label(row.get("customer_label")),
                document_number=coerce_label(row.get("invoice_number")),
                document_date=invoice_date,
                amount_outstanding=outstanding,
                age_in_days=age,
                credit_period_days=credit_period,
                boundaries=tuple(boundaries),
            )
        )
    return items


def _aging_records(items: Sequence[AgingItem]) -> List[MetricRecord]:
    return [
        MetricRecord(
            timestamp=item.document_date,
            dimensions={"customer": item.customer, "bucket": item.bucket.value},
            measures={"outstanding": item.amount_outstanding, "age": float(item.age_in_days)},
        )
        for item in items
        if item.amount_outstanding > 0
    ]


def aging_buckets(items: Sequence[AgingItem]) -> List[GroupRollup]:
    """Outstanding per bucket, all four buckets in age order"""
    rollups = aggregate(_aging_records(items), dimension_key("bucket"), [Accumulator("outstanding")])
    rollups = fill_keys(rollups, BUCKET_ORDER, ["outstanding"])
    return derive_shares(rollups, "outstanding")


def customer_outstanding(items: Sequence[AgingItem], limit: Optional[int] = None) -> List[GroupRollup]:
    """Customers with money owed, largest balance first"""
    rollups = aggregate(
        _aging_records(items),
        dimension_key("customer"),
        [
            Accumulator("outstanding"),
            Accumulator("age", AccumulatorOp.MAX, name="oldest_days"),
        ],
    )
    return sort_rollups(rollups, "outstanding", limit=limit)


def build_aging_report(
    rows: Sequence[Mapping[str, Any]],
    as_of: date,
    default_credit_period: int = DEFAULT_CREDIT_PERIOD_DAYS,
    boundaries: Sequence[int] = DEFAULT_AGING_BOUNDARIES,
) -> AgingReport:
    items = build_aging_items(rows, as_of, default_credit_period, boundaries)
    buckets = aging_buckets(items)
    report = AgingReport(
        as_of=as_of,
        total_outstanding=grand_total(buckets, "outstanding"),
        items=items,
        buckets=buckets,
        by_customer=customer_outstanding(items),
        overdue=[item for item in items if item.is_overdue],
    )
    logger.info(
        "Aging report built",
        invoices=len(items),
        overdue=len(report.overdue),
        as_of=as_of.isoformat(),
    )
    return report


def build_sales_report(
    invoice_rows: Sequence[Mapping[str, Any]],
    payment_rows: Sequence[Mapping[str, Any]] = (),
    top_n: int = 5,
) -> SalesReport:
    """Sales and collections for the period with the top customers"""
    invoices = normalize_many(invoice_rows, INVOICE_DIMENSIONS, INVOICE_MEASURES, date_field="date")
    payments = normalize_many(payment_rows, PAYMENT_DIMENSIONS, PAYMENT_MEASURES, date_field="date")

    by_customer = aggregate(invoices, dimension_key("customer"), [Accumulator("amount"), Accumulator("paid")])
    by_customer = sort_rollups(derive_shares(by_customer, "amount"), "amount")
    by_date = sorted(aggregate(invoices, date_key("day"), [Accumulator("amount")]), key=lambda r: r.key)

    total_sales = grand_total(by_customer, "amount")
    total_collections = sum(p.measure("amount") for p in payments)

    return SalesReport(
        total_sales=total_sales,
        total_collections=total_collections,
        outstanding=total_sales - total_collections,
        invoice_count=len(invoices),
        unique_customers=len(by_customer),
        by_date=by_date,
        by_customer=by_customer,
        top_customers=by_customer[:top_n],
    )


def export_aging(report: AgingReport, delimiter: str = ",") -> str:
    lines = [
        [
            item.document_number,
            item.customer,
            item.document_date,
            item.amount_outstanding,
            item.age_in_days,
            item.credit_period_days,
            item.bucket,
            "Yes" if item.is_overdue else "No",
        ]
        for item in report.items
        if item.amount_outstanding > 0
    ]
    return to_delimited_text(AGING_HEADERS, lines, delimiter)


def export_sales(report: SalesReport, delimiter: str = ",") -> str:
    headers, lines = rollup_table(report.by_customer, "Customer", SALES_COLUMNS)
    return to_delimited_text(headers, lines, delimiter)
