"""
Operations Reports

Purchases by supplier, production by shift and product, and attendance by
status and department.
"""

from dataclasses import dataclass, field, replace
from typing import Any, List, Mapping, Sequence

import structlog

from opsreport.aggregation import (
    Accumulator,
    GroupRollup,
    aggregate,
    dimension_key,
    fill_keys,
    grand_total,
    safe_ratio,
    sort_rollups,
)
from opsreport.aggregation.engine import RatioValue
from opsreport.export import rollup_table, to_delimited_text
from opsreport.normalization import normalize_many

logger = structlog.get_logger(__name__)

TOP_SUPPLIERS = 10
TOP_PRODUCTS = 6

PURCHASE_DIMENSIONS = {"supplier": "supplier_label", "status": "status"}
PURCHASE_MEASURES = {"amount": "total_amount"}

PRODUCTION_DIMENSIONS = {
    "product": "product_label",
    "shift": "shift",
    "operator": "operator_label",
    "status": "status",
}
PRODUCTION_MEASURES = {"quantity": "quantity_produced"}
COMPLETED = "completed"

ATTENDANCE_DIMENSIONS = {"employee": "employee_label", "department": "department", "status": "status"}
ATTENDANCE_STATUSES = ["present", "absent", "half_day", "leave"]
PRESENT_STATUSES = ("present", "half_day")


@dataclass
class PurchaseReport:
    total_amount: float
    purchase_count: int
    avg_purchase: RatioValue
    unique_suppliers: int
    by_supplier: List[GroupRollup] = field(default_factory=list)


@dataclass
class ProductionReport:
    total_quantity: float
    batches: int
    completed_batches: int
    completion_rate: RatioValue  # percent
    avg_batch_size: RatioValue
    unique_operators: int
    by_shift: List[GroupRollup] = field(default_factory=list)
    by_product: List[GroupRollup] = field(default_factory=list)


@dataclass
class AttendanceReport:
    total_records: int
    by_status: List[GroupRollup] = field(default_factory=list)
    by_department: List[GroupRollup] = field(default_factory=list)


def build_purchase_report(rows: Sequence[Mapping[str, Any]]) -> PurchaseReport:
    records = normalize_many(rows, PURCHASE_DIMENSIONS, PURCHASE_MEASURES, date_field="date")
    by_supplier = aggregate(records, dimension_key("supplier"), [Accumulator("amount")])
    total = grand_total(by_supplier, "amount")
    return PurchaseReport(
        total_amount=total,
        purchase_count=len(records),
        avg_purchase=safe_ratio(total, len(records)),
        unique_suppliers=len(by_supplier),
        by_supplier=sort_rollups(by_supplier, "amount", limit=TOP_SUPPLIERS),
    )


def build_production_report(rows: Sequence[Mapping[str, Any]]) -> ProductionReport:
    records = normalize_many(rows, PRODUCTION_DIMENSIONS, PRODUCTION_MEASURES, date_field="date")
    quantity = [Accumulator("quantity")]

    by_shift = aggregate(records, dimension_key("shift"), quantity)
    by_product = aggregate(records, dimension_key("product"), quantity)
    operators = aggregate(records, dimension_key("operator"), [])
    completed = sum(1 for r in records if r.label("status").lower() == COMPLETED)
    total = grand_total(by_shift, "quantity")

    report = ProductionReport(
        total_quantity=total,
        batches=len(records),
        completed_batches=completed,
        completion_rate=safe_ratio(completed, len(records), scale=100),
        avg_batch_size=safe_ratio(total, len(records)),
        unique_operators=len(operators),
        by_shift=by_shift,
        by_product=sort_rollups(by_product, "quantity", limit=TOP_PRODUCTS),
    )
    logger.info("Production report built", batches=report.batches, completed=completed)
    return report


def build_attendance_report(rows: Sequence[Mapping[str, Any]]) -> AttendanceReport:
    """
    Attendance by status and by department.

    Present and half-day both count as present for departments; every other
    status, including a missing one, counts as absent.
    """
    records = normalize_many(rows, ATTENDANCE_DIMENSIONS, {}, date_field="date")
    records = [
        replace(r, measures={
            "present": 1.0 if r.label("status") in PRESENT_STATUSES else 0.0,
            "absent": 0.0 if r.label("status") in PRESENT_STATUSES else 1.0,
        })
        for r in records
    ]

    by_status = fill_keys(aggregate(records, dimension_key("status"), []), ATTENDANCE_STATUSES, [])
    by_department = aggregate(
        records,
        dimension_key("department"),
        [Accumulator("present"), Accumulator("absent")],
    )
    return AttendanceReport(total_records=len(records), by_status=by_status, by_department=by_department)


def export_purchases(report: PurchaseReport, delimiter: str = ",") -> str:
    headers, lines = rollup_table(report.by_supplier, "Supplier", [("Purchases", "count"), ("Amount", "amount")])
    return to_delimited_text(headers, lines, delimiter)


def export_production(report: ProductionReport, delimiter: str = ",") -> str:
    headers, lines = rollup_table(report.by_product, "Product", [("Batches", "count"), ("Quantity", "quantity")])
    return to_delimited_text(headers, lines, delimiter)


def export_attendance(report: AttendanceReport, delimiter: str = ",") -> str:
    headers, lines = rollup_table(
        report.by_department,
        "Department",
        [("Records", "count"), ("Present", "present"), ("Absent", "absent")],
    )
    return to_delimited_text(headers, lines, delimiter)
