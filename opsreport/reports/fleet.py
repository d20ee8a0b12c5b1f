"""
Fleet Report

Fuel consumption and vehicle document compliance.

Fuel efficiency joins two record sets by vehicle: odometer distance from
collection trips and liters/cost from fuel entries. Both are normalized to the
same measure space (missing measures are 0), concatenated and aggregated in
one pass, so a vehicle seen only in fuel entries still gets a row.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence

import structlog

from opsreport.aggregation import (
    Accumulator,
    AccumulatorOp,
    GroupRollup,
    RatioSpec,
    aggregate,
    derive_ratios,
    dimension_key,
    fill_keys,
    grand_total,
    safe_ratio,
    sort_rollups,
)
from opsreport.aggregation.engine import RatioValue
from opsreport.classification import ComplianceDate, ComplianceStatus
from opsreport.classification.classifiers import DEFAULT_WARNING_WINDOW_DAYS, to_date
from opsreport.export import to_delimited_text
from opsreport.normalization import MetricRecord, Span, coerce_label, normalize_many

logger = structlog.get_logger(__name__)

FUEL_DIMENSIONS = {"vehicle": "vehicle_label"}
FUEL_MEASURES = {
    "liters": "liters",
    "amount": "total_amount",
    "price": "price_per_liter",
}
FUEL_ACCUMULATORS = [
    Accumulator("liters"),
    Accumulator("amount"),
    Accumulator("liters", AccumulatorOp.COUNT, name="entries"),
]
FUEL_ENTRY = "fuel_entry"  # set to 1 on every fuel record in the efficiency join
DISTANCE_MEASURES = {"distance": Span(start="start_km", end="end_km")}
EFFICIENCY_ACCUMULATORS = [
    Accumulator("distance"),
    Accumulator("liters"),
    Accumulator("amount"),
    Accumulator("distance", AccumulatorOp.COUNT_NONZERO, name="trips"),  # trips with odometer distance
    Accumulator(FUEL_ENTRY, AccumulatorOp.COUNT_NONZERO, name="fuel_entries"),
]
EFFICIENCY_RATIOS = [
    RatioSpec("km_per_liter", "distance", "liters"),
    RatioSpec("cost_per_km", "amount", "distance"),
]

COMPLIANCE_HEADERS = [
    "Registration",
    "Insurance Expiry", "Insurance Status", "Insurance Days Left",
    "Fitness Expiry", "Fitness Status", "Fitness Days Left",
]
COMPLIANCE_ORDER = [s.value for s in ComplianceStatus]


@dataclass
class FuelSummary:
    total_liters: float
    total_cost: float
    entries: int
    avg_price_per_liter: RatioValue  # mean of entered prices


@dataclass
class FuelReport:
    summary: FuelSummary
    by_vehicle: List[GroupRollup] = field(default_factory=list)
    efficiency: List[GroupRollup] = field(default_factory=list)


@dataclass
class VehicleCompliance:
    """Document status for one vehicle"""
    registration: str
    insurance: ComplianceDate
    fitness: ComplianceDate

    @property
    def needs_attention(self) -> bool:
        flagged = (ComplianceStatus.EXPIRED, ComplianceStatus.EXPIRING_SOON)
        return self.insurance.status in flagged or self.fitness.status in flagged


@dataclass
class ComplianceReport:
    today: date
    vehicles: List[VehicleCompliance] = field(default_factory=list)
    insurance_counts: List[GroupRollup] = field(default_factory=list)
    fitness_counts: List[GroupRollup] = field(default_factory=list)
    attention: List[VehicleCompliance] = field(default_factory=list)


def normalize_fuel(rows: Sequence[Mapping[str, Any]]) -> List[MetricRecord]:
    return normalize_many(rows, FUEL_DIMENSIONS, FUEL_MEASURES, date_field="date")


def fuel_rollup(records: Sequence[MetricRecord]) -> List[GroupRollup]:
    """Vehicle-wise liters, cost and average price per liter"""
    rollups = aggregate(records, dimension_key("vehicle"), FUEL_ACCUMULATORS)
    return derive_ratios(rollups, [RatioSpec("avg_price_per_liter", "amount", "liters")])


def fuel_efficiency(
    trip_rows: Sequence[Mapping[str, Any]],
    fuel_rows: Sequence[Mapping[str, Any]],
) -> List[GroupRollup]:
    """Distance, fuel and cost per vehicle with km/liter and cost/km"""
    trips = normalize_many(trip_rows, FUEL_DIMENSIONS, DISTANCE_MEASURES, date_field="date")
    fuel = [
        replace(r, measures={**r.measures, FUEL_ENTRY: 1.0})
        for r in normalize_fuel(fuel_rows)
    ]
    rollups = aggregate(trips + fuel, dimension_key("vehicle"), EFFICIENCY_ACCUMULATORS)
    return derive_ratios(rollups, EFFICIENCY_RATIOS)


def build_fuel_report(
    fuel_rows: Sequence[Mapping[str, Any]],
    trip_rows: Sequence[Mapping[str, Any]] = (),
) -> FuelReport:
    records = normalize_fuel(fuel_rows)
    by_vehicle = fuel_rollup(records)
    entries = len(records)
    summary = FuelSummary(
        total_liters=grand_total(by_vehicle, "liters"),
        total_cost=grand_total(by_vehicle, "amount"),
        entries=entries,
        avg_price_per_liter=safe_ratio(sum(r.measure("price") for r in records), entries),
    )
    report = FuelReport(
        summary=summary,
        by_vehicle=sort_rollups(by_vehicle, "amount"),
        efficiency=fuel_efficiency(trip_rows, fuel_rows),
    )
    logger.info("Fuel report built", entries=entries, vehicles=len(by_vehicle))
    return report


def _status_counts(vehicles: Sequence[VehicleCompliance], document: str) -> List[GroupRollup]:
    records = [
        MetricRecord(timestamp=None, dimensions={"status": getattr(v, document).status.value})
        for v in vehicles
    ]
    return fill_keys(aggregate(records, dimension_key("status"), []), COMPLIANCE_ORDER, [])


def build_compliance_report(
    rows: Sequence[Mapping[str, Any]],
    today: date,
    warning_window_days: int = DEFAULT_WARNING_WINDOW_DAYS,
) -> ComplianceReport:
    """
    Classify insurance and fitness expiry for every vehicle.

    Args:
        rows: VehicleDocument records
        today: Reference date; never read from the clock here
        warning_window_days: Days ahead of expiry that count as expiring soon
    """
    vehicles = [
        VehicleCompliance(
            registration=coerce_label(row.get("registration")),
            insurance=ComplianceDate(to_date(row.get("insurance_expiry")), today, warning_window_days),
            fitness=ComplianceDate(to_date(row.get("fitness_expiry")), today, warning_window_days),
        )
        for row in rows
    ]
    report = ComplianceReport(
        today=today,
        vehicles=vehicles,
        insurance_counts=_status_counts(vehicles, "insurance"),
        fitness_counts=_status_counts(vehicles, "fitness"),
        attention=[v for v in vehicles if v.needs_attention],
    )
    logger.info(
        "Compliance report built",
        vehicles=len(vehicles),
        needs_attention=len(report.attention),
    )
    return report


def export_fuel_summary(report: FuelReport, delimiter: str = ",") -> str:
    headers = ["Vehicle", "Entries", "Liters", "Cost", "Avg Price/Liter"]
    lines = [
        [r.key, r.value("entries"), r.value("liters"), r.value("amount"), r.value("avg_price_per_liter")]
        for r in report.by_vehicle
    ]
    return to_delimited_text(headers, lines, delimiter)


def export_compliance(report: ComplianceReport, delimiter: str = ",") -> str:
    lines: List[List[Optional[Any]]] = [
        [
            v.registration,
            v.insurance.expiry_date, v.insurance.status, v.insurance.days_left,
            v.fitness.expiry_date, v.fitness.status, v.fitness.days_left,
        ]
        for v in report.vehicles
    ]
    return to_delimited_text(COMPLIANCE_HEADERS, lines, delimiter)
