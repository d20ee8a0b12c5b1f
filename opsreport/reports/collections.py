"""
Waste Collection Report

Rollups over collection trips:
- Summary: total weight, bags, trips, distance and average weight per trip
- Route-wise: weight, bags, distance, weight/trip, weight/km, share of trips
- Date-wise trend, in date order
- Crew view: route and driver combined
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Sequence

import structlog

from opsreport.aggregation import (
    Accumulator,
    GroupRollup,
    RatioSpec,
    aggregate,
    composite_key,
    date_key,
    derive_ratios,
    derive_shares,
    dimension_key,
    grand_total,
    safe_ratio,
)
from opsreport.aggregation.engine import RatioValue
from opsreport.export import rollup_table, to_delimited_text
from opsreport.normalization import MetricRecord, Span, coerce_number, normalize_many

logger = structlog.get_logger(__name__)

TRIP_DIMENSIONS = {
    "route": "route_label",
    "vehicle": "vehicle_label",
    "driver": "driver_label",
    "helper": "helper_label",
    "status": "status",
}
TRIP_MEASURES = {
    "weight": "total_weight",
    "bags": "total_bags",
    "distance": Span(start="start_km", end="end_km"),
}
TRIP_ACCUMULATORS = [
    Accumulator("weight"),
    Accumulator("bags"),
    Accumulator("distance"),
]
TRIP_RATIOS = [
    RatioSpec("weight_per_trip", "weight", "count"),
    RatioSpec("weight_per_km", "weight", "distance"),
]

DETAIL_HEADERS = [
    "Date", "Collection No", "Route", "Vehicle", "Driver", "Helper",
    "Total Weight (kg)", "Total Bags", "Start KM", "End KM", "Status",
]
ROUTE_COLUMNS = [
    ("Trips", "count"),
    ("Total Weight (kg)", "weight"),
    ("Total Bags", "bags"),
    ("Distance (km)", "distance"),
    ("Avg Weight/Trip (kg)", "weight_per_trip"),
    ("Weight/km (kg)", "weight_per_km"),
    ("Trip Share (%)", "trip_share"),
]


@dataclass
class CollectionSummary:
    """Headline figures for the period"""
    total_weight: float
    total_bags: float
    total_trips: int
    total_distance: float
    avg_weight_per_trip: RatioValue


@dataclass
class CollectionReport:
    summary: CollectionSummary
    by_route: List[GroupRollup] = field(default_factory=list)
    by_date: List[GroupRollup] = field(default_factory=list)
    by_crew: List[GroupRollup] = field(default_factory=list)


def normalize_trips(rows: Sequence[Mapping[str, Any]]) -> List[MetricRecord]:
    return normalize_many(rows, TRIP_DIMENSIONS, TRIP_MEASURES, date_field="date")


def route_rollup(records: Sequence[MetricRecord]) -> List[GroupRollup]:
    """Route-wise totals in first-seen route order"""
    rollups = aggregate(records, dimension_key("route"), TRIP_ACCUMULATORS)
    rollups = derive_ratios(rollups, TRIP_RATIOS)
    return derive_shares(rollups, "count", name="trip_share")


def date_trend(records: Sequence[MetricRecord], granularity: str = "day") -> List[GroupRollup]:
    """Weight and bags per period, ordered by period"""
    rollups = aggregate(records, date_key(granularity), TRIP_ACCUMULATORS[:2])
    return sorted(rollups, key=lambda r: r.key)


def crew_rollup(records: Sequence[MetricRecord]) -> List[GroupRollup]:
    """Totals per route and driver pair, keyed 'route|driver'"""
    rollups = aggregate(records, composite_key("route", "driver"), TRIP_ACCUMULATORS)
    return derive_ratios(rollups, TRIP_RATIOS[:1])


def summarize(by_route: Sequence[GroupRollup]) -> CollectionSummary:
    total_weight = grand_total(by_route, "weight")
    total_trips = sum(r.count for r in by_route)
    return CollectionSummary(
        total_weight=total_weight,
        total_bags=grand_total(by_route, "bags"),
        total_trips=total_trips,
        total_distance=grand_total(by_route, "distance"),
        avg_weight_per_trip=safe_ratio(total_weight, total_trips),
    )


def build_collection_report(rows: Sequence[Mapping[str, Any]], granularity: str = "day") -> CollectionReport:
    """
    Build the collection report from raw trip rows.

    Args:
        rows: CollectionTrip records from the query layer
        granularity: Trend period, "day", "week" or "month"
    """
    records = normalize_trips(rows)
    by_route = route_rollup(records)
    report = CollectionReport(
        summary=summarize(by_route),
        by_route=by_route,
        by_date=date_trend(records, granularity),
        by_crew=crew_rollup(records),
    )
    logger.info(
        "Collection report built",
        trips=report.summary.total_trips,
        routes=len(by_route),
    )
    return report


def export_collection_details(rows: Sequence[Mapping[str, Any]], delimiter: str = ",") -> str:
    """One line per trip, in the order the query layer returned them"""
    lines = [
        [
            row.get("date"),
            row.get("collection_number"),
            row.get("route_label"),
            row.get("vehicle_label"),
            row.get("driver_label"),
            row.get("helper_label"),
            coerce_number(row.get("total_weight")),
            coerce_number(row.get("total_bags")),
            coerce_number(row.get("start_km")),
            coerce_number(row.get("end_km")),
            row.get("status"),
        ]
        for row in rows
    ]
    return to_delimited_text(DETAIL_HEADERS, lines, delimiter)


def export_route_summary(report: CollectionReport, delimiter: str = ",") -> str:
    headers, lines = rollup_table(report.by_route, "Route", ROUTE_COLUMNS)
    return to_delimited_text(headers, lines, delimiter)
