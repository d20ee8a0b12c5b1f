"""
Report Service

Fetches the records each report needs from a RecordSource and hands them to
the report builders. Thresholds come from ReportingSettings.

Usage:
    service = ReportService(source)
    report = service.build("collections", ReportParams.current_month())
    text = service.export("collections", params)
"""

from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import structlog

from opsreport.config.settings import ReportingSettings, get_settings
from .collections import CollectionReport, build_collection_report, export_collection_details
from .fleet import (
    ComplianceReport,
    FuelReport,
    build_compliance_report,
    build_fuel_report,
    export_compliance,
    export_fuel_summary,
)
from .inventory import StockReport, build_stock_report, export_stock
from .operations import (
    AttendanceReport,
    ProductionReport,
    PurchaseReport,
    build_attendance_report,
    build_production_report,
    build_purchase_report,
    export_attendance,
    export_production,
    export_purchases,
)
from .receivables import AgingReport, SalesReport, build_aging_report, build_sales_report, export_aging, export_sales
from .scorecard import Scorecard, build_scorecard, export_scorecard_trend
from .errors import FetchError, UnknownReportError
from .params import ReportParams
from .sources import Dataset, RecordSource

logger = structlog.get_logger(__name__)


class ReportService:
    """Entry point for building and exporting every report"""

    def __init__(
        self,
        source: RecordSource,
        config: Optional[ReportingSettings] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.source = source
        self.config = config or get_settings().reporting
        self._today = today or date.today

    def _fetch(self, dataset: Dataset, params: ReportParams) -> List[Mapping[str, Any]]:
        try:
            return self.source.fetch(dataset, params)
        except FetchError:
            logger.error("Record fetch failed", dataset=dataset.value)
            raise
        except Exception as e:
            logger.error("Record fetch failed", dataset=dataset.value, error=str(e))
            raise FetchError(dataset.value, str(e)) from e

    def _as_of(self, params: ReportParams) -> date:
        return params.as_of(self._today())

    # Report builders

    def collections(self, params: ReportParams) -> CollectionReport:
        return build_collection_report(self._fetch(Dataset.COLLECTION_TRIPS, params))

    def fuel(self, params: ReportParams) -> FuelReport:
        return build_fuel_report(
            self._fetch(Dataset.FUEL_ENTRIES, params),
            self._fetch(Dataset.COLLECTION_TRIPS, params),
        )

    def compliance(self, params: ReportParams) -> ComplianceReport:
        return build_compliance_report(
            self._fetch(Dataset.VEHICLE_DOCUMENTS, params),
            today=self._as_of(params),
            warning_window_days=self.config.compliance_warning_days,
        )

    def aging(self, params: ReportParams) -> AgingReport:
        return build_aging_report(
            self._fetch(Dataset.INVOICES, params),
            as_of=self._as_of(params),
            default_credit_period=self.config.default_credit_period_days,
            boundaries=self.config.aging_bounds,
        )

    def sales(self, params: ReportParams) -> SalesReport:
        return build_sales_report(
            self._fetch(Dataset.INVOICES, params),
            self._fetch(Dataset.PAYMENTS, params),
            top_n=self.config.top_n,
        )

    def stock(self, params: ReportParams) -> StockReport:
        return build_stock_report(
            self._fetch(Dataset.STOCK_ITEMS, params),
            warning_multiplier=self.config.stock_warning_multiplier,
        )

    def purchases(self, params: ReportParams) -> PurchaseReport:
        return build_purchase_report(self._fetch(Dataset.PURCHASES, params))

    def production(self, params: ReportParams) -> ProductionReport:
        return build_production_report(self._fetch(Dataset.PRODUCTION_BATCHES, params))

    def attendance(self, params: ReportParams) -> AttendanceReport:
        return build_attendance_report(self._fetch(Dataset.ATTENDANCE, params))

    def scorecard(self, params: ReportParams) -> Scorecard:
        return build_scorecard(
            params,
            self._fetch(Dataset.INVOICES, params),
            self._fetch(Dataset.PAYMENTS, params),
            self._fetch(Dataset.PRODUCTION_BATCHES, params),
            self._fetch(Dataset.PURCHASES, params),
        )

    # Dispatch

    def build(self, name: str, params: ReportParams) -> Any:
        """Build a report by its registered name"""
        builder, _ = self._lookup(name)
        logger.info(
            "Building report",
            report=name,
            start_date=params.start_date.isoformat(),
            end_date=params.end_date.isoformat(),
        )
        return builder(self, params)

    def export(self, name: str, params: ReportParams) -> str:
        """Build a report and render it as delimited text"""
        builder, exporter = self._lookup(name)
        delimiter = self.config.export_delimiter
        if exporter is None:
            return export_collection_details(
                self._fetch(Dataset.COLLECTION_TRIPS, params), delimiter
            )
        return exporter(builder(self, params), delimiter)

    @staticmethod
    def _lookup(name: str) -> Tuple[Callable, Optional[Callable]]:
        try:
            return REPORTS[name]
        except KeyError:
            raise UnknownReportError(name) from None


# Report name -> (builder, exporter). Collections exports one line per trip
# straight from the fetched rows, so it has no report-level exporter.
REPORTS: Dict[str, Tuple[Callable, Optional[Callable]]] = {
    "collections": (ReportService.collections, None),
    "fuel": (ReportService.fuel, export_fuel_summary),
    "compliance": (ReportService.compliance, export_compliance),
    "aging": (ReportService.aging, export_aging),
    "sales": (ReportService.sales, export_sales),
    "stock": (ReportService.stock, export_stock),
    "purchases": (ReportService.purchases, export_purchases),
    "production": (ReportService.production, export_production),
    "attendance": (ReportService.attendance, export_attendance),
    "scorecard": (ReportService.scorecard, export_scorecard_trend),
}
