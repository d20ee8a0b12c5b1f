"""
Query Layer Interface

Reports read flat, pre-joined records through a RecordSource. The production
source lives in the surrounding application (it talks to the database); the
in-memory source here backs tests, demos and the default API dependency.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

import structlog

from opsreport.classification.classifiers import to_date
from .errors import FetchError
from .params import ReportParams

logger = structlog.get_logger(__name__)


class Dataset(str, Enum):
    """Record sets the reports consume"""
    COLLECTION_TRIPS = "collection_trips"
    FUEL_ENTRIES = "fuel_entries"
    INVOICES = "invoices"
    PAYMENTS = "payments"
    STOCK_ITEMS = "stock_items"
    VEHICLE_DOCUMENTS = "vehicle_documents"
    PURCHASES = "purchases"
    PRODUCTION_BATCHES = "production_batches"
    ATTENDANCE = "attendance"


# Current-state tables; the date range does not apply to them
SNAPSHOT_DATASETS = frozenset({Dataset.STOCK_ITEMS, Dataset.VEHICLE_DOCUMENTS})

ROUTE_FILTERED = frozenset({Dataset.COLLECTION_TRIPS})
CUSTOMER_FILTERED = frozenset({Dataset.INVOICES, Dataset.PAYMENTS})

DATE_FIELD = "date"


class RecordSource(Protocol):
    """Anything that can deliver the records for a report"""

    def fetch(self, dataset: Dataset, params: ReportParams) -> List[Mapping[str, Any]]:
        """
        Return the records of a dataset matching the filters.

        Raises:
            FetchError: The records could not be delivered
        """
        ...


class InMemoryRecordSource:
    """
    RecordSource over lists of dicts.

    Applies the same filters the database query would: inclusive date range
    on the "date" field, route_id on trips and customer_id on invoices and
    payments.

    Example:
        source = InMemoryRecordSource({Dataset.COLLECTION_TRIPS: trips})
        rows = source.fetch(Dataset.COLLECTION_TRIPS, params)
    """

    def __init__(self, datasets: Optional[Mapping[Dataset, Sequence[Mapping[str, Any]]]] = None):
        self._datasets: Dict[Dataset, List[Mapping[str, Any]]] = {}
        for dataset, rows in (datasets or {}).items():
            self.load(dataset, rows)

    def load(self, dataset: Dataset, rows: Iterable[Mapping[str, Any]]) -> None:
        """Replace the rows held for a dataset"""
        self._datasets[Dataset(dataset)] = [dict(row) for row in rows]

    def fetch(self, dataset: Dataset, params: ReportParams) -> List[Mapping[str, Any]]:
        try:
            dataset = Dataset(dataset)
        except ValueError:
            raise FetchError(str(dataset), "unknown dataset") from None

        rows = self._datasets.get(dataset, [])

        if dataset not in SNAPSHOT_DATASETS:
            rows = [r for r in rows if params.contains(to_date(r.get(DATE_FIELD)))]
        if params.route_id and dataset in ROUTE_FILTERED:
            rows = [r for r in rows if str(r.get("route_id")) == params.route_id]
        if params.customer_id and dataset in CUSTOMER_FILTERED:
            rows = [r for r in rows if str(r.get("customer_id")) == params.customer_id]

        logger.debug("Records fetched", dataset=dataset.value, rows=len(rows))
        return [dict(r) for r in rows]
