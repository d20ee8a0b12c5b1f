"""
Reports Module

Report builders over the normalization, classification and aggregation
engine, plus the service that feeds them from a RecordSource.
"""
from .errors import FetchError, ReportingError, UnknownReportError
from .params import ReportParams
from .service import REPORTS, ReportService
from .sources import Dataset, InMemoryRecordSource, RecordSource
from .tracker import ReportSession, RequestTracker, Ticket

__all__ = [
    "FetchError",
    "ReportingError",
    "UnknownReportError",
    "ReportParams",
    "REPORTS",
    "ReportService",
    "Dataset",
    "InMemoryRecordSource",
    "RecordSource",
    "ReportSession",
    "RequestTracker",
    "Ticket",
]
