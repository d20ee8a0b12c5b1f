"""
Reporting Errors

The engine itself never raises. These cover what can go wrong around it:
the query layer failing to deliver records, or a caller asking for a report
that does not exist.
"""


class ReportingError(Exception):
    """Base class for reporting failures"""


class FetchError(ReportingError):
    """The query layer could not deliver the records for a report"""

    def __init__(self, dataset: str, message: str):
        self.dataset = dataset
        self.message = message
        super().__init__(f"Failed to fetch {dataset}: {message}")


class UnknownReportError(ReportingError):
    """No report is registered under the requested name"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown report: {name}")
