"""
Last-Request-Wins Tracking

A user may change a report's filters while an earlier request is still
loading. Results are only published when they belong to the latest requested
parameters; anything older is discarded, whichever order responses arrive in.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

import structlog

from .params import ReportParams

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ticket:
    """Handle for one issued request"""
    sequence: int
    params: ReportParams


class RequestTracker:
    """Remembers the latest requested parameters and the result published for them"""

    def __init__(self):
        self._sequence = 0
        self._current: Optional[Ticket] = None
        self._latest: Any = None
        self._latest_params: Optional[ReportParams] = None

    def begin(self, params: ReportParams) -> Ticket:
        """Record a new request; it supersedes every earlier one"""
        self._sequence += 1
        self._current = Ticket(sequence=self._sequence, params=params)
        return self._current

    def is_current(self, ticket: Ticket) -> bool:
        """True when the ticket's result may still be published"""
        if self._current is None:
            return False
        return ticket.sequence == self._current.sequence or ticket.params == self._current.params

    def complete(self, ticket: Ticket, result: Any) -> bool:
        """
        Offer a finished result.

        Returns:
            True if the result was published, False if it was stale
        """
        if not self.is_current(ticket):
            logger.info(
                "Discarding stale report result",
                ticket=ticket.sequence,
                current=self._current.sequence if self._current else None,
            )
            return False
        self._latest = result
        self._latest_params = ticket.params
        return True

    @property
    def latest(self) -> Any:
        return self._latest

    @property
    def latest_params(self) -> Optional[ReportParams]:
        return self._latest_params


class ReportSession(Generic[T]):
    """
    One report view that can be re-requested with new filters.

    Example:
        session = ReportSession(service.collections)
        ticket = session.request(params)
        report = session.run(ticket)  # None if a newer request was made
    """

    def __init__(self, build: Callable[[ReportParams], T]):
        self._build = build
        self.tracker = RequestTracker()

    def request(self, params: ReportParams) -> Ticket:
        return self.tracker.begin(params)

    def run(self, ticket: Ticket) -> Optional[T]:
        result = self._build(ticket.params)
        if self.tracker.complete(ticket, result):
            return result
        return None

    def refresh(self, params: ReportParams) -> Optional[T]:
        return self.run(self.request(params))

    @property
    def current(self) -> Optional[T]:
        return self.tracker.latest
