"""
Bucket Classifiers

Pure, total classification functions used by the reports:
- Aging: days outstanding -> receivables bucket
- Stock health: current vs. minimum quantity -> status
- Compliance window: document expiry vs. today -> status

None of these read the clock. The reference date is always passed in so a
report computed "as of" a given day is reproducible.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Sequence, Union

DEFAULT_AGING_BOUNDARIES = (30, 60, 90)
DEFAULT_STOCK_WARNING_MULTIPLIER = 1.5
DEFAULT_WARNING_WINDOW_DAYS = 30
DEFAULT_CREDIT_PERIOD_DAYS = 30

DateLike = Union[date, datetime, str, None]


class AgingBucket(str, Enum):
    """Receivable aging buckets, in ascending age order"""
    CURRENT = "Current"
    DAYS_31_TO_60 = "31-60 Days"
    DAYS_61_TO_90 = "61-90 Days"
    OVER_90 = "90+ Days"


class StockStatus(str, Enum):
    """Stock health statuses, most severe first"""
    OUT_OF_STOCK = "Out of Stock"
    CRITICAL = "Critical"
    WARNING = "Warning"
    HEALTHY = "Healthy"


class ComplianceStatus(str, Enum):
    """Document expiry statuses"""
    NO_DATE = "No Date"
    EXPIRED = "Expired"
    EXPIRING_SOON = "Expiring Soon"
    VALID = "Valid"


def to_date(value: DateLike) -> Optional[date]:
    """
    Coerce a date-like value to a date.

    Accepts date and datetime objects and ISO strings (only the leading
    YYYY-MM-DD part is read, so timestamps work too). Anything else is None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()[:10]
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None
    return None


def classify_age(
    age_in_days: int,
    boundaries: Sequence[int] = DEFAULT_AGING_BOUNDARIES,
) -> AgingBucket:
    """
    Classify days outstanding into an aging bucket.

    Each boundary is the inclusive upper edge of its bucket: with the default
    (30, 60, 90), 30 is Current, 31 and 60 are 31-60, 61 and 90 are 61-90 and
    91 is 90+. Negative ages (future-dated documents) are Current.
    """
    current_max, second_max, third_max = boundaries
    if age_in_days <= current_max:
        return AgingBucket.CURRENT
    if age_in_days <= second_max:
        return AgingBucket.DAYS_31_TO_60
    if age_in_days <= third_max:
        return AgingBucket.DAYS_61_TO_90
    return AgingBucket.OVER_90


def classify_stock(
    current: float,
    minimum: float,
    warning_multiplier: float = DEFAULT_STOCK_WARNING_MULTIPLIER,
) -> StockStatus:
    """
    Classify a stock level against its configured minimum.

    Zero stock is always Out of Stock. Items without a minimum (0) have no
    threshold and are Healthy whenever any quantity is on hand.
    """
    if current <= 0:
        return StockStatus.OUT_OF_STOCK
    if minimum > 0 and current <= minimum:
        return StockStatus.CRITICAL
    if minimum > 0 and current <= minimum * warning_multiplier:
        return StockStatus.WARNING
    return StockStatus.HEALTHY


def days_until(expiry_date: DateLike, today: date) -> Optional[int]:
    """Days from today to the expiry date (negative once expired)"""
    expiry = to_date(expiry_date)
    if expiry is None:
        return None
    return (expiry - today).days


def classify_expiry(
    expiry_date: DateLike,
    today: date,
    warning_window_days: int = DEFAULT_WARNING_WINDOW_DAYS,
) -> ComplianceStatus:
    """
    Classify a document expiry date relative to today.

    The warning window is inclusive on both ends: a document expiring today or
    exactly `warning_window_days` from today is Expiring Soon.
    """
    remaining = days_until(expiry_date, today)
    if remaining is None:
        return ComplianceStatus.NO_DATE
    if remaining < 0:
        return ComplianceStatus.EXPIRED
    if remaining <= warning_window_days:
        return ComplianceStatus.EXPIRING_SOON
    return ComplianceStatus.VALID


@dataclass(frozen=True)
class AgingItem:
    """An outstanding document aged against an as-of date"""
    customer: str
    document_number: str
    document_date: Optional[date]
    amount_outstanding: float
    age_in_days: int
    credit_period_days: int = DEFAULT_CREDIT_PERIOD_DAYS
    boundaries: Sequence[int] = field(default=DEFAULT_AGING_BOUNDARIES, repr=False, compare=False)
    bucket: AgingBucket = field(init=False)
    is_overdue: bool = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "bucket", classify_age(self.age_in_days, self.boundaries))
        object.__setattr__(
            self,
            "is_overdue",
            self.age_in_days > self.credit_period_days and self.amount_outstanding > 0,
        )


@dataclass(frozen=True)
class StockItem:
    """A stocked material or product with its health status"""
    code: str
    name: str
    category: str
    current_quantity: float
    minimum_quantity: float
    rate: float = 0.0
    warning_multiplier: float = field(default=DEFAULT_STOCK_WARNING_MULTIPLIER, repr=False, compare=False)
    status: StockStatus = field(init=False)
    value: float = field(init=False)
    gap: float = field(init=False)  # shortfall against the minimum, negative above it

    def __post_init__(self):
        object.__setattr__(
            self,
            "status",
            classify_stock(self.current_quantity, self.minimum_quantity, self.warning_multiplier),
        )
        object.__setattr__(self, "value", self.current_quantity * self.rate)
        object.__setattr__(self, "gap", self.minimum_quantity - self.current_quantity)


@dataclass(frozen=True)
class ComplianceDate:
    """An optional expiry date judged against an explicit today"""
    expiry_date: Optional[date]
    today: date
    warning_window_days: int = DEFAULT_WARNING_WINDOW_DAYS
    status: ComplianceStatus = field(init=False)
    days_left: Optional[int] = field(init=False)

    def __post_init__(self):
        object.__setattr__(
            self,
            "status",
            classify_expiry(self.expiry_date, self.today, self.warning_window_days),
        )
        object.__setattr__(self, "days_left", days_until(self.expiry_date, self.today))
