"""
Bucket Classification Module
"""
from .classifiers import (
    AgingBucket,
    AgingItem,
    ComplianceDate,
    ComplianceStatus,
    StockItem,
    StockStatus,
    classify_age,
    classify_expiry,
    classify_stock,
    days_until,
    to_date,
)

__all__ = [
    "AgingBucket",
    "AgingItem",
    "ComplianceDate",
    "ComplianceStatus",
    "StockItem",
    "StockStatus",
    "classify_age",
    "classify_expiry",
    "classify_stock",
    "days_until",
    "to_date",
]
