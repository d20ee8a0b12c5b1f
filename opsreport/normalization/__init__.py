"""
Record Normalization Module
"""
from .normalizer import (
    UNKNOWN_LABEL,
    MetricRecord,
    Span,
    coerce_label,
    coerce_number,
    normalize,
    normalize_many,
)

__all__ = [
    "UNKNOWN_LABEL",
    "MetricRecord",
    "Span",
    "coerce_label",
    "coerce_number",
    "normalize",
    "normalize_many",
]
