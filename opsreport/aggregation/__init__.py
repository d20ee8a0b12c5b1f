"""
Grouping/Aggregation Module
"""
from .engine import (
    Accumulator,
    AccumulatorOp,
    GroupRollup,
    aggregate,
    composite_key,
    date_key,
    dimension_key,
    fill_keys,
    grand_total,
    sort_rollups,
)
from .ratios import UNDEFINED, RatioSpec, derive_ratios, derive_shares, is_undefined, safe_ratio

__all__ = [
    "Accumulator",
    "AccumulatorOp",
    "GroupRollup",
    "aggregate",
    "composite_key",
    "date_key",
    "dimension_key",
    "fill_keys",
    "grand_total",
    "sort_rollups",
    "UNDEFINED",
    "RatioSpec",
    "derive_ratios",
    "derive_shares",
    "is_undefined",
    "safe_ratio",
]
