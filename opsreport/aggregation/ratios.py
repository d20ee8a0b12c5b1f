"""
Ratio & Percentage Derivation

Post-aggregation pass that attaches derived values (weight per trip, km per
liter, cost per km, share of total) to rollups.

A zero denominator never produces inf, NaN or a silent 0. It yields the
UNDEFINED sentinel so "not computable" stays distinguishable from a genuine
zero ratio, both on screen and in code (see is_undefined).
"""

import math
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence

from .engine import GroupRollup, RatioValue

UNDEFINED = "—"


@dataclass(frozen=True)
class RatioSpec:
    """name = numerator / denominator * scale, over one rollup"""
    name: str
    numerator: str
    denominator: str
    scale: float = 1.0


def is_undefined(value: RatioValue) -> bool:
    return isinstance(value, str) and value == UNDEFINED


def safe_ratio(numerator: RatioValue, denominator: RatioValue, scale: float = 1.0) -> RatioValue:
    """Divide with the zero-denominator policy applied"""
    if isinstance(numerator, str) or isinstance(denominator, str):
        return UNDEFINED
    if denominator == 0:
        return UNDEFINED
    result = numerator / denominator * scale
    if not math.isfinite(result):
        return UNDEFINED
    return result


def derive_ratios(rollups: Sequence[GroupRollup], ratio_specs: Sequence[RatioSpec]) -> List[GroupRollup]:
    """
    Attach ratios to each rollup.

    Specs are applied in order, so a later spec may use an earlier ratio as
    its numerator or denominator. Returns new rollups; inputs are untouched.
    """
    derived = []
    for rollup in rollups:
        ratios = dict(rollup.ratios)
        for spec in ratio_specs:
            current = replace(rollup, ratios=ratios)
            ratios[spec.name] = safe_ratio(
                current.value(spec.numerator),
                current.value(spec.denominator),
                spec.scale,
            )
        derived.append(replace(rollup, ratios=ratios))
    return derived


def derive_shares(
    rollups: Sequence[GroupRollup],
    measure: str,
    name: Optional[str] = None,
) -> List[GroupRollup]:
    """
    Attach each group's percentage of the measure's total across groups.

    When the total is zero every share is 0.0: there is nothing to split, which
    differs from a per-group zero denominator.
    """
    share_name = name or f"{measure}_share"
    values = []
    for rollup in rollups:
        value = rollup.value(measure)
        values.append(0.0 if isinstance(value, str) else float(value))
    total = sum(values)

    shared = []
    for rollup, value in zip(rollups, values):
        ratios = dict(rollup.ratios)
        ratios[share_name] = 0.0 if total == 0 else value / total * 100
        shared.append(replace(rollup, ratios=ratios))
    return shared
