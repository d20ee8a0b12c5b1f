"""
Unit Tests - Ratio & Percentage Derivation
"""
import math

import pytest

from opsreport.aggregation import (
    UNDEFINED,
    GroupRollup,
    RatioSpec,
    derive_ratios,
    derive_shares,
    is_undefined,
    safe_ratio,
)


class TestSafeRatio:
    """Tests for the zero-denominator policy"""

    @pytest.mark.parametrize("numerator", [0, 1, -5, 1e9, 0.001])
    def test_zero_denominator_is_undefined(self, numerator):
        result = safe_ratio(numerator, 0)
        assert result == UNDEFINED
        assert is_undefined(result)

    def test_regular_division(self):
        assert safe_ratio(250, 100) == 2.5
        assert safe_ratio(1, 4, scale=100) == 25.0

    def test_zero_numerator_is_a_real_zero(self):
        result = safe_ratio(0, 5)
        assert result == 0.0
        assert not is_undefined(result)

    def test_overflow_is_undefined(self):
        assert safe_ratio(1e308, 1e-308) == UNDEFINED

    def test_undefined_operand_propagates(self):
        assert safe_ratio(UNDEFINED, 5) == UNDEFINED
        assert safe_ratio(5, UNDEFINED) == UNDEFINED


class TestDeriveRatios:
    """Tests for derive_ratios"""

    def test_ratios_per_rollup(self):
        rollups = [
            GroupRollup("North", 2, {"weight": 250.0, "distance": 100.0}),
            GroupRollup("Depot", 1, {"weight": 40.0, "distance": 0.0}),
        ]
        derived = derive_ratios(rollups, [
            RatioSpec("weight_per_trip", "weight", "count"),
            RatioSpec("weight_per_km", "weight", "distance"),
        ])

        assert derived[0].ratios == {"weight_per_trip": 125.0, "weight_per_km": 2.5}
        assert derived[1].ratios["weight_per_trip"] == 40.0
        assert derived[1].ratios["weight_per_km"] == UNDEFINED

    def test_no_infinities_or_nans(self):
        rollups = [GroupRollup("A", 0, {"x": 5.0, "y": 0.0})]
        derived = derive_ratios(rollups, [RatioSpec("r", "x", "y"), RatioSpec("s", "x", "count")])
        for value in derived[0].ratios.values():
            assert isinstance(value, str) or math.isfinite(value)

    def test_later_spec_uses_earlier_ratio(self):
        rollups = [GroupRollup("A", 2, {"amount": 300.0, "liters": 30.0})]
        derived = derive_ratios(rollups, [
            RatioSpec("price", "amount", "liters"),
            RatioSpec("price_per_entry", "price", "count"),
        ])
        assert derived[0].ratios["price_per_entry"] == 5.0

    def test_inputs_untouched(self):
        rollups = [GroupRollup("A", 1, {"x": 1.0})]
        derive_ratios(rollups, [RatioSpec("r", "x", "count")])
        assert rollups[0].ratios == {}


class TestDeriveShares:
    """Tests for percentage of total"""

    def test_shares(self):
        rollups = [GroupRollup("A", 1, {"w": 75.0}), GroupRollup("B", 3, {"w": 25.0})]
        shared = derive_shares(rollups, "w")

        assert [r.ratios["w_share"] for r in shared] == [75.0, 25.0]

    def test_share_of_count_with_name(self):
        rollups = [GroupRollup("A", 1), GroupRollup("B", 3)]
        shared = derive_shares(rollups, "count", name="trip_share")
        assert [r.ratios["trip_share"] for r in shared] == [25.0, 75.0]

    def test_zero_total_gives_zero_shares(self):
        rollups = [GroupRollup("A", 1, {"w": 0.0}), GroupRollup("B", 1, {"w": 0.0})]
        shared = derive_shares(rollups, "w")
        assert [r.ratios["w_share"] for r in shared] == [0.0, 0.0]

    def test_shares_sum_to_hundred(self):
        rollups = [GroupRollup(k, 1, {"w": v}) for k, v in [("A", 1.0), ("B", 2.0), ("C", 4.0)]]
        shared = derive_shares(rollups, "w")
        assert sum(r.ratios["w_share"] for r in shared) == pytest.approx(100.0)
