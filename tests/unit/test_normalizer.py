"""
Unit Tests - Record Normalization
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from opsreport.normalization import (
    UNKNOWN_LABEL,
    MetricRecord,
    Span,
    coerce_label,
    coerce_number,
    normalize,
    normalize_many,
)


class TestCoerceLabel:
    """Tests for dimension label coercion"""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t"])
    def test_missing_labels_become_unknown(self, value):
        assert coerce_label(value) == UNKNOWN_LABEL

    def test_label_is_stripped(self):
        assert coerce_label("  North ") == "North"

    def test_non_string_label(self):
        assert coerce_label(12) == "12"


class TestCoerceNumber:
    """Tests for measure coercion"""

    @pytest.mark.parametrize("value,expected", [
        (None, 0.0),
        (True, 0.0),
        ("abc", 0.0),
        ("", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        (10 ** 400, 0.0),
        (-(10 ** 400), 0.0),
        (Decimal("1e400"), 0.0),
        ("1e400", 0.0),
        ([1, 2], 0.0),
        (5, 5.0),
        (2.5, 2.5),
        (Decimal("2.5"), 2.5),
        ("42", 42.0),
        ("1,250.50", 1250.5),
        ("₹500", 500.0),
        (" $ 12 ", 12.0),
    ])
    def test_coerce_number(self, value, expected):
        assert coerce_number(value) == expected


class TestNormalize:
    """Tests for normalize and normalize_many"""

    def test_well_formed_record(self):
        record = normalize(
            {"date": "2024-01-05", "route_label": "North", "total_weight": "100"},
            {"route": "route_label"},
            {"weight": "total_weight"},
            date_field="date",
        )

        assert record == MetricRecord(
            timestamp=date(2024, 1, 5),
            dimensions={"route": "North"},
            measures={"weight": 100.0},
        )

    def test_missing_fields_degrade_to_defaults(self):
        record = normalize({}, {"route": "route_label"}, {"weight": "total_weight"}, date_field="date")

        assert record.label("route") == UNKNOWN_LABEL
        assert record.measure("weight") == 0.0
        assert record.timestamp is None

    def test_oversized_integer_degrades_to_zero(self):
        record = normalize(
            {"route_label": "North", "total_weight": 10 ** 400, "total_bags": 3},
            {"route": "route_label"},
            {"weight": "total_weight", "bags": "total_bags"},
        )

        assert record.measure("weight") == 0.0
        assert record.measure("bags") == 3.0

    def test_none_record(self):
        record = normalize(None, {"route": "route_label"}, {"weight": "total_weight"})
        assert record.label("route") == UNKNOWN_LABEL

    def test_negative_measure_is_clamped(self):
        record = normalize({"liters": -5}, {}, {"liters": "liters"})
        assert record.measure("liters") == 0.0

    def test_span_measure(self):
        spec = {"distance": Span(start="start_km", end="end_km")}

        forward = normalize({"start_km": 1000, "end_km": 1050}, {}, spec)
        reversed_entry = normalize({"start_km": 1050, "end_km": 1000}, {}, spec)
        missing_end = normalize({"start_km": 1000}, {}, spec)

        assert forward.measure("distance") == 50.0
        assert reversed_entry.measure("distance") == 0.0
        assert missing_end.measure("distance") == 0.0

    def test_datetime_and_timestamp_strings(self):
        from_datetime = normalize({"date": datetime(2024, 1, 5, 14, 30)}, {}, {}, date_field="date")
        from_string = normalize({"date": "2024-01-05T14:30:00"}, {}, {}, date_field="date")
        garbage = normalize({"date": "05/01/2024"}, {}, {}, date_field="date")

        assert from_datetime.timestamp == date(2024, 1, 5)
        assert from_string.timestamp == date(2024, 1, 5)
        assert garbage.timestamp is None

    def test_normalize_many_preserves_order(self):
        rows = [{"r": "B"}, {"r": "A"}, {"r": None}]
        records = normalize_many(rows, {"route": "r"}, {})

        assert [r.label("route") for r in records] == ["B", "A", UNKNOWN_LABEL]

    def test_undeclared_lookups_fall_back(self):
        record = MetricRecord(timestamp=None)
        assert record.label("anything") == UNKNOWN_LABEL
        assert record.measure("anything") == 0.0
