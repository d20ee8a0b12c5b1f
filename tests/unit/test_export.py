"""
Unit Tests - Delimited Text Export
"""
from datetime import date

import pytest

from opsreport.aggregation import UNDEFINED, GroupRollup
from opsreport.classification import AgingBucket
from opsreport.export import format_cell, quote_field, rollup_table, to_delimited_text


class TestToDelimitedText:
    """Tests for to_delimited_text"""

    def test_quotes_fields_with_delimiter(self):
        text = to_delimited_text(["Name", "Weight"], [["Acme, Inc.", "10"], ["Beta", "20"]])
        assert text == 'Name,Weight\n"Acme, Inc.",10\nBeta,20\n'

    def test_empty_rows(self):
        assert to_delimited_text(["Date", "Route", "Weight"], []) == "Date,Route,Weight\n"

    def test_internal_quotes_are_doubled(self):
        text = to_delimited_text(["Note"], [['Driver said "late"']])
        assert text == 'Note\n"Driver said ""late"""\n'

    def test_newlines_are_quoted(self):
        text = to_delimited_text(["Note"], [["line one\nline two"]])
        assert text == 'Note\n"line one\nline two"\n'

    def test_carriage_returns_are_quoted(self):
        assert to_delimited_text(["Note"], [["a\rb"]]) == 'Note\n"a\rb"\n'
        assert to_delimited_text(["Note"], [["a\r\nb"]]) == 'Note\n"a\r\nb"\n'

    def test_empty_cells_are_not_quoted(self):
        assert to_delimited_text(["Note"], [[None], [""]]) == "Note\n\n\n"
        assert to_delimited_text(["A", "B"], [[None, ""]]) == "A,B\n,\n"

    def test_row_order_is_kept(self):
        text = to_delimited_text(["K"], [["b"], ["a"], ["c"]])
        assert text.splitlines() == ["K", "b", "a", "c"]

    def test_single_trailing_newline(self):
        text = to_delimited_text(["K"], [["a"]])
        assert text.endswith("a\n")
        assert not text.endswith("\n\n")

    def test_other_delimiter(self):
        text = to_delimited_text(["Name", "Amount"], [["A;B", 5]], delimiter=";")
        assert text == 'Name;Amount\n"A;B";5\n'

    def test_typed_values(self):
        text = to_delimited_text(
            ["Date", "Bucket", "Amount", "Ratio"],
            [[date(2024, 1, 5), AgingBucket.OVER_90, 1250.0, UNDEFINED]],
        )
        assert text == f"Date,Bucket,Amount,Ratio\n2024-01-05,90+ Days,1250,{UNDEFINED}\n"


class TestQuoteField:
    """Tests for quote_field"""

    @pytest.mark.parametrize("text,expected", [
        ("plain", "plain"),
        ("", ""),
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("a\rb", '"a\rb"'),
        ("a\nb", '"a\nb"'),
    ])
    def test_quote_field(self, text, expected):
        assert quote_field(text) == expected

    def test_uses_given_delimiter(self):
        assert quote_field("a,b", delimiter=";") == "a,b"
        assert quote_field("a;b", delimiter=";") == '"a;b"'


class TestFormatCell:
    """Tests for format_cell"""

    @pytest.mark.parametrize("value,expected", [
        (None, ""),
        (10, "10"),
        (10.0, "10"),
        (2.5, "2.5"),
        (3.14159, "3.14"),
        (1 / 3, "0.33"),
        (True, "true"),
        (date(2024, 2, 29), "2024-02-29"),
        (AgingBucket.CURRENT, "Current"),
        ("text", "text"),
    ])
    def test_format_cell(self, value, expected):
        assert format_cell(value) == expected


class TestRollupTable:
    """Tests for rollup_table"""

    def test_columns_resolve_totals_ratios_and_count(self):
        rollups = [
            GroupRollup("North", 2, {"weight": 250.0}, {"per_km": 2.5}),
            GroupRollup("Depot", 1, {"weight": 40.0}, {"per_km": UNDEFINED}),
        ]
        headers, rows = rollup_table(
            rollups,
            "Route",
            [("Trips", "count"), ("Weight", "weight"), ("Weight/km", "per_km")],
        )

        assert headers == ["Route", "Trips", "Weight", "Weight/km"]
        assert rows == [["North", "2", "250", "2.5"], ["Depot", "1", "40", UNDEFINED]]
