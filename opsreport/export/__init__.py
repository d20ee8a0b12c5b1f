"""
Export Module
"""
from .delimited import format_cell, quote_field, rollup_table, to_delimited_text

__all__ = ["format_cell", "quote_field", "rollup_table", "to_delimited_text"]
