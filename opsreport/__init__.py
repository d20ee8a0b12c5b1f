"""
Operations Reporting Engine

Rollups, aging/stock/compliance classification, derived ratios and
delimited-text export for manufacturing-operations reports.
"""

__version__ = "1.0.0"
