"""Plain-text export package."""

from cashflow_analyzer.export.formatter import (
    format_amount,
    format_cash_flow_analysis,
    format_expense_table,
    format_income_table,
    format_monthly_report,
)

__all__ = [
    "format_amount",
    "format_cash_flow_analysis",
    "format_expense_table",
    "format_income_table",
    "format_monthly_report",
]
