"""Aggregation engine package."""

from cashflow_analyzer.analysis.accounts import (
    classify_status,
    compute_margin,
    estimate_emergency_fund,
    summarize_accounts,
)
from cashflow_analyzer.analysis.engine import analyze, analyze_extraction
from cashflow_analyzer.analysis.report import build_financial_report

__all__ = [
    "analyze",
    "analyze_extraction",
    "build_financial_report",
    "classify_status",
    "compute_margin",
    "estimate_emergency_fund",
    "summarize_accounts",
]
