"""
Aggregation Engine

DESIGN DECISION: The engine is a PURE function of the record snapshot.
The extractor (LLM) produces records; this module only sums them.
At no point does the language model compute a number that ends up in
a report.

The engine:
- never mutates its inputs
- never re-validates types (the snapshot is already schema-valid)
- never raises for well-typed input (division by zero is defined as 0)
- returns equal results for equal inputs, so it is safe to recompute on
  every render
"""

from typing import Sequence

from cashflow_analyzer.analysis.accounts import (
    compute_margin,
    estimate_emergency_fund,
    summarize_accounts,
)
from cashflow_analyzer.analysis.report import build_financial_report
from cashflow_analyzer.models.analysis import CashFlowAnalysis
from cashflow_analyzer.models.records import (
    ExpenseRecord,
    ExtractionResult,
    IncomeRecord,
)


def analyze(
    incomes: Sequence[IncomeRecord],
    expenses: Sequence[ExpenseRecord],
) -> CashFlowAnalysis:
    """Run the full aggregation over one snapshot."""
    accounts = summarize_accounts(incomes, expenses)
    margin = compute_margin(expenses, accounts.business_income)
    emergency_fund = estimate_emergency_fund(accounts.personal_expense)
    report = build_financial_report(
        incomes,
        expenses,
        has_business_activity=accounts.has_business_activity,
    )

    return CashFlowAnalysis(
        accounts=accounts,
        margin=margin,
        emergency_fund=emergency_fund,
        report=report,
    )


def analyze_extraction(extraction: ExtractionResult) -> CashFlowAnalysis:
    """Convenience wrapper over `analyze` for an extractor snapshot."""
    return analyze(extraction.incomes, extraction.expenses)
