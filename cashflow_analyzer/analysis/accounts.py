"""
Account Classification, Status, Margin and Emergency Fund

Pure functions over a record snapshot. No I/O, no state: calling any of
them twice with the same sequences returns equal results.

DESIGN DECISION: Sums run over the records in the order the extractor
produced them, starting from 0.0. Floating point is acceptable here; a
fixed summation order keeps the results bit-for-bit reproducible.
"""

from typing import Sequence

from cashflow_analyzer.analysis.rules import (
    BUSINESS_ACCOUNT,
    BUSINESS_COST,
    PERSONAL_ACCOUNT,
    Record,
)
from cashflow_analyzer.models.analysis import (
    AccountSummary,
    EmergencyFund,
    FinancialStatus,
    MarginSummary,
    StatusAssessment,
    Trend,
)
from cashflow_analyzer.models.records import ExpenseRecord, IncomeRecord


# Absolute currency units; they do not scale with the size of the account.
DEFICIT_THRESHOLD = -5000.0
SURPLUS_THRESHOLD = 5000.0

EMERGENCY_FUND_MIN_MONTHS = 3
EMERGENCY_FUND_MAX_MONTHS = 6


def total_subtotal(records: Sequence[Record]) -> float:
    """Sum of every record's subtotal, markers ignored."""
    return sum((record.subtotal for record in records), 0.0)


def classify_status(balance: float) -> StatusAssessment:
    """
    Map a signed balance to a three-level status.

    Both bounds of the break-even band are inclusive:
    -5000 and 5000 are NEAR_BREAK_EVEN.
    """
    if balance < DEFICIT_THRESHOLD:
        status, trend = FinancialStatus.DEFICIT, Trend.DOWN
    elif balance <= SURPLUS_THRESHOLD:
        status, trend = FinancialStatus.NEAR_BREAK_EVEN, Trend.FLAT
    else:
        status, trend = FinancialStatus.SURPLUS, Trend.UP
    return StatusAssessment(balance=balance, status=status, trend=trend)


def summarize_accounts(
    incomes: Sequence[IncomeRecord],
    expenses: Sequence[ExpenseRecord],
) -> AccountSummary:
    """
    Split a snapshot into the business and personal accounts.

    A record belongs to an account when its category CONTAINS the marker.
    Records matching neither marker are left out of both accounts and of
    total_balance, but still count in total_income / total_expense.
    """
    business_income = BUSINESS_ACCOUNT.total(incomes)
    personal_income = PERSONAL_ACCOUNT.total(incomes)
    business_expense = BUSINESS_ACCOUNT.total(expenses)
    personal_expense = PERSONAL_ACCOUNT.total(expenses)

    business_balance = business_income - business_expense
    personal_balance = personal_income - personal_expense
    total_balance = (business_income + personal_income) - (
        business_expense + personal_expense
    )

    return AccountSummary(
        business_income=business_income,
        personal_income=personal_income,
        business_expense=business_expense,
        personal_expense=personal_expense,
        total_income=total_subtotal(incomes),
        total_expense=total_subtotal(expenses),
        business_balance=business_balance,
        personal_balance=personal_balance,
        total_balance=total_balance,
        business_status=classify_status(business_balance),
        personal_status=classify_status(personal_balance),
        total_status=classify_status(total_balance),
        has_business_activity=business_income > 0 or business_expense > 0,
    )


def compute_margin(
    expenses: Sequence[ExpenseRecord],
    business_income: float,
) -> MarginSummary:
    """
    Estimate cost of goods and the gross margin.

    Margin is defined as exactly 0 when there is no business income.
    """
    business_cost = BUSINESS_COST.total(expenses)
    gross_profit = business_income - business_cost
    if business_income > 0:
        gross_margin_percent = gross_profit / business_income * 100
    else:
        gross_margin_percent = 0.0

    return MarginSummary(
        business_cost=business_cost,
        gross_profit=gross_profit,
        gross_margin_percent=gross_margin_percent,
    )


def estimate_emergency_fund(personal_expense: float) -> EmergencyFund:
    """Reserve band of 3 to 6 periods of personal expense. No rounding."""
    return EmergencyFund(
        monthly_living_expense=personal_expense,
        minimum=personal_expense * EMERGENCY_FUND_MIN_MONTHS,
        maximum=personal_expense * EMERGENCY_FUND_MAX_MONTHS,
    )
