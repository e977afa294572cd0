"""
Plain-Text Export

Stateless formatters that turn engine output into clipboard text.
They read ONLY the analysis models (and, for the detail tables, the
record snapshot). They never compute a bucket themselves.

The output is a golden-test target: labels, field order, separators and
number formatting must stay byte-stable for identical input.
"""

import math
from itertools import zip_longest
from typing import Optional, Sequence

from cashflow_analyzer.models.analysis import (
    CashFlowAnalysis,
    FinancialReport,
    ReportLine,
    ReportSection,
    ReportSectionId,
)
from cashflow_analyzer.models.records import ExpenseRecord, IncomeRecord


COLUMN_GAP = "\t\t"

INCOME_TABLE_HEADERS = (
    "日期", "天氣", "來客數", "分類", "類別", "收入內容/說明",
    "單價", "數量", "收款狀況", "小計", "客戶記錄/備註",
)
EXPENSE_TABLE_HEADERS = (
    "日期", "分類", "支出分類", "類別", "支出內容", "單價", "數量", "小計",
)

# Two-column rows of the business expense block
BUSINESS_EXPENSE_LAYOUT: tuple[tuple[str, Optional[str]], ...] = (
    ("business_fixed", "business_variable"),
    ("rent", "purchasing"),
    ("utilities", "raw_materials"),
    ("payroll", "marketing"),
    ("equipment", None),
)


# =============================================================================
# NUMBER FORMATTING
# =============================================================================

def format_amount(value: float) -> str:
    """
    Thousands separators, at most three fraction digits, no trailing zeros.

    12000.0 → "12,000"; 1234.5 → "1,234.5"; -0.0 → "0".
    """
    if not math.isfinite(value):
        return str(value)
    rounded = round(value, 3)
    if rounded == int(rounded):
        return f"{int(rounded):,}"
    return f"{rounded:,.3f}".rstrip("0").rstrip(".")


def format_plain_number(value: Optional[float]) -> str:
    """Number as typed into a spreadsheet cell: no separators."""
    if value is None:
        return ""
    if not math.isfinite(value):
        return str(float(value))
    if float(value) == int(value):
        return str(int(value))
    return repr(float(value))


def _line(line: ReportLine) -> str:
    return f"{line.label}: {format_amount(line.amount)}"


# =============================================================================
# MONTHLY REPORT (財務月報表)
# =============================================================================

def _two_columns(left: Sequence[str], right: Sequence[str]) -> list[str]:
    rows = []
    for left_cell, right_cell in zip_longest(left, right):
        if right_cell is None:
            rows.append(left_cell)
        elif left_cell is None:
            rows.append(f"{COLUMN_GAP}{right_cell}")
        else:
            rows.append(f"{left_cell}{COLUMN_GAP}{right_cell}")
    return rows


def _income_block(section: ReportSection) -> list[str]:
    left = [_line(line) for line in section.lines]
    right = ["補助或津貼如下"] + [_line(line) for line in section.details]
    rows = [f"{section.title}:"]
    rows += _two_columns(left, right)
    rows.append(f"總收入: {format_amount(section.total)}")
    return rows


def _expense_block(living: ReportSection, loan: ReportSection) -> list[str]:
    rows = ["支出:"]
    rows += _two_columns(
        [_line(line) for line in living.lines],
        [_line(line) for line in loan.lines],
    )
    rows.append(
        f"{living.title}: {format_amount(living.total)}"
        f"{COLUMN_GAP}{loan.title}: {format_amount(loan.total)}"
        f"{COLUMN_GAP}總支出: {format_amount(living.total + loan.total)}"
    )
    return rows


def _business_blocks(revenue: ReportSection, expense: ReportSection) -> list[str]:
    rows = [f"{revenue.title}:"]
    rows += [_line(line) for line in revenue.lines]
    rows.append("")
    rows.append(f"{expense.title}:")
    by_id = {line.bucket_id: line for line in expense.lines}
    for left_id, right_id in BUSINESS_EXPENSE_LAYOUT:
        row = _line(by_id[left_id])
        if right_id is not None:
            row += COLUMN_GAP + _line(by_id[right_id])
        rows.append(row)
    rows.append(f"總營業支出: {format_amount(expense.total)}")
    return rows


def format_monthly_report(report: FinancialReport) -> str:
    """
    Serialize the report tree for the clipboard.

    Business blocks appear only when the report has them.
    """
    income = report.section(ReportSectionId.INCOME)
    living = report.section(ReportSectionId.LIVING_EXPENSE)
    loan = report.section(ReportSectionId.LOAN_EXPENSE)
    summary = report.section(ReportSectionId.SUMMARY)

    rows = ["財務月報表", ""]
    rows += _income_block(income)
    rows.append("")
    rows += _expense_block(living, loan)
    rows.append("")

    business_income = report.section(ReportSectionId.BUSINESS_INCOME)
    business_expense = report.section(ReportSectionId.BUSINESS_EXPENSE)
    if business_income is not None and business_expense is not None:
        rows += _business_blocks(business_income, business_expense)
        rows.append("")

    rows.append(f"{summary.title}:")
    rows += [_line(line) for line in summary.lines]

    return "\n".join(rows) + "\n"


# =============================================================================
# CASH FLOW ANALYSIS (財務分析報告)
# =============================================================================

def _money(value: float) -> str:
    return f"${format_amount(value)}"


def format_cash_flow_analysis(analysis: CashFlowAnalysis) -> str:
    """Serialize the account split, margin and emergency fund."""
    accounts = analysis.accounts
    margin = analysis.margin
    fund = analysis.emergency_fund

    rows = ["財務分析報告", ""]

    rows += [
        "現金流分析",
        f"總收入: {_money(accounts.total_income)}",
        f"總支出: {_money(accounts.total_expense)}",
        f"淨現金流: {_money(accounts.net_cash_flow)}",
        f"總帳: {_money(accounts.total_balance)} ({accounts.total_status.label})",
        "",
    ]

    if accounts.has_business_activity:
        rows += [
            "營業分析",
            f"營業收入: {_money(accounts.business_income)}",
            f"營業支出: {_money(accounts.business_expense)}",
            f"營業淨利: {_money(accounts.business_balance)} ({accounts.business_status.label})",
            f"營業成本: {_money(margin.business_cost)}",
            f"毛利: {_money(margin.gross_profit)}",
            f"毛利率: {margin.gross_margin_percent:.2f}%",
            "",
        ]

    rows += [
        "生活收支分析",
        f"生活收入: {_money(accounts.personal_income)}",
        f"生活支出: {_money(accounts.personal_expense)}",
        f"生活淨收支: {_money(accounts.personal_balance)} ({accounts.personal_status.label})",
        "",
        "緊急預備金建議",
        f"最低建議(3個月): {_money(fund.minimum)}",
        f"理想目標(6個月): {_money(fund.maximum)}",
    ]

    return "\n".join(rows) + "\n"


# =============================================================================
# DETAIL TABLES (TSV)
# =============================================================================

def _tsv(rows: Sequence[Sequence[str]]) -> str:
    return "\n".join("\t".join(row) for row in rows)


def format_income_table(incomes: Sequence[IncomeRecord]) -> str:
    """Tab-separated income detail table with a trailing 總計 row."""
    rows = [list(INCOME_TABLE_HEADERS)]
    total = 0.0
    for income in incomes:
        total += income.subtotal
        rows.append([
            income.date,
            income.weather or "",
            "" if income.customer_count is None else str(income.customer_count),
            income.category,
            income.type,
            income.description,
            format_plain_number(income.unit_price),
            format_plain_number(income.quantity),
            income.payment_status,
            format_plain_number(income.subtotal),
            income.customer_note or "",
        ])
    rows.append(["總計"] + [""] * 8 + [format_plain_number(total), ""])
    return _tsv(rows)


def format_expense_table(expenses: Sequence[ExpenseRecord]) -> str:
    """Tab-separated expense detail table with a trailing 總計 row."""
    rows = [list(EXPENSE_TABLE_HEADERS)]
    total = 0.0
    for expense in expenses:
        total += expense.subtotal
        rows.append([
            expense.date,
            expense.category,
            expense.expense_category,
            expense.type,
            expense.description,
            format_plain_number(expense.unit_price),
            format_plain_number(expense.quantity),
            format_plain_number(expense.subtotal),
        ])
    rows.append(["總計"] + [""] * 6 + [format_plain_number(total)])
    return _tsv(rows)
