"""
Monthly Report Assembly

Builds the nested income / expense breakdown of the "財務月報表" view.
This is independent of the simpler business/personal split in
`accounts.py`: the buckets here look at `type`, `expense_category` and
`description`, not only at `category`.

DESIGN DECISION: Totals are sums of BUCKETS, not of distinct records.
A record whose text matches two buckets is counted twice in the living
expense total. This mirrors how the report has always been computed;
callers must not assume the buckets partition the records, except for
"other income" and "other loan" which exclude the other markers explicitly.
"""

import math
from typing import Sequence

from cashflow_analyzer.analysis.rules import (
    BUSINESS_EXPENSE_RULES,
    BUSINESS_FIXED,
    BUSINESS_REVENUE,
    BUSINESS_VARIABLE,
    INCOME_RULES,
    LIVING_EXPENSE_RULES,
    LOAN_EXPENSE_RULES,
    SUBSIDY_SPLIT,
    BucketRule,
    Record,
)
from cashflow_analyzer.models.analysis import (
    FinancialReport,
    ReportLine,
    ReportSection,
    ReportSectionId,
)
from cashflow_analyzer.models.records import ExpenseRecord, IncomeRecord


SECTION_TITLES = {
    ReportSectionId.INCOME: "家庭收入",
    ReportSectionId.LIVING_EXPENSE: "生活支出",
    ReportSectionId.LOAN_EXPENSE: "貸款支出",
    ReportSectionId.BUSINESS_INCOME: "營業收入",
    ReportSectionId.BUSINESS_EXPENSE: "營業支出",
    ReportSectionId.SUMMARY: "收支總結",
}


def evaluate_rules(
    rules: Sequence[BucketRule],
    records: Sequence[Record],
) -> tuple[ReportLine, ...]:
    """Evaluate every rule independently; one line per rule, in rule order."""
    return tuple(
        ReportLine(
            bucket_id=rule.bucket_id,
            label=rule.label,
            amount=rule.total(records),
        )
        for rule in rules
    )


def _sum_lines(lines: Sequence[ReportLine]) -> float:
    return sum((line.amount for line in lines), 0.0)


def _floor_share(total: float, share: float) -> float:
    amount = total * share
    # An overflowed sum stays inf / nan; only finite amounts are floored
    if not math.isfinite(amount):
        return amount
    return float(math.floor(amount))


def _subsidy_details(subsidy_total: float) -> tuple[ReportLine, ...]:
    # Fixed proportions floored to whole units, as displayed
    return tuple(
        ReportLine(
            bucket_id=bucket_id,
            label=label,
            amount=_floor_share(subsidy_total, share),
        )
        for bucket_id, label, share in SUBSIDY_SPLIT
    )


def _section(
    section_id: ReportSectionId,
    lines: tuple[ReportLine, ...],
    total: float,
    details: tuple[ReportLine, ...] = (),
) -> ReportSection:
    return ReportSection(
        section_id=section_id,
        title=SECTION_TITLES[section_id],
        lines=lines,
        total=total,
        details=details,
    )


def build_financial_report(
    incomes: Sequence[IncomeRecord],
    expenses: Sequence[ExpenseRecord],
    has_business_activity: bool,
) -> FinancialReport:
    """
    Assemble the report tree.

    Args:
        incomes: Income snapshot, in extractor order
        expenses: Expense snapshot, in extractor order
        has_business_activity: Flag from the account split. When False the
            business sections are left out entirely and business amounts do
            not enter the summary.
    """
    income_lines = evaluate_rules(INCOME_RULES, incomes)
    living_lines = evaluate_rules(LIVING_EXPENSE_RULES, expenses)
    loan_lines = evaluate_rules(LOAN_EXPENSE_RULES, expenses)

    total_personal_income = _sum_lines(income_lines)
    total_personal_expense = _sum_lines(living_lines)
    total_loan_expense = _sum_lines(loan_lines)

    subsidy_total = next(
        line.amount for line in income_lines if line.bucket_id == "subsidy"
    )

    sections = [
        _section(
            ReportSectionId.INCOME,
            income_lines,
            total_personal_income,
            details=_subsidy_details(subsidy_total),
        ),
        _section(ReportSectionId.LIVING_EXPENSE, living_lines, total_personal_expense),
        _section(ReportSectionId.LOAN_EXPENSE, loan_lines, total_loan_expense),
    ]

    business_revenue = BUSINESS_REVENUE.total(incomes)
    # The detailed business buckets are views over the same records;
    # only fixed + variable make up the business expense total.
    total_business_expense = BUSINESS_FIXED.total(expenses) + BUSINESS_VARIABLE.total(expenses)

    grand_total_income = total_personal_income
    grand_total_expense = total_personal_expense + total_loan_expense

    if has_business_activity:
        revenue_lines = evaluate_rules((BUSINESS_REVENUE,), incomes)
        business_lines = evaluate_rules(BUSINESS_EXPENSE_RULES, expenses)
        sections.append(
            _section(ReportSectionId.BUSINESS_INCOME, revenue_lines, business_revenue)
        )
        sections.append(
            _section(ReportSectionId.BUSINESS_EXPENSE, business_lines, total_business_expense)
        )
        grand_total_income += business_revenue
        grand_total_expense += total_business_expense

    net = grand_total_income - grand_total_expense

    sections.append(
        _section(
            ReportSectionId.SUMMARY,
            (
                ReportLine(bucket_id="total_income", label="總收入", amount=grand_total_income),
                ReportLine(bucket_id="total_expense", label="總支出", amount=grand_total_expense),
                ReportLine(bucket_id="net", label="淨收支", amount=net),
            ),
            net,
        )
    )

    return FinancialReport(
        sections=tuple(sections),
        has_business_activity=has_business_activity,
        total_personal_income=total_personal_income,
        total_personal_expense=total_personal_expense,
        total_loan_expense=total_loan_expense,
        business_revenue=business_revenue,
        total_business_expense=total_business_expense,
        grand_total_income=grand_total_income,
        grand_total_expense=grand_total_expense,
        net=net,
    )
