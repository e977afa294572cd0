"""
Analysis Output Models

Everything the aggregation engine returns. These are the only types the
presentation layer and the text exporter consume.

All models are frozen: an analysis is a pure projection of one record
snapshot and is recomputed rather than updated.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


_FROZEN = ConfigDict(frozen=True)


# =============================================================================
# ENUMS
# =============================================================================

class FinancialStatus(str, Enum):
    """Three-level qualitative status of a signed balance."""
    DEFICIT = "deficit"
    NEAR_BREAK_EVEN = "near_break_even"
    SURPLUS = "surplus"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    FinancialStatus.DEFICIT: "入不敷出",
    FinancialStatus.NEAR_BREAK_EVEN: "接近打平",
    FinancialStatus.SURPLUS: "收支有餘",
}


class Trend(str, Enum):
    """Directional indicator shown next to a status."""
    DOWN = "down"
    FLAT = "flat"
    UP = "up"


class ReportSectionId(str, Enum):
    """Sections of the monthly report, in display order."""
    INCOME = "income"
    LIVING_EXPENSE = "living_expense"
    LOAN_EXPENSE = "loan_expense"
    BUSINESS_INCOME = "business_income"
    BUSINESS_EXPENSE = "business_expense"
    SUMMARY = "summary"


# =============================================================================
# ACCOUNT LEVEL
# =============================================================================

class StatusAssessment(BaseModel):
    """Status of one balance plus its trend indicator."""
    model_config = _FROZEN

    balance: float
    status: FinancialStatus
    trend: Trend

    @property
    def label(self) -> str:
        return self.status.label


class AccountSummary(BaseModel):
    """
    Business / personal split of one snapshot.

    total_income and total_expense cover every record, including records
    whose category carries neither marker. total_balance only covers the
    two marked accounts.
    """
    model_config = _FROZEN

    business_income: float
    personal_income: float
    business_expense: float
    personal_expense: float
    total_income: float
    total_expense: float

    business_balance: float
    personal_balance: float
    total_balance: float

    business_status: StatusAssessment
    personal_status: StatusAssessment
    total_status: StatusAssessment

    has_business_activity: bool

    @property
    def net_cash_flow(self) -> float:
        return self.total_income - self.total_expense


class MarginSummary(BaseModel):
    """Estimated cost of goods and gross margin of the business account."""
    model_config = _FROZEN

    business_cost: float
    gross_profit: float
    gross_margin_percent: float


class EmergencyFund(BaseModel):
    """Recommended reserve band: 3 to 6 periods of personal expense."""
    model_config = _FROZEN

    monthly_living_expense: float
    minimum: float = Field(description="3 × monthly living expense")
    maximum: float = Field(description="6 × monthly living expense")


# =============================================================================
# REPORT TREE
# =============================================================================

class ReportLine(BaseModel):
    """One bucket → amount line of the report."""
    model_config = _FROZEN

    bucket_id: str
    label: str
    amount: float


class ReportSection(BaseModel):
    """
    An ordered group of report lines with its total.

    `details` holds display-only breakdowns (the fixed subsidy split) that
    are not buckets of their own and never enter any total.
    """
    model_config = _FROZEN

    section_id: ReportSectionId
    title: str
    lines: tuple[ReportLine, ...]
    total: float
    details: tuple[ReportLine, ...] = ()

    def amount(self, bucket_id: str) -> float:
        """Amount of one bucket; KeyError if the section has no such bucket."""
        for line in self.lines:
            if line.bucket_id == bucket_id:
                return line.amount
        raise KeyError(bucket_id)

    def as_dict(self) -> dict[str, float]:
        return {line.bucket_id: line.amount for line in self.lines}


class FinancialReport(BaseModel):
    """
    The monthly report tree.

    Business sections are absent (not zero-filled) when the snapshot has
    no business activity.
    """
    model_config = _FROZEN

    sections: tuple[ReportSection, ...]
    has_business_activity: bool

    total_personal_income: float
    total_personal_expense: float
    total_loan_expense: float
    business_revenue: float
    total_business_expense: float

    grand_total_income: float
    grand_total_expense: float
    net: float

    def section(self, section_id: ReportSectionId) -> Optional[ReportSection]:
        for section in self.sections:
            if section.section_id == section_id:
                return section
        return None

    @property
    def section_ids(self) -> list[ReportSectionId]:
        return [section.section_id for section in self.sections]

    def as_dict(self) -> dict[str, dict[str, float]]:
        """Nested {section → {bucket → amount}} mapping."""
        return {
            section.section_id.value: section.as_dict()
            for section in self.sections
        }


class CashFlowAnalysis(BaseModel):
    """Everything the engine derives from one snapshot."""
    model_config = _FROZEN

    accounts: AccountSummary
    margin: MarginSummary
    emergency_fund: EmergencyFund
    report: FinancialReport
