"""
Data Models Package

This package contains all Pydantic models used in the Cash-Flow Analyzer.
All data flowing through the system must conform to these schemas.
"""

from cashflow_analyzer.models.records import (
    ExpenseRecord,
    ExtractionResult,
    IncomeRecord,
)
from cashflow_analyzer.models.analysis import (
    AccountSummary,
    CashFlowAnalysis,
    EmergencyFund,
    FinancialReport,
    FinancialStatus,
    MarginSummary,
    ReportLine,
    ReportSection,
    ReportSectionId,
    StatusAssessment,
    Trend,
)
from cashflow_analyzer.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from cashflow_analyzer.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "ExpenseRecord",
    "ExtractionResult",
    "IncomeRecord",
    # Analysis models
    "AccountSummary",
    "CashFlowAnalysis",
    "EmergencyFund",
    "FinancialReport",
    "FinancialStatus",
    "MarginSummary",
    "ReportLine",
    "ReportSection",
    "ReportSectionId",
    "StatusAssessment",
    "Trend",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
