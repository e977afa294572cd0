"""
Audit Models for the Cash-Flow Analyzer

Every analysis request is logged for audit purposes:
1. Traceability of what was sent to the extractor and what came back
2. Debugging information when extraction fails
3. Ability to reconstruct why a report looks the way it does

DESIGN DECISION: Audit events are append-only and local (structured logs).
Nothing is persisted across sessions.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the text → report pipeline has its own event type.
    """
    # Request
    ANALYSIS_REQUESTED = "analysis_requested"
    INPUT_REJECTED = "input_rejected"

    # Extraction
    EXTRACTION_COMPLETED = "extraction_completed"
    EXTRACTION_FAILED = "extraction_failed"

    # Validation
    VALIDATION_WARNINGS = "validation_warnings"

    # Aggregation
    ANALYSIS_COMPLETED = "analysis_completed"
    REPORT_EXPORTED = "report_exported"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'request', 'extraction', 'report')"
    )

    # Correlation - all events of one analysis request share this
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one analysis request"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.analysis_requested(len(text), correlation_id)
        event = AuditEventBuilder.extraction_failed("schema", str(e), correlation_id)
    """

    @staticmethod
    def analysis_requested(
        text_length: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ANALYSIS_REQUESTED,
            entity_type="request",
            correlation_id=correlation_id,
            description=f"Analysis requested for {text_length} characters of text",
            details={"text_length": text_length},
            is_user_action=True,
        )

    @staticmethod
    def input_rejected(
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INPUT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="request",
            correlation_id=correlation_id,
            description=f"Input rejected: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def extraction_completed(
        income_count: int,
        expense_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_COMPLETED,
            entity_type="extraction",
            correlation_id=correlation_id,
            description=(
                f"Extraction returned {income_count} incomes "
                f"and {expense_count} expenses"
            ),
            details={
                "income_count": income_count,
                "expense_count": expense_count,
            },
        )

    @staticmethod
    def extraction_failed(
        stage: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="extraction",
            correlation_id=correlation_id,
            description=f"Extraction failed at stage: {stage}",
            error_message=error_message,
            details={"stage": stage},
        )

    @staticmethod
    def validation_warnings(
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_WARNINGS,
            severity=AuditSeverity.WARNING,
            entity_type="extraction",
            correlation_id=correlation_id,
            description=f"Extracted records have {len(issues)} validation warnings",
            details={"issues": issues},
        )

    @staticmethod
    def analysis_completed(
        total_balance: float,
        status: str,
        has_business_activity: bool,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ANALYSIS_COMPLETED,
            entity_type="report",
            correlation_id=correlation_id,
            description=f"Analysis completed: total balance {total_balance:,.2f} ({status})",
            details={
                "total_balance": total_balance,
                "status": status,
                "has_business_activity": has_business_activity,
            },
        )

    @staticmethod
    def report_exported(
        report_kind: str,
        char_count: int,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_EXPORTED,
            entity_type="report",
            correlation_id=correlation_id,
            description=f"Report exported as text: {report_kind}",
            details={
                "report_kind": report_kind,
                "char_count": char_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={"service": service},
            correlation_id=correlation_id,
        )
