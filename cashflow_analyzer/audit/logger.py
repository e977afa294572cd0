"""
Audit Logger

DESIGN DECISION: Every analysis request is logged.
This provides:
1. Traceability from input text to report
2. Debugging capability when extraction fails
3. A record of the validation warnings the user was shown

The audit logger:
- Is async so the analysis flow can await it like any other step
- Writes structured logs only (there is no persistence layer)
- Supports correlation IDs to trace the events of one request
"""

import logging
import sys
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from cashflow_analyzer.config import get_settings
from cashflow_analyzer.models.audit import AuditEvent, AuditEventBuilder


# Recent events kept in memory per logger; the structured log is the record.
RECENT_EVENTS_LIMIT = 200


def configure_logging(
    level: Optional[str] = None,
    format: Optional[str] = None,
) -> None:
    """
    Configure stdlib logging and structlog for the whole application.

    Args:
        level: Log level name. Defaults to AppSettings.log_level.
        format: "json" or "console". Defaults to AppSettings.log_format.
    """
    app_settings = get_settings().app
    log_level = (level or app_settings.log_level).upper()
    log_format = format or app_settings.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level),
    )

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log, at the level matching their
    severity. Logging never raises into the analysis flow.
    """

    def __init__(self, max_recent_events: int = RECENT_EVENTS_LIMIT):
        self._logger = structlog.get_logger("cashflow_analyzer.audit")
        self._events: deque[AuditEvent] = deque(maxlen=max_recent_events)

    @property
    def events(self) -> list[AuditEvent]:
        """The most recent events logged by this instance, oldest first."""
        return list(self._events)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True once the event has been written.
        """
        self._events.append(event)
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        return True

    async def log_analysis_requested(
        self,
        text_length: int,
        correlation_id: UUID,
    ) -> None:
        """Log an incoming analysis request."""
        event = AuditEventBuilder.analysis_requested(
            text_length=text_length,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_input_rejected(
        self,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        """Log input rejected before any model call."""
        event = AuditEventBuilder.input_rejected(
            reason=reason,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_extraction_completed(
        self,
        income_count: int,
        expense_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a successful extraction."""
        event = AuditEventBuilder.extraction_completed(
            income_count=income_count,
            expense_count=expense_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_extraction_failed(
        self,
        stage: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log an extraction failure (model call or schema)."""
        event = AuditEventBuilder.extraction_failed(
            stage=stage,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_validation_warnings(
        self,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log semantic validation warnings."""
        event = AuditEventBuilder.validation_warnings(
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_analysis_completed(
        self,
        total_balance: float,
        status: str,
        has_business_activity: bool,
        correlation_id: Optional[UUID],
    ) -> None:
        """Log a finished aggregation."""
        event = AuditEventBuilder.analysis_completed(
            total_balance=total_balance,
            status=status,
            has_business_activity=has_business_activity,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_report_exported(
        self,
        report_kind: str,
        char_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a clipboard export."""
        event = AuditEventBuilder.report_exported(
            report_kind=report_kind,
            char_count=char_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log external service error."""
        event = AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new analysis request and pass it
    through all subsequent operations.
    """
    return uuid4()
