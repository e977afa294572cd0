"""
Main Orchestrator for the Cash-Flow Analyzer

This module ties together all the components and defines the
end-to-end flow:

    text → extract (LLM) → validate → aggregate (pure) → export

DESIGN DECISION: The orchestrator enforces the boundaries:
- The engine only ever sees a schema-valid snapshot
- A failed extraction never replaces a previous good result
- Every step is audited
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from cashflow_analyzer.agents import (
    EmptyInputError,
    ExtractionError,
    ExtractionFailedError,
    InputTooLongError,
    SchemaValidationError,
    TextExtractionAgent,
    check_input,
)
from cashflow_analyzer.analysis import analyze_extraction
from cashflow_analyzer.audit import AuditLogger, create_correlation_id
from cashflow_analyzer.config import get_settings
from cashflow_analyzer.demo import demo_extraction
from cashflow_analyzer.export import (
    format_cash_flow_analysis,
    format_expense_table,
    format_income_table,
    format_monthly_report,
)
from cashflow_analyzer.models.analysis import CashFlowAnalysis
from cashflow_analyzer.models.records import ExtractionResult
from cashflow_analyzer.models.validation import ValidationResult
from cashflow_analyzer.validation import RecordValidator


EXPORT_KINDS = (
    "monthly_report",
    "cash_flow_analysis",
    "income_table",
    "expense_table",
)


class AnalysisResult(BaseModel):
    """One completed analysis: the snapshot and everything derived from it."""
    model_config = ConfigDict(frozen=True)

    correlation_id: Optional[UUID] = None
    source: str
    extraction: ExtractionResult
    validation: ValidationResult
    analysis: CashFlowAnalysis

    def export_text(self, kind: str) -> str:
        """Clipboard text for one of EXPORT_KINDS."""
        if kind == "monthly_report":
            return format_monthly_report(self.analysis.report)
        if kind == "cash_flow_analysis":
            return format_cash_flow_analysis(self.analysis)
        if kind == "income_table":
            return format_income_table(self.extraction.incomes)
        if kind == "expense_table":
            return format_expense_table(self.extraction.expenses)
        raise ValueError(f"Unknown export kind: {kind}. Expected one of {EXPORT_KINDS}")


class AnalysisFlow:
    """
    Orchestrates one analysis request.

    Flow:
    1. Request → audit, correlation id
    2. Extract → LLM returns records (schema-validated)
    3. Validate → semantic warnings, never blocking
    4. Aggregate → pure engine
    """

    def __init__(
        self,
        extractor: Optional[TextExtractionAgent] = None,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        # The extractor needs a Gemini key; create it only when text
        # analysis is actually requested.
        self._extractor = extractor
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def _get_extractor(self) -> TextExtractionAgent:
        if self._extractor is None:
            try:
                self._extractor = TextExtractionAgent()
            except ValueError as e:
                raise ExtractionFailedError(
                    f"Gemini is not configured: {e}"
                ) from e
        return self._extractor

    async def analyze_text(
        self,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> AnalysisResult:
        """
        Analyze free text end to end.

        Raises:
            ExtractionError: On any extraction failure. The aggregation
                engine is not invoked in that case.
        """
        correlation_id = correlation_id or create_correlation_id()
        await self._audit_logger.log_analysis_requested(
            text_length=len(text or ""),
            correlation_id=correlation_id,
        )

        try:
            if self._extractor is None:
                # Reject bad input before the extractor needs a Gemini key
                check_input(text, get_settings().app.max_input_chars)
            extractor = self._get_extractor()
            extraction = await extractor.extract(text)
        except (EmptyInputError, InputTooLongError) as e:
            await self._audit_logger.log_input_rejected(
                reason=str(e),
                correlation_id=correlation_id,
            )
            raise
        except SchemaValidationError as e:
            await self._audit_logger.log_extraction_failed(
                stage="schema",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise
        except ExtractionFailedError as e:
            await self._audit_logger.log_external_service_error(
                service="gemini",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            await self._audit_logger.log_extraction_failed(
                stage="model_call",
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        await self._audit_logger.log_extraction_completed(
            income_count=len(extraction.incomes),
            expense_count=len(extraction.expenses),
            correlation_id=correlation_id,
        )

        return await self.analyze_records(
            extraction,
            correlation_id=correlation_id,
            source="text",
        )

    async def analyze_records(
        self,
        extraction: ExtractionResult,
        correlation_id: Optional[UUID] = None,
        source: str = "records",
    ) -> AnalysisResult:
        """Validate and aggregate an existing snapshot."""
        correlation_id = correlation_id or create_correlation_id()
        validation = self._validator.validate(extraction)
        if validation.issues:
            await self._audit_logger.log_validation_warnings(
                issues=[issue.to_log_dict() for issue in validation.issues],
                correlation_id=correlation_id,
            )

        analysis = analyze_extraction(extraction)

        await self._audit_logger.log_analysis_completed(
            total_balance=analysis.accounts.total_balance,
            status=analysis.accounts.total_status.status.value,
            has_business_activity=analysis.accounts.has_business_activity,
            correlation_id=correlation_id,
        )

        return AnalysisResult(
            correlation_id=correlation_id,
            source=source,
            extraction=extraction,
            validation=validation,
            analysis=analysis,
        )

    async def export(self, result: AnalysisResult, kind: str) -> str:
        """Produce clipboard text and audit the export."""
        text = result.export_text(kind)
        await self._audit_logger.log_report_exported(
            report_kind=kind,
            char_count=len(text),
            correlation_id=result.correlation_id,
        )
        return text


class AnalysisSession:
    """
    Holds the latest good analysis for one user session.

    CRITICAL: A failed request leaves `current` untouched. A stale but
    valid report is preferred over a partial update.
    """

    def __init__(self, flow: AnalysisFlow):
        self._flow = flow
        self._current: Optional[AnalysisResult] = None
        self.last_error: Optional[str] = None

    @property
    def current(self) -> Optional[AnalysisResult]:
        return self._current

    @property
    def flow(self) -> AnalysisFlow:
        return self._flow

    async def analyze_text(self, text: str) -> AnalysisResult:
        try:
            result = await self._flow.analyze_text(text)
        except ExtractionError as e:
            self.last_error = str(e)
            raise
        self._current = result
        self.last_error = None
        return result

    async def load_demo(self) -> AnalysisResult:
        result = await self._flow.analyze_records(demo_extraction(), source="demo")
        self._current = result
        self.last_error = None
        return result


def create_app_components() -> tuple[AnalysisFlow, AnalysisSession]:
    """
    Factory function to create the application components.

    Returns:
        (analysis_flow, analysis_session)
    """
    flow = AnalysisFlow(audit_logger=AuditLogger())
    return flow, AnalysisSession(flow)
