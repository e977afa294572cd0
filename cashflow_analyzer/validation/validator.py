"""
Snapshot Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION (in the extractor):
- Type checking, required fields, numeric fields
- Failure here is an extraction failure: the engine is never invoked

STAGE 2 - SEMANTIC REVIEW (here):
- subtotal that differs from unit price × quantity
- category that carries neither the business nor the personal marker
- negative amounts

IMPORTANT: Stage 2 NEVER fixes anything and NEVER blocks the analysis.
The aggregation rules absorb odd records (an unmarked category simply
drops out of the account split); the review only makes that visible.
"""

import math
from typing import Sequence

from cashflow_analyzer.analysis.rules import BUSINESS_MARKER, PERSONAL_MARKER, Record
from cashflow_analyzer.models.records import ExtractionResult
from cashflow_analyzer.models.validation import ValidationIssue, ValidationResult


# Relative tolerance when comparing subtotal with unit_price × quantity
SUBTOTAL_TOLERANCE = 0.01


class RecordValidator:
    """Semantic review of an extracted snapshot."""

    def validate(self, extraction: ExtractionResult) -> ValidationResult:
        issues = []
        issues += self._check_records("income", extraction.incomes)
        issues += self._check_records("expense", extraction.expenses)
        return ValidationResult(
            record_count=len(extraction.incomes) + len(extraction.expenses),
            issues=issues,
        )

    def _check_records(
        self,
        kind: str,
        records: Sequence[Record],
    ) -> list[ValidationIssue]:
        issues = []
        for index, record in enumerate(records):
            issues += self._check_category(kind, index, record)
            issues += self._check_amounts(kind, index, record)
        return issues

    def _check_category(self, kind, index, record) -> list[ValidationIssue]:
        has_business = BUSINESS_MARKER in record.category
        has_personal = PERSONAL_MARKER in record.category

        if not has_business and not has_personal:
            return [ValidationIssue(
                record_kind=kind,
                record_index=index,
                field="category",
                issue_type="unknown_category",
                message=(
                    f"Category '{record.category}' is neither business nor "
                    f"personal; the record only counts in the overall totals"
                ),
                severity="warning",
            )]
        if has_business and has_personal:
            return [ValidationIssue(
                record_kind=kind,
                record_index=index,
                field="category",
                issue_type="ambiguous_category",
                message=(
                    f"Category '{record.category}' matches both accounts "
                    f"and is counted in each"
                ),
                severity="warning",
            )]
        return []

    def _check_amounts(self, kind, index, record) -> list[ValidationIssue]:
        issues = []

        if record.subtotal < 0:
            issues.append(ValidationIssue(
                record_kind=kind,
                record_index=index,
                field="subtotal",
                issue_type="negative_amount",
                message=f"Subtotal is negative ({record.subtotal})",
                severity="warning",
                suggested_fix="Record refunds as a separate line with a positive amount",
            ))

        expected = record.unit_price * record.quantity
        if not math.isclose(
            record.subtotal, expected, rel_tol=SUBTOTAL_TOLERANCE, abs_tol=0.5
        ):
            issues.append(ValidationIssue(
                record_kind=kind,
                record_index=index,
                field="subtotal",
                issue_type="subtotal_mismatch",
                message=(
                    f"Subtotal {record.subtotal} differs from unit price × "
                    f"quantity ({expected}); the subtotal is used as-is"
                ),
                severity="warning",
            ))

        return issues

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Short message for the UI.

        Written for non-technical users.
        """
        if not result.issues:
            return "✅ All records look consistent."

        lines = [f"⚠️ {result.warning_count} record(s) need a second look:"]
        for issue in result.issues[:5]:
            lines.append(
                f"• {issue.record_kind} #{issue.record_index + 1}: {issue.message}"
            )
        if len(result.issues) > 5:
            lines.append(f"...and {len(result.issues) - 5} more")
        return "\n".join(lines)
