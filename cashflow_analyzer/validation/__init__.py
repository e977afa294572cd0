"""Validation package."""

from cashflow_analyzer.validation.validator import RecordValidator

__all__ = ["RecordValidator"]
