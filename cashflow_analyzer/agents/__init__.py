"""AI Agents package."""

from cashflow_analyzer.agents.extractor import (
    EmptyInputError,
    ExtractionError,
    ExtractionFailedError,
    InputTooLongError,
    SchemaValidationError,
    TextExtractionAgent,
    build_prompt,
    check_input,
    parse_extraction,
)

__all__ = [
    "EmptyInputError",
    "ExtractionError",
    "ExtractionFailedError",
    "InputTooLongError",
    "SchemaValidationError",
    "TextExtractionAgent",
    "build_prompt",
    "check_input",
    "parse_extraction",
]
