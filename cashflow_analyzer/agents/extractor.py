"""
Text Extraction Agent

DESIGN DECISION: The language model is a TRANSLATOR, not a CALCULATOR.
It turns free text into income and expense records. Every number in the
reports is computed afterwards by the deterministic aggregation engine.

CRITICAL BOUNDARIES:
- CAN: Identify income/expense lines and fill the fixed record schema
- CAN: Guess a category/sub-category from context
- CANNOT: Return partial data. Either the whole response validates
  against the schema or the extraction fails.
- CANNOT: Be retried into silently returning nothing. After the retry
  budget, the failure is raised to the caller.
"""

import json
from typing import Any, Optional

import google.generativeai as genai
import structlog
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from cashflow_analyzer.config import get_settings
from cashflow_analyzer.config.settings import AppSettings, GeminiSettings
from cashflow_analyzer.models.records import ExtractionResult


logger = structlog.get_logger(__name__)


class ExtractionError(Exception):
    """Base exception for extraction errors."""
    pass


class EmptyInputError(ExtractionError):
    """Nothing to analyze."""
    pass


class InputTooLongError(ExtractionError):
    """Input text exceeds the configured limit."""

    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(
            f"Input has {length} characters; the limit is {limit}"
        )


class ExtractionFailedError(ExtractionError):
    """The model call failed or returned unusable output."""
    pass


class SchemaValidationError(ExtractionFailedError):
    """The model answered, but the answer does not fit the record schema."""

    def __init__(self, message: str, errors: Optional[list[dict]] = None):
        self.errors = errors or []
        super().__init__(message)


EXTRACTION_PROMPT = """請分析以下文字，辨識出收入和支出項目：

收入分類包括：
- 生意收入：商品銷售收入、服務提供收入、二手設備出售、場地出租、合作分潤等
- 生活收入：薪資收入、租金收入、定期投資收益、退休金、政府補助、副業收入、臨時工作、利息收入、親友贈與等

支出分類包括：
- 生意支出：原料、包材、耗材、運費、租金、人事、水電、瓦斯、通訊、還款、設備添購、器材修繕、行銷廣告等
- 生活支出：住、電信、還款、保險、儲蓄、食、衣、行、育、樂、醫療等

生意支出的 expenseCategory 請填「固定支出」或「變動支出」；生活支出的 expenseCategory 請填上列的生活分類（例如「食」、「住」）。

請將辨識結果按照指定格式整理。如果某些資訊無法從文字中獲得，請合理推測或留空。

只回傳符合以下 JSON Schema 的 JSON 物件，不要加任何說明：
{schema}

文字內容：{text}
"""


def build_prompt(text: str) -> str:
    """Prompt for one extraction call; the schema comes from the models."""
    schema = json.dumps(
        ExtractionResult.model_json_schema(by_alias=True),
        ensure_ascii=False,
    )
    return EXTRACTION_PROMPT.format(schema=schema, text=text)


def check_input(text: str, limit: int) -> str:
    """Return the stripped text or raise if it cannot be analyzed."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise EmptyInputError("There is no text to analyze")
    if len(cleaned) > limit:
        raise InputTooLongError(len(cleaned), limit)
    return cleaned


def _strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [line for line in lines[1:] if not line.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


def parse_extraction(text: str) -> ExtractionResult:
    """
    Parse and validate the model's JSON answer.

    Raises:
        SchemaValidationError: If the text is not JSON or does not match
            the record schema. No partially valid result is ever returned.
    """
    cleaned = _strip_code_fences(text)
    try:
        data: Any = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise SchemaValidationError(f"Model response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SchemaValidationError(
            f"Model response must be a JSON object, got {type(data).__name__}"
        )

    try:
        return ExtractionResult.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "loc": ".".join(str(part) for part in error["loc"]),
                "msg": error["msg"],
            }
            for error in e.errors()
        ]
        raise SchemaValidationError(
            f"Model response does not match the record schema ({len(errors)} errors)",
            errors=errors,
        ) from e


class TextExtractionAgent:
    """
    Extracts income and expense records from free text with Gemini.

    RESPONSIBILITIES:
    - Guard the input (empty / too long)
    - Call the model with retries for transient failures
    - Validate the answer against the record schema

    BOUNDARIES:
    - NEVER computes totals
    - NEVER returns partially validated data
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        gemini_settings: Optional[GeminiSettings] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._app_settings = app_settings or get_settings().app
        if model is not None:
            self._model = model
            self._model_name = getattr(model, "model_name", "injected")
        else:
            self._settings = gemini_settings or get_settings().gemini
            self._configure_genai()
        self._logger = logger.bind(agent="extractor", model=self._model_name)

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model_name = self._settings.model_name
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
                "response_mime_type": "application/json",
            }
        )

    def check_input(self, text: str) -> str:
        return check_input(text, self._app_settings.max_input_chars)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _generate(self, prompt: str) -> str:
        response = await self._model.generate_content_async(prompt)
        # .text raises ValueError when the candidate was blocked
        return response.text

    async def extract(self, text: str) -> ExtractionResult:
        """
        Extract records from free text.

        Returns:
            ExtractionResult snapshot

        Raises:
            EmptyInputError / InputTooLongError: Before any model call
            ExtractionFailedError: If the model call fails after retries
            SchemaValidationError: If the answer does not fit the schema
        """
        cleaned = self.check_input(text)
        prompt = build_prompt(cleaned)

        self._logger.debug("extraction_started", text_length=len(cleaned))
        try:
            raw = await self._generate(prompt)
        except Exception as e:
            self._logger.warning("extraction_call_failed", error=str(e))
            raise ExtractionFailedError(f"Extraction call failed: {e}") from e

        result = parse_extraction(raw)
        self._logger.info(
            "extraction_completed",
            incomes=len(result.incomes),
            expenses=len(result.expenses),
        )
        return result
