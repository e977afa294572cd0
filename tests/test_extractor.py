"""Tests for the text extraction agent (language model mocked)."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from tenacity import wait_none

from cashflow_analyzer.agents import (
    EmptyInputError,
    ExtractionFailedError,
    InputTooLongError,
    SchemaValidationError,
    TextExtractionAgent,
    build_prompt,
    parse_extraction,
)
from cashflow_analyzer.config.settings import AppSettings
from cashflow_analyzer.demo import DEMO_RECORDS


def model_returning(*answers):
    """A Gemini model stand-in whose calls return or raise in turn."""
    effects = [
        answer if isinstance(answer, Exception) else SimpleNamespace(text=answer)
        for answer in answers
    ]
    model = MagicMock()
    model.model_name = "test-model"
    model.generate_content_async = AsyncMock(side_effect=effects)
    return model


@pytest.fixture
def no_retry_wait(monkeypatch):
    """Retry immediately instead of backing off."""
    monkeypatch.setattr(TextExtractionAgent._generate.retry, "wait", wait_none())


class TestParseExtraction:
    """Tests for validating the model's answer."""

    def test_parses_demo_records(self):
        """Test that a well-formed answer becomes a snapshot."""
        result = parse_extraction(json.dumps(DEMO_RECORDS, ensure_ascii=False))
        assert len(result.incomes) == 4
        assert len(result.expenses) == 14

    def test_strips_code_fences(self):
        """Test that a markdown-fenced answer is accepted."""
        answer = "```json\n" + json.dumps(DEMO_RECORDS, ensure_ascii=False) + "\n```"
        assert len(parse_extraction(answer).incomes) == 4

    def test_missing_lists_default_to_empty(self):
        """Test that an answer with no records is an empty snapshot."""
        assert parse_extraction("{}").is_empty

    def test_rejects_invalid_json(self):
        """Test that prose instead of JSON is a schema failure."""
        with pytest.raises(SchemaValidationError):
            parse_extraction("Sure! Here are your records:")

    def test_rejects_non_object(self):
        """Test that a bare list is a schema failure."""
        with pytest.raises(SchemaValidationError):
            parse_extraction("[]")

    def test_rejects_partial_records(self):
        """Test that one bad record fails the whole answer."""
        data = json.loads(json.dumps(DEMO_RECORDS))
        del data["expenses"][5]["subtotal"]
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_extraction(json.dumps(data))
        assert exc_info.value.errors
        assert exc_info.value.errors[0]["loc"].startswith("expenses.5")

    def test_rejects_text_amount(self):
        """Test that a non-numeric amount is a schema failure."""
        data = json.loads(json.dumps(DEMO_RECORDS))
        data["incomes"][0]["subtotal"] = "九千六"
        with pytest.raises(SchemaValidationError):
            parse_extraction(json.dumps(data))


class TestBuildPrompt:
    """Tests for the extraction prompt."""

    def test_prompt_contains_text_and_schema(self):
        """Test that the prompt embeds the text and the camelCase schema."""
        prompt = build_prompt("今天賣出咖啡")
        assert "今天賣出咖啡" in prompt
        assert "expenseCategory" in prompt
        assert "paymentStatus" in prompt


class TestTextExtractionAgent:
    """Tests for the agent with a mocked model."""

    @pytest.mark.asyncio
    async def test_extract(self):
        """Test a successful extraction."""
        model = model_returning(json.dumps(DEMO_RECORDS, ensure_ascii=False))
        agent = TextExtractionAgent(model=model)

        result = await agent.extract("咖啡店的一天")

        assert len(result.expenses) == 14
        model.generate_content_async.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_input_never_calls_model(self):
        """Test that blank text is rejected before the model call."""
        model = model_returning("{}")
        agent = TextExtractionAgent(model=model)

        with pytest.raises(EmptyInputError):
            await agent.extract("   \n ")
        model.generate_content_async.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_too_long_input(self):
        """Test that text over the limit is rejected."""
        model = model_returning("{}")
        agent = TextExtractionAgent(
            model=model,
            app_settings=AppSettings(max_input_chars=100),
        )

        with pytest.raises(InputTooLongError) as exc_info:
            await agent.extract("咖" * 101)
        assert exc_info.value.limit == 100
        model.generate_content_async.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_transient_failures(self, no_retry_wait):
        """Test that a failed call is retried and can then succeed."""
        model = model_returning(
            RuntimeError("503 unavailable"),
            json.dumps(DEMO_RECORDS, ensure_ascii=False),
        )
        agent = TextExtractionAgent(model=model)

        result = await agent.extract("咖啡店的一天")

        assert len(result.incomes) == 4
        assert model.generate_content_async.await_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_three_attempts(self, no_retry_wait):
        """Test that repeated failures surface as ExtractionFailedError."""
        model = model_returning(*[RuntimeError("503 unavailable")] * 3)
        agent = TextExtractionAgent(model=model)

        with pytest.raises(ExtractionFailedError):
            await agent.extract("咖啡店的一天")
        assert model.generate_content_async.await_count == 3

    @pytest.mark.asyncio
    async def test_bad_answer_is_not_retried(self):
        """Test that a schema failure is raised without another call."""
        model = model_returning("not json")
        agent = TextExtractionAgent(model=model)

        with pytest.raises(SchemaValidationError):
            await agent.extract("咖啡店的一天")
        assert model.generate_content_async.await_count == 1
