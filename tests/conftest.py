"""Shared fixtures: record factories and the demo snapshot."""

import os

import pytest

# The extractor settings require a key; tests never reach the real API.
os.environ.setdefault("GEMINI_API_KEY", "test-key")

from cashflow_analyzer.demo import demo_extraction
from cashflow_analyzer.models.records import ExpenseRecord, IncomeRecord


@pytest.fixture
def make_income():
    """Factory for IncomeRecord with sensible defaults."""
    def _make(subtotal, category="生活收入", type="薪資收入", description="收入", **fields):
        data = {
            "date": "2024-01-15",
            "category": category,
            "type": type,
            "description": description,
            "unit_price": subtotal,
            "quantity": 1,
            "payment_status": "已收款",
            "subtotal": subtotal,
        }
        data.update(fields)
        return IncomeRecord(**data)
    return _make


@pytest.fixture
def make_expense():
    """Factory for ExpenseRecord with sensible defaults."""
    def _make(subtotal, category="生活支出", expense_category="食", type="其他",
              description="支出", **fields):
        data = {
            "date": "2024-01-15",
            "category": category,
            "expense_category": expense_category,
            "type": type,
            "description": description,
            "unit_price": subtotal,
            "quantity": 1,
            "subtotal": subtotal,
        }
        data.update(fields)
        return ExpenseRecord(**data)
    return _make


@pytest.fixture
def demo():
    """The coffee-shop demo snapshot."""
    return demo_extraction()
