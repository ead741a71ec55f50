"""Tests for order extraction and validation of the model's JSON."""

from __future__ import annotations

import pytest

from orderbot.bot.extractor import extract_order, parse_extracted_order
from orderbot.errors import LLMError, OrderExtractionError
from tests.conftest import ScriptedLLM


class TestParseExtractedOrder:
    def test_valid_items(self) -> None:
        order = parse_extracted_order('{"items": [{"name": "pizza", "quantity": 2}]}')
        assert [(i.name, i.quantity) for i in order.items] == [("pizza", 2)]

    def test_preserves_item_order(self) -> None:
        order = parse_extracted_order(
            '{"items": [{"name": "coke", "quantity": 1}, {"name": "pizza", "quantity": 3}]}'
        )
        assert [i.name for i in order.items] == ["coke", "pizza"]

    def test_code_fence_tolerated(self) -> None:
        raw = '```json\n{"items": [{"name": "pasta", "quantity": 1}]}\n```'
        assert parse_extracted_order(raw).items[0].name == "pasta"

    def test_numeric_string_quantity_coerced(self) -> None:
        order = parse_extracted_order('{"items": [{"name": "pizza", "quantity": "2"}]}')
        assert order.items[0].quantity == 2

    @pytest.mark.parametrize(
        "raw",
        [
            "Sure! You ordered two pizzas.",
            "",
            "[1, 2, 3]",
            '{"items": []}',
            '{"orders": [{"name": "pizza", "quantity": 2}]}',
            '{"items": [{"name": "pizza"}]}',
            '{"items": [{"name": "pizza", "quantity": 0}]}',
            '{"items": [{"name": "pizza", "quantity": -1}]}',
            '{"items": [{"name": "pizza", "quantity": 1.5}]}',
            '{"items": [{"name": "pizza", "quantity": true}]}',
            '{"items": [{"name": "", "quantity": 1}]}',
        ],
    )
    def test_invalid_output_raises(self, raw: str) -> None:
        with pytest.raises(OrderExtractionError):
            parse_extracted_order(raw)

    def test_error_keeps_raw_output(self) -> None:
        with pytest.raises(OrderExtractionError) as exc_info:
            parse_extracted_order("not json")
        assert exc_info.value.raw == "not json"


class TestExtractOrder:
    @pytest.mark.asyncio
    async def test_calls_llm_with_message(self) -> None:
        llm = ScriptedLLM(extract='{"items": [{"name": "pizza", "quantity": 2}]}')
        order = await extract_order(llm, "I want to order 2 pizzas")
        assert order.items[0].quantity == 2
        assert llm.kinds() == ["extract"]
        assert "I want to order 2 pizzas" in llm.calls[0][1]

    @pytest.mark.asyncio
    async def test_llm_failure_propagates(self) -> None:
        llm = ScriptedLLM(extract=LLMError("timeout"))
        with pytest.raises(LLMError):
            await extract_order(llm, "2 pizzas")
