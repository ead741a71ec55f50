"""Tests for response composition and rendering."""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

import pytest

from orderbot.bot.composer import ResponseComposer, format_amount, generate_chat_reply
from orderbot.schemas import TemplateId, TemplateResponse, TextResponse
from orderbot.templates.catalog import TemplateCatalog
from tests.conftest import ScriptedLLM


@pytest.fixture
def composer() -> ResponseComposer:
    return ResponseComposer(TemplateCatalog(), payment_link_base="https://pay.test/order/")


class TestFormatAmount:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1500, "1500"), (1500.0, "1500"), (12.5, "12.5"), (Decimal("99.00"), "99"), ("1500", "1500")],
    )
    def test_format(self, value, expected: str) -> None:
        assert format_amount(value) == expected


class TestOrderConfirmation:
    def test_from_order_object(self, composer: ResponseComposer) -> None:
        order = SimpleNamespace(id="ORD123", total_amount=1500.0)
        resp = composer.order_confirmation(order)
        assert resp.kind == "template"
        assert resp.template == TemplateId.order_confirmation
        assert resp.placeholders == {"order_id": "ORD123", "amount": "1500"}

    def test_from_camel_case_mapping(self, composer: ResponseComposer) -> None:
        resp = composer.order_confirmation({"id": "ORD9", "totalAmount": 250})
        assert resp.placeholders == {"order_id": "ORD9", "amount": "250"}

    def test_render(self, composer: ResponseComposer) -> None:
        text = composer.render(composer.order_confirmation({"id": "ORD123", "totalAmount": 1500}))
        assert text == "Thank you for your order! Your order #ORD123 has been confirmed. Total: ₹1500."


class TestOtherTemplates:
    def test_payment_reminder_builds_link(self, composer: ResponseComposer) -> None:
        resp = composer.payment_reminder("ORD7", 300.0)
        assert resp.placeholders["payment_link"] == "https://pay.test/order/ORD7"
        assert composer.render(resp).endswith("https://pay.test/order/ORD7")

    def test_out_of_stock(self, composer: ResponseComposer) -> None:
        resp = composer.out_of_stock("Brownie")
        assert "Brownie" in composer.render(resp)

    def test_welcome_is_plain_text(self, composer: ResponseComposer) -> None:
        resp = composer.welcome()
        assert isinstance(resp, TextResponse)
        assert resp.text == "Hello! Welcome to our store. How can I help you today?"

    def test_chat_reply_has_no_placeholders(self, composer: ResponseComposer) -> None:
        resp = composer.chat_reply("We open at 9am {{not_a_placeholder}}")
        assert resp == TextResponse(text="We open at 9am {{not_a_placeholder}}")
        assert composer.render(resp) == "We open at 9am {{not_a_placeholder}}"

    def test_render_leaves_unresolved_markers(self, composer: ResponseComposer) -> None:
        resp = TemplateResponse(template=TemplateId.order_confirmation, placeholders={"order_id": "ORD1"})
        assert "{{amount}}" in composer.render(resp)


class TestGenerateChatReply:
    @pytest.mark.asyncio
    async def test_prompt_and_trim(self) -> None:
        llm = ScriptedLLM(chat="  We deliver until 11pm.  ")
        reply = await generate_chat_reply(llm, "till when do you deliver?", "English", "Pizza Palace")
        assert reply == "We deliver until 11pm."
        prompt = llm.calls[0][1]
        assert "Pizza Palace" in prompt
        assert "User message: till when do you deliver?" in prompt
        assert prompt.endswith("Generate a response in English.")
