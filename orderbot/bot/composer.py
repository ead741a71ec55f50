# -*- coding: utf-8 -*-
"""
Response composer — builds the outbound BotResponse.

Order path → order_confirmation template with order_id / amount.
Chat path  → freshly generated AI reply wrapped as plain text.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Union

from orderbot.schemas import TemplateId, TemplateResponse, TextResponse
from orderbot.templates.catalog import TemplateCatalog
from orderbot.utils.llm_client import TextGenerator
from orderbot.utils.logger import get_logger

logger = get_logger(__name__)

_CHAT_PROMPT = (
    "You are a helpful AI assistant for {business}. Respond professionally and concisely."
    "\n\nUser message: {text}\n\nGenerate a response in {language}."
)


def format_amount(value: Any) -> str:
    """1500 / 1500.0 → "1500", 12.5 → "12.5"."""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return str(value)


def _field(order: Any, *names: str) -> Any:
    """Read an order field from a model, plain object or mapping (snake or camel case)."""
    for name in names:
        if isinstance(order, Mapping):
            if name in order:
                return order[name]
        elif hasattr(order, name):
            return getattr(order, name)
    raise AttributeError(f"order has none of {names}")


async def generate_chat_reply(llm: TextGenerator, text: str, language: str, business_name: str) -> str:
    reply = await llm.generate(
        _CHAT_PROMPT.format(business=business_name, text=text, language=language)
    )
    logger.info("Chat reply: generated %d chars in %s", len(reply), language)
    return reply.strip()


class ResponseComposer:
    def __init__(self, catalog: TemplateCatalog, payment_link_base: str = "https://pay.example.com/order"):
        self.catalog = catalog
        self.payment_link_base = payment_link_base.rstrip("/")

    def order_confirmation(self, order: Any) -> TemplateResponse:
        return TemplateResponse(
            template=TemplateId.order_confirmation,
            placeholders={
                "order_id": str(_field(order, "id", "order_id")),
                "amount":   format_amount(_field(order, "total_amount", "totalAmount")),
            },
        )

    def payment_reminder(self, order_id: str, amount: Any) -> TemplateResponse:
        return TemplateResponse(
            template=TemplateId.payment_reminder,
            placeholders={
                "order_id":     order_id,
                "amount":       format_amount(amount),
                "payment_link": f"{self.payment_link_base}/{order_id}",
            },
        )

    def out_of_stock(self, item_name: str) -> TemplateResponse:
        return TemplateResponse(
            template=TemplateId.out_of_stock,
            placeholders={"item_name": item_name},
        )

    def chat_reply(self, text: str) -> TextResponse:
        return TextResponse(text=text)

    def welcome(self) -> TextResponse:
        return TextResponse(text=self.catalog.get(TemplateId.welcome))

    def render(self, response: Union[TextResponse, TemplateResponse]) -> str:
        if isinstance(response, TemplateResponse):
            return self.catalog.render(response.template, response.placeholders)
        return response.text
