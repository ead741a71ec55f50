"""Tests for inbound / outbound message models."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from orderbot.schemas import (
    BotResponse, InboundMessage, MessageKind, TemplateId, TemplateResponse, TextResponse,
)


class TestInboundMessage:
    def test_accepts_webhook_field_names(self) -> None:
        msg = InboundMessage.model_validate({
            "from": "+911234",
            "text": "hi",
            "timestamp": 1700000000,
            "type": "location",
            "businessId": "biz-1",
        })
        assert msg.sender == "+911234"
        assert msg.kind == MessageKind.location
        assert msg.business_id == "biz-1"

    def test_defaults(self) -> None:
        msg = InboundMessage(sender="s", business_id="b", text="hi")
        assert msg.kind == MessageKind.text
        assert msg.timestamp > 0

    def test_immutable(self) -> None:
        msg = InboundMessage(sender="s", business_id="b", text="hi")
        with pytest.raises(ValidationError):
            msg.text = "changed"  # type: ignore[misc]

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InboundMessage(sender="s", business_id="b", text="hi", kind="sticker")

    def test_sender_required(self) -> None:
        with pytest.raises(ValidationError):
            InboundMessage.model_validate({"text": "hi", "businessId": "b"})


class TestBotResponse:
    def test_tagged_union_dispatches_on_kind(self) -> None:
        adapter = TypeAdapter(BotResponse)
        text = adapter.validate_python({"kind": "text", "text": "hello"})
        tmpl = adapter.validate_python({
            "kind": "template",
            "template": "order_confirmation",
            "placeholders": {"order_id": "ORD1"},
        })
        assert isinstance(text, TextResponse)
        assert isinstance(tmpl, TemplateResponse)
        assert tmpl.template == TemplateId.order_confirmation

    def test_serialised_kind(self) -> None:
        dumped = TemplateResponse(template=TemplateId.out_of_stock, placeholders={"item_name": "x"}).model_dump(mode="json")
        assert dumped == {"kind": "template", "template": "out_of_stock", "placeholders": {"item_name": "x"}}
