# -*- coding: utf-8 -*-
"""
Pydantic schemas shared by every stage of the bot dispatch pipeline.

InboundMessage → (language, intent, ExtractedOrder) → BotResponse
"""
from __future__ import annotations
import time
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════════


class MessageKind(str, Enum):
    text     = "text"
    image    = "image"
    location = "location"
    document = "document"


class TemplateId(str, Enum):
    welcome            = "welcome"
    order_confirmation = "order_confirmation"
    payment_reminder   = "payment_reminder"
    out_of_stock       = "out_of_stock"


class DispatchStage(str, Enum):
    RECEIVED          = "RECEIVED"
    LANGUAGE_DETECTED = "LANGUAGE_DETECTED"
    ORDER_FLOW        = "ORDER_FLOW"
    CHAT_FLOW         = "CHAT_FLOW"
    RESPONDED         = "RESPONDED"


# ═══════════════════════════════════════════════════════════════════════════════
# INBOUND
# ═══════════════════════════════════════════════════════════════════════════════


class InboundMessage(BaseModel):
    """One customer message as delivered by the webhook. Immutable."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sender:      str         = Field(..., alias="from", min_length=1)
    text:        str         = ""
    timestamp:   float       = Field(default_factory=time.time)
    kind:        MessageKind = Field(MessageKind.text, alias="type")
    business_id: str         = Field(..., alias="businessId", min_length=1)


# ═══════════════════════════════════════════════════════════════════════════════
# LANGUAGE
# ═══════════════════════════════════════════════════════════════════════════════


class TranslationResult(BaseModel):
    detected_language: str
    translated_text:   str


# ═══════════════════════════════════════════════════════════════════════════════
# ORDER EXTRACTION
# ═══════════════════════════════════════════════════════════════════════════════


class OrderLine(BaseModel):
    name:     str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("quantity", mode="before")
    @classmethod
    def reject_bool(cls, v: Any) -> Any:
        # bool is an int subclass; "true" is not a quantity
        if isinstance(v, bool):
            raise ValueError("quantity must be a number")
        return v


class ExtractedOrder(BaseModel):
    items: List[OrderLine] = Field(..., min_length=1)


# ═══════════════════════════════════════════════════════════════════════════════
# OUTBOUND — tagged union on `kind`
# ═══════════════════════════════════════════════════════════════════════════════


class TextResponse(BaseModel):
    kind: Literal["text"] = "text"
    text: str


class TemplateResponse(BaseModel):
    kind:         Literal["template"] = "template"
    template:     TemplateId
    placeholders: Dict[str, str]      = Field(default_factory=dict)


BotResponse = Annotated[Union[TextResponse, TemplateResponse], Field(discriminator="kind")]


class WebhookReply(BaseModel):
    """HTTP envelope: the structured response plus its rendered text."""

    response: BotResponse
    text:     str
