# -*- coding: utf-8 -*-
"""
Bot dispatcher — one inbound message in, exactly one BotResponse out.

LangGraph StateGraph:
  START → conditional:
    any text (caption included) → detect_language
    blank text                  → welcome
  detect_language → classify_intent
  classify_intent → conditional:
    order intent → order_flow   (extract → create order → confirmation)
    otherwise    → chat_flow    (AI reply)
  order_flow / chat_flow / welcome → END

Every node recovers from its own failures with a fallback reply, and
handle_incoming_message guards the whole run, so dispatch never raises.
"""
from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Annotated, List, Optional, TypedDict, Union

from langgraph.graph import StateGraph, START, END

from orderbot.bot.composer import ResponseComposer, generate_chat_reply
from orderbot.bot.extractor import extract_order
from orderbot.bot.intent import classify_order_intent
from orderbot.bot.language import LanguageService, RedisTranslationCache
from orderbot.config import settings
from orderbot.orders.service import OrderService
from orderbot.schemas import (
    DispatchStage, InboundMessage, TemplateResponse, TextResponse,
)
from orderbot.templates.catalog import TemplateCatalog
from orderbot.utils.llm_client import TextGenerator
from orderbot.utils.logger import get_logger, preview

logger = get_logger(__name__)

ORDER_APOLOGY = "Sorry, I couldn't process your order. Please try again or contact support."


class DispatchState(TypedDict, total=False):
    message:      InboundMessage
    language:     str
    order_intent: bool
    response:     Union[TextResponse, TemplateResponse]
    trail:        Annotated[List[DispatchStage], operator.add]


@dataclass
class DispatchResult:
    response: Union[TextResponse, TemplateResponse]
    language: Optional[str]      = None
    trail:    List[DispatchStage] = field(default_factory=list)


class BotDispatcher:
    """Orchestrates language detection, intent, ordering and reply composition.

    Configuration (templates, default language, business name) is injected
    once and only read afterwards.
    """

    def __init__(
        self,
        llm:              TextGenerator,
        order_service:    OrderService,
        catalog:          TemplateCatalog,
        default_language: str = "English",
        business_name:    str = "our store",
        language_service: Optional[LanguageService] = None,
        composer:         Optional[ResponseComposer] = None,
    ):
        self.llm              = llm
        self.order_service    = order_service
        self.catalog          = catalog
        self.default_language = default_language
        self.business_name    = business_name
        self.language         = language_service or LanguageService(llm)
        self.composer         = composer or ResponseComposer(catalog)
        self.graph            = self._build_graph()

    # ── Graph ────────────────────────────────────────────────────────────

    def _build_graph(self):
        builder = StateGraph(DispatchState)

        builder.add_node("detect_language", self._detect_language)
        builder.add_node("classify_intent", self._classify_intent)
        builder.add_node("order_flow",      self._order_flow)
        builder.add_node("chat_flow",       self._chat_flow)
        builder.add_node("welcome",         self._welcome)

        builder.add_conditional_edges(
            START,
            self._route_received,
            {"detect_language": "detect_language", "welcome": "welcome"},
        )
        builder.add_edge("detect_language", "classify_intent")
        builder.add_conditional_edges(
            "classify_intent",
            self._route_intent,
            {"order_flow": "order_flow", "chat_flow": "chat_flow"},
        )
        builder.add_edge("order_flow", END)
        builder.add_edge("chat_flow",  END)
        builder.add_edge("welcome",    END)

        return builder.compile()

    @staticmethod
    def _route_received(state: DispatchState) -> str:
        msg = state["message"]
        if not msg.text.strip():
            return "welcome"
        return "detect_language"

    @staticmethod
    def _route_intent(state: DispatchState) -> str:
        return "order_flow" if state.get("order_intent") else "chat_flow"

    # ── Nodes ────────────────────────────────────────────────────────────

    async def _detect_language(self, state: DispatchState) -> dict:
        try:
            language = await self.language.detect_language(state["message"].text)
        except Exception as e:
            logger.error(
                "Language detection failed: %s — using default '%s'",
                str(e)[:120], self.default_language,
            )
            language = self.default_language
        return {"language": language or self.default_language,
                "trail": [DispatchStage.LANGUAGE_DETECTED]}

    async def _classify_intent(self, state: DispatchState) -> dict:
        try:
            intent = await classify_order_intent(self.llm, state["message"].text)
        except Exception as e:
            logger.error("Intent classification failed: %s — assuming no order", str(e)[:120])
            intent = False
        return {"order_intent": intent}

    async def _order_flow(self, state: DispatchState) -> dict:
        msg      = state["message"]
        language = state["language"]
        try:
            extracted = await extract_order(self.llm, msg.text)
            order = await self.order_service.create_order(
                business_id=msg.business_id,
                customer_id=msg.sender,
                items=extracted.items,
                language=language,
            )
            response = self.composer.order_confirmation(order)
            logger.info("Order confirmed for %s: %s", msg.sender, response.placeholders)
        except Exception as e:
            logger.error("Order handling failed for '%s': %s", preview(msg.text), str(e)[:150])
            response = TextResponse(text=await self._apology(language))
        return {"response": response,
                "trail": [DispatchStage.ORDER_FLOW, DispatchStage.RESPONDED]}

    async def _chat_flow(self, state: DispatchState) -> dict:
        msg = state["message"]
        try:
            reply = await generate_chat_reply(self.llm, msg.text, state["language"], self.business_name)
            response = self.composer.chat_reply(reply)
        except Exception as e:
            logger.error("AI reply failed: %s — sending welcome message", str(e)[:150])
            response = self.composer.welcome()
        return {"response": response,
                "trail": [DispatchStage.CHAT_FLOW, DispatchStage.RESPONDED]}

    async def _welcome(self, state: DispatchState) -> dict:
        logger.info("Blank %s message from %s — sending welcome", state["message"].kind.value, state["message"].sender)
        return {"response": self.composer.welcome(), "trail": [DispatchStage.RESPONDED]}

    async def _apology(self, language: str) -> str:
        try:
            result = await self.language.translate(ORDER_APOLOGY, language)
            return result.translated_text
        except Exception as e:
            logger.error("Apology translation to %s failed: %s", language, str(e)[:120])
            return ORDER_APOLOGY

    # ── Entry points ─────────────────────────────────────────────────────

    async def dispatch(self, message: InboundMessage) -> DispatchResult:
        try:
            final = await self.graph.ainvoke({"message": message, "trail": [DispatchStage.RECEIVED]})
            return DispatchResult(
                response=final["response"],
                language=final.get("language"),
                trail=list(final.get("trail", [])),
            )
        except Exception as e:
            logger.error("Dispatch failed for %s: %s", message.sender, str(e)[:150])
            return DispatchResult(
                response=self.composer.welcome(),
                trail=[DispatchStage.RECEIVED, DispatchStage.RESPONDED],
            )

    async def handle_incoming_message(self, message: InboundMessage) -> Union[TextResponse, TemplateResponse]:
        """Never raises: every path ends in a BotResponse."""
        result = await self.dispatch(message)
        return result.response


def create_dispatcher(
    llm: TextGenerator,
    order_service: OrderService,
    catalog: Optional[TemplateCatalog] = None,
) -> BotDispatcher:
    """Wire a dispatcher from process settings."""
    catalog = catalog or TemplateCatalog.from_yaml(settings.templates_file)
    cache = None
    if settings.redis_url.strip():
        cache = RedisTranslationCache(settings.redis_url, settings.translation_cache_ttl)
    return BotDispatcher(
        llm=llm,
        order_service=order_service,
        catalog=catalog,
        default_language=settings.default_language,
        business_name=settings.business_name,
        language_service=LanguageService(llm, cache),
        composer=ResponseComposer(catalog, settings.payment_link_base),
    )
