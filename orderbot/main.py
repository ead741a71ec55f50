# -*- coding: utf-8 -*-
"""
FastAPI application — WhatsApp order bot.

Endpoints:
  POST /webhook                                → dispatch one inbound message
  GET  /api/orders/{order_id}                  → order details
  POST /api/orders/{order_id}/payment-reminder → payment reminder message
  GET  /api/businesses/{business_id}/analytics → per-business order analytics
  GET  /                                       → Service info
  GET  /health                                 → Health check
"""
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from orderbot.bot.dispatcher import BotDispatcher, create_dispatcher
from orderbot.config import settings
from orderbot.errors import OrderNotFoundError
from orderbot.orders.catalog import ProductCatalog
from orderbot.orders.schemas import Order, OrderAnalytics
from orderbot.orders.service import InMemoryOrderService
from orderbot.schemas import InboundMessage, WebhookReply
from orderbot.utils.llm_client import get_llm_client
from orderbot.utils.logger import get_logger, preview

logger = get_logger(__name__)


def _parse_inbound(payload: Dict[str, Any]) -> InboundMessage:
    # legacy body: {"message": "..."} with no sender / business
    if "message" in payload and "text" not in payload:
        payload = {
            "from":       payload.get("from") or "unknown",
            "businessId": payload.get("businessId") or "unknown",
            "text":       str(payload.get("message") or ""),
        }
    return InboundMessage.model_validate(payload)


def create_app(
    dispatcher:    Optional[BotDispatcher]        = None,
    order_service: Optional[InMemoryOrderService] = None,
) -> FastAPI:
    if order_service is None:
        order_service = InMemoryOrderService(ProductCatalog.from_yaml(settings.products_file))
    if dispatcher is None:
        dispatcher = create_dispatcher(get_llm_client(), order_service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("=== Startup: WhatsApp Order Bot ===")
        if not settings.groq_api_key:
            logger.error("GROQ_API_KEY is missing from .env — every reply will be a fallback")
        else:
            logger.info("Groq API key detected ✓")
        logger.info(
            "Templates: %s | default language: %s",
            sorted(dispatcher.catalog.templates), dispatcher.default_language,
        )

        yield

        cache = getattr(dispatcher.language, "cache", None)
        if cache is not None and hasattr(cache, "close"):
            await cache.close()
        logger.info("=== Shutdown ===")

    app = FastAPI(
        title="WhatsApp Order Bot",
        description="Language-aware order taking and customer chat over WhatsApp",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.dispatcher    = dispatcher
    app.state.order_service = order_service

    # ═══════════════════════════════════════════════════════════════════════
    # Webhook
    # ═══════════════════════════════════════════════════════════════════════

    @app.post("/webhook", response_model=WebhookReply)
    async def webhook(payload: Dict[str, Any] = Body(...)):
        try:
            message = _parse_inbound(payload)
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False, include_input=False)) from exc

        logger.info("Inbound %s from %s: '%s'", message.kind.value, message.sender, preview(message.text))
        response = await dispatcher.handle_incoming_message(message)
        return WebhookReply(response=response, text=dispatcher.composer.render(response))

    # ═══════════════════════════════════════════════════════════════════════
    # Orders
    # ═══════════════════════════════════════════════════════════════════════

    @app.get("/api/orders/{order_id}", response_model=Order)
    async def get_order(order_id: str):
        try:
            return await order_service.get_order(order_id)
        except OrderNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.post("/api/orders/{order_id}/payment-reminder", response_model=WebhookReply)
    async def payment_reminder(order_id: str):
        try:
            order = await order_service.get_order(order_id)
        except OrderNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

        reminder = dispatcher.composer.payment_reminder(order.id, order.total_amount)
        text = dispatcher.composer.render(reminder)
        logger.info("Payment reminder for %s → %s", order.id, order.customer_id)
        return WebhookReply(response=reminder, text=text)

    @app.get("/api/businesses/{business_id}/analytics", response_model=OrderAnalytics)
    async def analytics(business_id: str):
        return await order_service.get_order_analytics(business_id)

    # ═══════════════════════════════════════════════════════════════════════
    # Info / Health
    # ═══════════════════════════════════════════════════════════════════════

    @app.get("/")
    async def root():
        return {
            "name": "WhatsApp Order Bot",
            "version": "1.0.0",
            "mode": "LangGraph + Groq",
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/health")
    async def health():
        llm = dispatcher.llm
        enabled = bool(getattr(llm, "enabled", True))
        return {
            "status": "ok",
            "llm_enabled": enabled,
            "llm_model": getattr(llm, "model", None) if enabled else None,
            "groq_key_present": bool(settings.groq_api_key),
            "default_language": dispatcher.default_language,
            "templates": sorted(dispatcher.catalog.templates),
            "translation_cache": getattr(dispatcher.language, "cache", None) is not None,
        }

    return app


app = create_app()
