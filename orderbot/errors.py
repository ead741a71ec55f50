# -*- coding: utf-8 -*-
"""
Exception hierarchy for the bot core.

Components raise these; BotDispatcher is the only place that recovers
from them and turns them into a fallback reply.
"""
from __future__ import annotations


class OrderBotError(Exception):
    """Base class for every error raised by the bot core."""


class LLMError(OrderBotError):
    """The generative-text call failed, timed out, or returned nothing."""


class OrderExtractionError(OrderBotError):
    """Extractor output was not JSON or not the expected items shape."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class OrderServiceError(OrderBotError):
    """Order creation or lookup failed."""


class ProductNotFoundError(OrderServiceError):
    def __init__(self, item_name: str):
        super().__init__(f"Unknown product: {item_name}")
        self.item_name = item_name


class OutOfStockError(OrderServiceError):
    def __init__(self, item_name: str, requested: int = 0, available: int = 0):
        super().__init__(
            f"Out of stock: {item_name} (requested {requested}, available {available})"
        )
        self.item_name = item_name
        self.requested = requested
        self.available = available


class OrderNotFoundError(OrderServiceError):
    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class TemplateNotFoundError(OrderBotError):
    def __init__(self, template_id: str):
        super().__init__(f"Unknown template: {template_id}")
        self.template_id = template_id
