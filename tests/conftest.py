"""Shared test fixtures for the order bot."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple, Union

import pytest

from orderbot.bot.dispatcher import BotDispatcher
from orderbot.orders.catalog import Product, ProductCatalog
from orderbot.orders.service import InMemoryOrderService
from orderbot.schemas import InboundMessage
from orderbot.templates.catalog import TemplateCatalog

# prompt prefix → call kind
_KINDS = (
    ("Detect the language", "detect"),
    ("Analyze if this message contains an order intent", "intent"),
    ("Extract order details", "extract"),
    ("Translate this text", "translate"),
    ("You are a helpful AI assistant", "chat"),
    ("Generate a response in", "respond"),
)


class ScriptedLLM:
    """TextGenerator fake that answers by prompt kind and records every call.

    A scripted value may be a string, an exception instance to raise, or a
    list of those answered in turn.
    """

    def __init__(self, **script: Union[str, Exception, Sequence[Union[str, Exception]]]):
        self.script: Dict[str, Any] = {
            "detect": "English",
            "intent": "false",
            "chat": "Hi there! How can I help?",
            **script,
        }
        self.calls: List[Tuple[str, str]] = []
        self.enabled = True
        self.model = "scripted"

    @staticmethod
    def kind_of(prompt: str) -> str:
        for prefix, kind in _KINDS:
            if prompt.startswith(prefix):
                return kind
        return "unknown"

    def kinds(self) -> List[str]:
        return [k for k, _ in self.calls]

    async def generate(self, prompt: str) -> str:
        kind = self.kind_of(prompt)
        self.calls.append((kind, prompt))
        value = self.script.get(kind)
        if isinstance(value, list):
            # successive answers; the last one repeats
            value = value.pop(0) if len(value) > 1 else value[0]
        if value is None:
            raise AssertionError(f"unscripted LLM call: {kind}: {prompt[:80]}")
        if isinstance(value, Exception):
            raise value
        return value


def make_message(**kwargs: Any) -> InboundMessage:
    defaults: Dict[str, Any] = {
        "sender": "+919800000001",
        "text": "hello",
        "timestamp": 1_700_000_000.0,
        "business_id": "biz-1",
    }
    defaults.update(kwargs)
    return InboundMessage(**defaults)


@pytest.fixture
def product_catalog() -> ProductCatalog:
    return ProductCatalog([
        Product(id="P001", name="Pizza", price=750, stock=10),
        Product(id="P002", name="Coke", price=60, aliases=["cola"]),
        Product(id="P005", name="Brownie", price=150, stock=0),
    ])


@pytest.fixture
def order_service(product_catalog: ProductCatalog) -> InMemoryOrderService:
    return InMemoryOrderService(product_catalog)


@pytest.fixture
def template_catalog() -> TemplateCatalog:
    return TemplateCatalog()


@pytest.fixture
def make_dispatcher(template_catalog: TemplateCatalog, order_service: InMemoryOrderService):
    def _make(llm: ScriptedLLM, **kwargs: Any) -> BotDispatcher:
        defaults: Dict[str, Any] = {
            "llm": llm,
            "order_service": order_service,
            "catalog": template_catalog,
            "default_language": "English",
        }
        defaults.update(kwargs)
        return BotDispatcher(**defaults)

    return _make
