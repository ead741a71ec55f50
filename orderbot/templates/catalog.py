from __future__ import annotations
import os
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union
import yaml
from orderbot.errors import TemplateNotFoundError
from orderbot.schemas import TemplateId
from orderbot.utils.logger import get_logger

logger = get_logger(__name__)

_BUNDLED = os.path.join(os.path.dirname(__file__), "default.yaml")

DEFAULT_TEMPLATES: Dict[str, str] = {
    TemplateId.welcome.value:
        "Hello! Welcome to our store. How can I help you today?",
    TemplateId.order_confirmation.value:
        "Thank you for your order! Your order #{{order_id}} has been confirmed. Total: ₹{{amount}}.",
    TemplateId.payment_reminder.value:
        "Reminder: Your order #{{order_id}} is waiting for payment. Click here to pay: {{payment_link}}",
    TemplateId.out_of_stock.value:
        "We apologize, but the item {{item_name}} is currently out of stock. "
        "We'll notify you when it's available.",
}


def fill_placeholders(template: str, values: Mapping[str, str]) -> str:
    """Replace every `{{name}}` with values[name]; unknown markers stay as they are."""
    out = template
    for name, value in values.items():
        out = out.replace("{{" + name + "}}", str(value))
    return out


class TemplateCatalog:
    """Fixed set of message templates, read once at startup and never mutated."""

    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        merged = dict(DEFAULT_TEMPLATES)
        merged.update(templates or {})
        self._templates = MappingProxyType(merged)

    @classmethod
    def from_yaml(cls, path: str = "") -> "TemplateCatalog":
        path = path or _BUNDLED
        if not os.path.isfile(path):
            logger.warning(f"Templates file not found: {path} — using built-in templates")
            return cls()
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        loaded = {str(k): str(v) for k, v in raw.items() if v is not None}
        missing = [t.value for t in TemplateId if t.value not in loaded]
        if missing:
            logger.warning(f"Templates {missing} missing from {path} — using built-in text")
        logger.info(f"Templates: {len(loaded)} loaded from {path}")
        return cls(loaded)

    @property
    def templates(self) -> Mapping[str, str]:
        return self._templates

    def get(self, template_id: Union[TemplateId, str]) -> str:
        key = template_id.value if isinstance(template_id, TemplateId) else template_id
        try:
            return self._templates[key]
        except KeyError:
            raise TemplateNotFoundError(key) from None

    def render(self, template_id: Union[TemplateId, str], values: Mapping[str, str]) -> str:
        return fill_placeholders(self.get(template_id), values)
