# -*- coding: utf-8 -*-
"""
Order extractor — free text → ExtractedOrder.

The model is asked for {"items": [{"name": ..., "quantity": ...}]}. Its
reply is never trusted as-is: it is parsed and validated, and anything
that does not fit raises OrderExtractionError. An empty item list is a
failure, not an empty order.
"""
from __future__ import annotations

import json
import re

from pydantic import ValidationError

from orderbot.errors import OrderExtractionError
from orderbot.schemas import ExtractedOrder
from orderbot.utils.llm_client import TextGenerator
from orderbot.utils.logger import get_logger, preview

logger = get_logger(__name__)

_PROMPT = (
    "Extract order details from this message. "
    "Format as JSON with items array containing name and quantity. "
    'Return ONLY the JSON object, e.g. {{"items": [{{"name": "pizza", "quantity": 2}}]}}: {text}'
)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_extracted_order(raw: str) -> ExtractedOrder:
    """Validate the model's reply. Markdown code fences are tolerated, prose is not."""
    clean = _FENCE.sub("", (raw or "").strip()).strip()
    try:
        data = json.loads(clean)
    except ValueError as e:
        raise OrderExtractionError(f"Extractor output is not JSON: {e}", raw=raw) from e

    if not isinstance(data, dict):
        raise OrderExtractionError("Extractor output is not a JSON object", raw=raw)

    try:
        return ExtractedOrder.model_validate(data)
    except ValidationError as e:
        raise OrderExtractionError(
            f"Extractor output has invalid shape: {e.error_count()} error(s)", raw=raw,
        ) from e


async def extract_order(llm: TextGenerator, text: str) -> ExtractedOrder:
    raw = await llm.generate(_PROMPT.format(text=text))
    order = parse_extracted_order(raw)
    logger.info(
        "Extracted %d item(s) from '%s': %s",
        len(order.items), preview(text),
        ", ".join(f"{i.quantity}x {i.name}" for i in order.items),
    )
    return order
