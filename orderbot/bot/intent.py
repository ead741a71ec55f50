# -*- coding: utf-8 -*-
"""
Order-intent classifier.

Asks the model for a bare "true"/"false" verdict on whether the customer
wants to place an order. The free-text verdict is turned into a bool in
exactly one place, `parse_verdict`; everything else sees a bool.
"""
from __future__ import annotations

from orderbot.utils.llm_client import TextGenerator
from orderbot.utils.logger import get_logger, preview

logger = get_logger(__name__)

_PROMPT = (
    "Analyze if this message contains an order intent. "
    "Respond with only 'true' or 'false': {text}"
)


def parse_verdict(raw: str) -> bool:
    """Only a case-insensitive "true" counts; anything else means no order intent."""
    return (raw or "").strip().lower() == "true"


async def classify_order_intent(llm: TextGenerator, text: str) -> bool:
    """Return True when `text` expresses an intent to place an order.

    LLMError propagates; callers fall back to False.
    """
    raw = await llm.generate(_PROMPT.format(text=text))
    verdict = parse_verdict(raw)
    if not verdict and (raw or "").strip().lower() != "false":
        logger.warning(
            "Intent classifier returned ambiguous '%s' for '%s' — treating as no order",
            preview(raw, 30), preview(text),
        )
    else:
        logger.info("Order intent for '%s' → %s", preview(text), verdict)
    return verdict
