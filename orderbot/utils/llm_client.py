from __future__ import annotations
import asyncio
from functools import partial
from typing import Optional, Protocol, runtime_checkable
from orderbot.config import settings
from orderbot.errors import LLMError
from orderbot.utils.logger import get_logger

logger = get_logger(__name__)


@runtime_checkable
class TextGenerator(Protocol):
    """The one operation every AI-backed bot component depends on."""

    async def generate(self, prompt: str) -> str:
        ...


class GroqLLMClient:
    """
    Groq chat-completions behind a single `generate(prompt) -> text` call.
    - Semaphore keeps concurrent requests within the Groq free tier
    - Every call is bounded by `llm_timeout_seconds`
    - Failures raise LLMError; callers decide how to recover (no retries here)
    """

    def __init__(
        self,
        api_key:         Optional[str]   = None,
        model:           Optional[str]   = None,
        timeout_seconds: Optional[float] = None,
        max_concurrent:  Optional[int]   = None,
    ):
        self.api_key         = settings.groq_api_key if api_key is None else api_key
        self.enabled         = settings.llm_enabled and bool(self.api_key)
        self.model           = model or settings.groq_primary_model
        self.timeout_seconds = timeout_seconds or settings.llm_timeout_seconds
        self.max_concurrent  = max_concurrent or settings.llm_max_concurrent
        self._client         = None
        self._semaphore      = None   # lazily initialized (needs running event loop)

        if self.enabled:
            logger.info(f"✓ Groq LLM | model={self.model} | timeout={self.timeout_seconds}s")
        else:
            logger.warning("⚠ LLM disabled — set GROQ_API_KEY + LLM_ENABLED=true in .env")

    def _get_semaphore(self):
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)
        return self._semaphore

    def _get_client(self):
        if not self._client:
            from groq import Groq
            self._client = Groq(api_key=self.api_key)
        return self._client

    async def generate(self, prompt: str) -> str:
        if not self.enabled:
            raise LLMError("LLM is disabled (missing GROQ_API_KEY or LLM_ENABLED=false)")

        async with self._get_semaphore():
            try:
                loop     = asyncio.get_running_loop()
                client   = self._get_client()
                response = await asyncio.wait_for(
                    loop.run_in_executor(
                        None,
                        partial(
                            client.chat.completions.create,
                            model=self.model,
                            messages=[{"role": "user", "content": prompt}],
                            temperature=settings.llm_temperature,
                            max_tokens=settings.llm_max_tokens,
                        ),
                    ),
                    timeout=self.timeout_seconds,
                )
            except asyncio.TimeoutError as e:
                logger.error(f"Groq [{self.model}]: timed out after {self.timeout_seconds}s")
                raise LLMError(f"Groq call timed out after {self.timeout_seconds}s") from e
            except Exception as e:
                logger.error(f"Groq [{self.model}]: {str(e)[:80]}")
                raise LLMError(str(e)) from e

        text = (response.choices[0].message.content or "").strip()
        if not text:
            raise LLMError("Groq returned an empty completion")
        return text


_llm_client: Optional[GroqLLMClient] = None


def get_llm_client() -> GroqLLMClient:
    """Process-wide client, built on first use so settings can be overridden first."""
    global _llm_client
    if _llm_client is None:
        _llm_client = GroqLLMClient()
    return _llm_client
