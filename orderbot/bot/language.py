# -*- coding: utf-8 -*-
"""
Language detection and translation through the generative-text call.

No local heuristics: the model names the language and does the translating.
Both operations propagate LLMError — the dispatcher owns recovery.
"""
from __future__ import annotations

import hashlib
import json
from typing import Optional, Protocol

from orderbot.schemas import TranslationResult
from orderbot.utils.llm_client import TextGenerator
from orderbot.utils.logger import get_logger, preview

logger = get_logger(__name__)

_DETECT_PROMPT    = "Detect the language of this text and return only the language name: {text}"
_TRANSLATE_PROMPT = "Translate this text from {source} to {target}: {text}"
_RESPOND_PROMPT   = "Generate a response in {language} for: {prompt}"


class TranslationCache(Protocol):
    async def get(self, text: str, target: str) -> Optional[TranslationResult]:
        ...

    async def set(self, text: str, target: str, result: TranslationResult) -> None:
        ...


class RedisTranslationCache:
    """Redis-backed translation cache. Every Redis failure is a cache miss."""

    def __init__(self, url: str, ttl_seconds: int = 3600):
        self.url = url
        self.ttl = ttl_seconds
        self._redis = None

    async def _get_redis(self):
        if self._redis is None:
            import redis.asyncio as aioredis
            self._redis = aioredis.from_url(self.url, decode_responses=True)
        return self._redis

    @staticmethod
    def _key(text: str, target: str) -> str:
        digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:32]
        return f"translate:{target.lower().strip()}:{digest}"

    async def get(self, text: str, target: str) -> Optional[TranslationResult]:
        try:
            r = await self._get_redis()
            cached = await r.get(self._key(text, target))
            if cached:
                logger.info("Translation cache HIT: %s → %s", preview(text, 40), target)
                return TranslationResult(**json.loads(cached))
        except Exception as e:
            logger.warning("Translation cache get error: %s", str(e)[:60])
        return None

    async def set(self, text: str, target: str, result: TranslationResult) -> None:
        try:
            r = await self._get_redis()
            await r.set(self._key(text, target), result.model_dump_json(), ex=self.ttl)
        except Exception as e:
            logger.warning("Translation cache set error: %s", str(e)[:60])

    async def close(self):
        if self._redis is not None:
            await self._redis.close()
            self._redis = None


class LanguageService:
    def __init__(self, llm: TextGenerator, cache: Optional[TranslationCache] = None):
        self.llm = llm
        self.cache = cache

    async def detect_language(self, text: str) -> str:
        language = (await self.llm.generate(_DETECT_PROMPT.format(text=text))).strip()
        logger.info("Language detected: '%s' → %s", preview(text), language)
        return language

    async def translate(self, text: str, target_language: str) -> TranslationResult:
        """Translate `text` into `target_language`.

        Detection runs first; when the text is already in the target language
        the original text comes back untouched and no translation call is made.
        """
        if self.cache is not None:
            cached = await self.cache.get(text, target_language)
            if cached is not None:
                return cached

        detected = await self.detect_language(text)

        if detected.strip().lower() == target_language.strip().lower():
            result = TranslationResult(detected_language=detected, translated_text=text)
        else:
            translated = await self.llm.generate(
                _TRANSLATE_PROMPT.format(source=detected, target=target_language, text=text)
            )
            result = TranslationResult(detected_language=detected, translated_text=translated.strip())
            logger.info("Translated %s → %s: '%s'", detected, target_language, preview(result.translated_text))

        if self.cache is not None:
            await self.cache.set(text, target_language, result)
        return result

    async def generate_response(self, prompt: str, language: str) -> str:
        text = await self.llm.generate(_RESPOND_PROMPT.format(language=language, prompt=prompt))
        return text.strip()
