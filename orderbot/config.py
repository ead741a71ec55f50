# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import List, Any
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    # ── Groq LLM ─────────────────────────────────────────────────────────────
    groq_api_key:        str   = ""
    groq_primary_model:  str   = "llama-3.3-70b-versatile"
    llm_enabled:         bool  = True
    llm_max_concurrent:  int   = 3
    llm_timeout_seconds: float = 20.0
    llm_temperature:     float = 0.7
    llm_max_tokens:      int   = 512

    # ── Bot behaviour ────────────────────────────────────────────────────────
    default_language:  str = "English"   # used when detection fails
    business_name:     str = "our store"
    payment_link_base: str = "https://pay.example.com/order"

    # ── Static configuration files (empty → bundled defaults) ────────────────
    templates_file: str = ""
    products_file:  str = ""

    # ── Redis (optional translation cache) ───────────────────────────────────
    redis_url:             str = ""      # e.g. redis://localhost:6379/0
    translation_cache_ttl: int = 3600

    # ── CORS ─────────────────────────────────────────────────────────────────
    allowed_origins: List[str] = [
        "http://127.0.0.1:8000",
        "http://localhost:8000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # ── App ───────────────────────────────────────────────────────────────────
    log_level: str  = "INFO"

    # ── Validator: accept both JSON array AND comma-separated string ──────────
    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, v: Any) -> List[str]:
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            v = v.strip()
            # JSON array format: ["a","b"]
            if v.startswith("["):
                import json
                return json.loads(v)
            # Comma-separated format: a,b,c
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    class Config:
        env_file          = ".env"
        env_file_encoding = "utf-8"
        extra             = "ignore"


settings = Settings()
