from __future__ import annotations

import os
from typing import List


class Settings:
    """Centralized configuration for the meal plan backend."""

    def __init__(self) -> None:
        # ---- OpenAI-compatible provider ----
        self.openai_api_key: str | None = os.environ.get("OPENAI_API_KEY") or None
        self.openai_base_url: str = os.environ.get(
            "OPENAI_BASE_URL", "https://api.openai.com/v1"
        )
        self.text_model: str = os.environ.get("KONDATE_TEXT_MODEL", "gpt-4o-mini")
        self.structured_model: str = os.environ.get("KONDATE_STRUCTURED_MODEL", "gpt-4o")
        self.vision_model: str = os.environ.get("KONDATE_VISION_MODEL", "gpt-4o")

        # ---- Gemini provider (hybrid endpoint) ----
        self.google_api_key: str | None = os.environ.get("GOOGLE_API_KEY") or None
        self.gemini_base_url: str = os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.hybrid_model: str = os.environ.get("KONDATE_HYBRID_MODEL", "gemini-1.5-flash")

        self.provider_timeout: float = float(os.environ.get("KONDATE_PROVIDER_TIMEOUT") or "60")
        self.temperature: float = float(os.environ.get("KONDATE_TEMPERATURE") or "0.7")
        self.max_image_bytes: int = int(os.environ.get("KONDATE_MAX_IMAGE_BYTES") or "10000000")

        # Public URL of the site; the frontend shares NEXT_PUBLIC_BASE_URL with us.
        self.base_url: str = (
            os.environ.get("KONDATE_BASE_URL")
            or os.environ.get("NEXT_PUBLIC_BASE_URL")
            or "http://localhost:3000"
        ).rstrip("/")

        self.host: str = os.environ.get("KONDATE_HOST") or "127.0.0.1"
        self.port: int = int(os.environ.get("KONDATE_PORT") or "8000")
        self.log_level: str = (os.environ.get("KONDATE_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("KONDATE_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
