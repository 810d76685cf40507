# -*- coding: utf-8 -*-
"""Gemini `generateContent` REST client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx

from ..config import settings
from ..meal_plan.errors import ProviderError
from ..meal_plan.prompt import MealPlanPrompt
from .base import ProviderSettings, post_json

log = logging.getLogger(__name__)


def resolve_gemini_settings(model: str) -> ProviderSettings:
    return ProviderSettings(
        name="Gemini",
        base_url=settings.gemini_base_url.rstrip("/"),
        api_key=settings.google_api_key,
        model=model,
        timeout=settings.provider_timeout,
        temperature=settings.temperature,
    )


def build_payload(cfg: ProviderSettings, prompt: MealPlanPrompt) -> Dict[str, Any]:
    parts: List[Dict[str, Any]] = [{"text": prompt.text}]
    if prompt.image is not None:
        parts.append(
            {
                "inline_data": {
                    "mime_type": prompt.image.mime_type,
                    "data": prompt.image.base64(),
                }
            }
        )
    return {
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": {"temperature": cfg.temperature},
    }


def extract_reply_text(data: Dict[str, Any]) -> str:
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        feedback = data.get("promptFeedback")
        reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if reason:
            raise ProviderError(f"Gemini blocked the prompt: {reason}")
        raise ProviderError("Gemini reply has no candidates")

    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    out: List[str] = []
    if isinstance(parts, list):
        for part in parts:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                out.append(part["text"])
    text = "".join(out)
    if not text.strip():
        reason = first.get("finishReason")
        raise ProviderError(f"Gemini reply is empty (finishReason={reason})")
    return text


def complete(
    cfg: ProviderSettings,
    prompt: MealPlanPrompt,
    *,
    transport: httpx.BaseTransport | None = None,
) -> str:
    api_key = cfg.require_api_key()
    url = f"{cfg.base_url.rstrip('/')}/models/{cfg.model}:generateContent"
    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": api_key,
    }
    log.debug("gemini request model=%s image=%s", cfg.model, prompt.image is not None)
    data = post_json(cfg, url, headers=headers, payload=build_payload(cfg, prompt), transport=transport)
    return extract_reply_text(data)
