# -*- coding: utf-8 -*-
"""OpenAI-compatible chat completions (plain and structured-output mode)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import httpx

from ..config import settings
from ..meal_plan.errors import ProviderError
from ..meal_plan.prompt import MealPlanPrompt
from .base import ProviderSettings, post_json

log = logging.getLogger(__name__)


def resolve_openai_settings(model: str) -> ProviderSettings:
    return ProviderSettings(
        name="OpenAI",
        base_url=settings.openai_base_url.rstrip("/"),
        api_key=settings.openai_api_key,
        model=model,
        timeout=settings.provider_timeout,
        temperature=settings.temperature,
    )


def _user_content(prompt: MealPlanPrompt) -> str | List[Dict[str, Any]]:
    if prompt.image is None:
        return prompt.text
    return [
        {"type": "text", "text": prompt.text},
        {"type": "image_url", "image_url": {"url": prompt.image.data_url()}},
    ]


def build_payload(
    cfg: ProviderSettings,
    prompt: MealPlanPrompt,
    *,
    json_schema: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "model": cfg.model,
        "messages": [{"role": "user", "content": _user_content(prompt)}],
    }
    if json_schema is not None:
        payload["response_format"] = {
            "type": "json_schema",
            "json_schema": {"name": "meal_plan", "strict": True, "schema": json_schema},
        }
    else:
        payload["temperature"] = cfg.temperature
    return payload


def extract_reply_text(data: Dict[str, Any]) -> str:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        raise ProviderError("OpenAI reply has no choices")
    message = choices[0].get("message")
    if not isinstance(message, dict):
        raise ProviderError("OpenAI reply has no message")
    refusal = message.get("refusal")
    if isinstance(refusal, str) and refusal.strip():
        raise ProviderError(f"OpenAI refused the request: {refusal.strip()}")
    content = message.get("content")
    if not isinstance(content, str) or not content.strip():
        raise ProviderError("OpenAI reply is empty")
    return content


def complete(
    cfg: ProviderSettings,
    prompt: MealPlanPrompt,
    *,
    json_schema: Dict[str, Any] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Send one chat completion and return the assistant's text.

    With `json_schema` the provider enforces the schema and the text is the JSON
    document itself.
    """
    api_key = cfg.require_api_key()
    base = cfg.base_url.rstrip("/")
    url = base if base.endswith("/chat/completions") else f"{base}/chat/completions"
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }
    payload = build_payload(cfg, prompt, json_schema=json_schema)
    log.debug(
        "openai request model=%s structured=%s image=%s",
        cfg.model,
        json_schema is not None,
        prompt.image is not None,
    )
    data = post_json(cfg, url, headers=headers, payload=payload, transport=transport)
    return extract_reply_text(data)
