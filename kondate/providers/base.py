# -*- coding: utf-8 -*-
"""Provider plumbing shared by the OpenAI and Gemini clients."""

from __future__ import annotations

import json
from dataclasses import dataclass

import httpx

from ..meal_plan.errors import ProviderError


@dataclass(frozen=True)
class ProviderSettings:
    name: str
    base_url: str
    api_key: str | None
    model: str
    timeout: float
    temperature: float

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ProviderError(f"{self.name} API key is not set")
        return self.api_key


def _pick_str(value: object) -> str | None:
    if isinstance(value, str):
        s = value.strip()
        return s if s else None
    return None


def error_message_from_response(resp: httpx.Response) -> str:
    """Human-readable error for a failed provider response.

    Both OpenAI and Gemini wrap failures as `{"error": {"message": ...}}`.
    """
    message: str | None = None
    try:
        body = resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            message = _pick_str(err.get("message")) or _pick_str(err.get("status"))
        else:
            message = _pick_str(err) or _pick_str(body.get("message"))
    if not message:
        message = resp.text.replace("\n", " ").strip()[:200] or resp.reason_phrase
    return f"HTTP {resp.status_code}: {message}"


def post_json(
    cfg: ProviderSettings,
    url: str,
    *,
    headers: dict[str, str],
    payload: dict,
    transport: httpx.BaseTransport | None = None,
) -> dict:
    """POST `payload` and return the decoded JSON body, or raise ProviderError."""
    try:
        with httpx.Client(timeout=cfg.timeout, follow_redirects=True, transport=transport) as client:
            resp = client.post(url, headers=headers, json=payload)
    except httpx.HTTPError as exc:
        raise ProviderError(f"{cfg.name} request failed: {exc}") from exc

    if resp.status_code >= 400:
        raise ProviderError(f"{cfg.name} API error ({error_message_from_response(resp)})")
    try:
        data = resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        snippet = resp.text.replace("\n", " ").strip()[:200]
        raise ProviderError(f"{cfg.name} returned non-JSON response: {snippet}") from exc
    if not isinstance(data, dict):
        raise ProviderError(f"{cfg.name} returned an unexpected payload")
    return data
