# -*- coding: utf-8 -*-
"""Meal plan: locate and validate the JSON document in a model reply."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterator, List

from pydantic import ValidationError

from .errors import NoJsonFoundError, SchemaValidationError
from .models import MealPlan

log = logging.getLogger(__name__)


def _strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    cleaned = re.sub(r"^```(?:json)?\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"\s*```$", "", cleaned)
    return cleaned


def _greedy_span(text: str) -> str | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1]


def iter_json_object_candidates(text: str) -> List[str]:
    """Extract balanced top-level {...} candidates from arbitrary text.

    Braces inside JSON string literals are ignored, so prose such as
    `例: {a}` before the payload yields its own candidate instead of
    swallowing the real document.

    A double quote only opens a string literal at depth > 0. Outside any
    object the text is prose, where quotes need not pair up (`"朝食" は…`,
    or a lone `"`); treating one as a string opener there would hide every
    brace that follows it until the next stray quote.
    """
    cleaned = _strip_code_fence(text)

    candidates: List[str] = []
    in_str = False
    escaped = False
    depth = 0
    start_idx: int | None = None

    for i, ch in enumerate(cleaned):
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            continue

        if ch == "\"" and depth > 0:
            in_str = True
            continue

        if ch == "{":
            if depth == 0:
                start_idx = i
            depth += 1
            continue

        if ch == "}":
            if depth > 0:
                depth -= 1
                if depth == 0 and start_idx is not None:
                    candidates.append(cleaned[start_idx : i + 1])
                    start_idx = None
            continue

    return candidates


def iter_json_objects(text: str) -> Iterator[Dict[str, Any]]:
    """Yield every JSON object embedded in `text`, in order of appearance.

    The first-`{`-to-last-`}` span is only tried when no balanced candidate
    parses, which covers replies whose braces do not balance.
    """
    found = False
    for candidate in iter_json_object_candidates(text):
        try:
            parsed = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            found = True
            yield parsed
    if found:
        return

    span = _greedy_span(_strip_code_fence(text))
    if span is None:
        return
    try:
        parsed = json.loads(span)
    except ValueError:
        return
    if isinstance(parsed, dict):
        yield parsed


def extract_json_object(text: str) -> Dict[str, Any]:
    """Return the first JSON object embedded in `text`."""
    for parsed in iter_json_objects(text):
        return parsed
    raise NoJsonFoundError("JSONレスポンスが見つかりません")


def validate_meal_plan(data: Any) -> MealPlan:
    try:
        return MealPlan.model_validate(data)
    except ValidationError as exc:
        log.debug("meal plan schema errors: %s", exc.errors())
        raise SchemaValidationError(f"Meal plan does not match schema: {exc.error_count()} error(s)") from exc


def parse_meal_plan(text: str) -> MealPlan:
    """Extract the meal plan from a free-text reply.

    An explanation containing its own small JSON sample must not shadow the
    payload, so the first object that validates wins. When none does, the
    error for the first object is raised.
    """
    first_error: SchemaValidationError | None = None
    for parsed in iter_json_objects(text):
        try:
            return validate_meal_plan(parsed)
        except SchemaValidationError as exc:
            if first_error is None:
                first_error = exc
    if first_error is not None:
        raise first_error
    raise NoJsonFoundError("JSONレスポンスが見つかりません")


def parse_structured_meal_plan(text: str) -> MealPlan:
    """Validate a reply produced under schema enforcement (the whole body is JSON)."""
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise NoJsonFoundError("JSONレスポンスが見つかりません") from exc
    return validate_meal_plan(data)
