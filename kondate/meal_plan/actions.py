# -*- coding: utf-8 -*-
"""Meal plan: in-process entry points for the UI layer.

Both run on the structured-output route, so the provider enforces the schema.
They return the wire-format dict and raise MealPlanGenerationError with a
user-facing message on failure.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from .errors import MealPlanInputError
from .prompt import ImagePayload
from .service import IMAGE_STRUCTURED, TEXT_STRUCTURED, generate_meal_plan as _generate

IMAGE_MISSING_MESSAGE = "画像ファイルが見つかりません"
INGREDIENTS_MISSING_MESSAGE = "食材のリストが必要です"


def generate_meal_plan(ingredients: Sequence[str]) -> Dict[str, Any]:
    if not ingredients:
        raise MealPlanInputError(INGREDIENTS_MISSING_MESSAGE)
    return _generate(TEXT_STRUCTURED, ingredients=ingredients).to_payload()


def generate_meal_plan_from_image(image_bytes: bytes, mime_type: str) -> Dict[str, Any]:
    if not image_bytes:
        raise MealPlanInputError(IMAGE_MISSING_MESSAGE)
    image = ImagePayload(data=image_bytes, mime_type=mime_type or "image/jpeg")
    return _generate(IMAGE_STRUCTURED, image=image).to_payload()
