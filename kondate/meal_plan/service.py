# -*- coding: utf-8 -*-
"""Meal plan: generation routes and the shared orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..config import settings
from ..providers import gemini, openai_chat
from .errors import MealPlanError, MealPlanGenerationError, MealPlanInputError
from .extraction import parse_meal_plan, parse_structured_meal_plan
from .models import MealPlan, meal_plan_json_schema
from .prompt import ImagePayload, MealPlanPrompt, build_meal_plan_prompt, clean_ingredients

log = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "画像または食材リストのどちらかは必要です"


@dataclass(frozen=True)
class GenerationRoute:
    """Which provider/model serves a request and how its reply is read.

    `structured` routes pass the schema to the provider and skip brace
    scanning; they are only available on the OpenAI provider.
    """

    name: str
    provider: str
    model_setting: str
    structured: bool
    failure_message: str

    @property
    def model(self) -> str:
        return getattr(settings, self.model_setting)


TEXT_STRUCTURED = GenerationRoute(
    name="text_structured",
    provider="openai",
    model_setting="structured_model",
    structured=True,
    failure_message="献立の生成に失敗しました",
)
IMAGE_STRUCTURED = GenerationRoute(
    name="image_structured",
    provider="openai",
    model_setting="structured_model",
    structured=True,
    failure_message="画像からの献立生成に失敗しました",
)
TEXT_CHAT = GenerationRoute(
    name="text_chat",
    provider="openai",
    model_setting="text_model",
    structured=False,
    failure_message="献立の生成に失敗しました",
)
IMAGE_CHAT = GenerationRoute(
    name="image_chat",
    provider="openai",
    model_setting="vision_model",
    structured=False,
    failure_message="画像からの献立生成に失敗しました",
)
HYBRID = GenerationRoute(
    name="hybrid",
    provider="gemini",
    model_setting="hybrid_model",
    structured=False,
    failure_message="ハイブリッド献立生成に失敗しました",
)

ROUTES = {r.name: r for r in (TEXT_STRUCTURED, IMAGE_STRUCTURED, TEXT_CHAT, IMAGE_CHAT, HYBRID)}


def call_provider(route: GenerationRoute, prompt: MealPlanPrompt) -> str:
    if route.provider == "gemini":
        if route.structured:
            raise ValueError("structured generation is not available for gemini routes")
        return gemini.complete(gemini.resolve_gemini_settings(route.model), prompt)
    if route.provider == "openai":
        schema = meal_plan_json_schema() if route.structured else None
        return openai_chat.complete(openai_chat.resolve_openai_settings(route.model), prompt, json_schema=schema)
    raise ValueError(f"Unknown provider: {route.provider}")


def generate_meal_plan(
    route: GenerationRoute,
    *,
    ingredients: Sequence[str] | None = None,
    image: ImagePayload | None = None,
) -> MealPlan:
    """Generate and validate one meal plan.

    Raises MealPlanInputError before any provider call when there is nothing to
    plan from; every later failure surfaces as MealPlanGenerationError carrying
    the route's user-facing message.
    """
    names = clean_ingredients(ingredients)
    if not names and image is None:
        raise MealPlanInputError(MISSING_INPUT_MESSAGE)

    prompt = build_meal_plan_prompt(names, image, structured=route.structured)
    try:
        text = call_provider(route, prompt)
        if route.structured:
            plan = parse_structured_meal_plan(text)
        else:
            plan = parse_meal_plan(text)
    except MealPlanError as exc:
        log.error("meal plan generation failed (route=%s model=%s): %s", route.name, route.model, exc, exc_info=True)
        raise MealPlanGenerationError(route.failure_message) from exc
    except Exception as exc:
        log.exception("unexpected error during meal plan generation (route=%s)", route.name)
        raise MealPlanGenerationError(route.failure_message) from exc

    log.info(
        "meal plan generated (route=%s model=%s ingredients=%d image=%s)",
        route.name,
        route.model,
        len(names),
        image is not None,
    )
    return plan
