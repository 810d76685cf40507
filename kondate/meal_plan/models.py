# -*- coding: utf-8 -*-
"""Meal plan: Pydantic models."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class Meal(BaseModel):
    name: str = Field(..., description="料理名")
    ingredients: List[str] = Field(..., description="使用する食材のリスト")
    cooking_time: str = Field(..., alias="cookingTime", description="調理時間（例：15分）")
    calories: str = Field(..., description="カロリー（例：350kcal）")
    description: str = Field(..., description="料理の簡単な説明")


class NutritionSummary(BaseModel):
    total_calories: str = Field(..., alias="totalCalories", description="1日の総カロリー")
    protein: str = Field(..., description="タンパク質の総量（例：65g）")
    carbs: str = Field(..., description="炭水化物の総量（例：180g）")
    fat: str = Field(..., description="脂質の総量（例：45g）")


class MealPlan(BaseModel):
    """One day of meals as returned to the client.

    Numeric-looking values stay free-form strings ("350kcal", "15分"); the model
    writes them and nothing here checks that they add up. Unknown keys emitted by
    the model (e.g. a per-meal image URL) are dropped.
    """

    breakfast: Meal = Field(..., description="朝食")
    lunch: Meal = Field(..., description="昼食")
    dinner: Meal = Field(..., description="夕食")
    nutrition_summary: NutritionSummary = Field(..., alias="nutritionSummary", description="1日の栄養サマリー")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class GenerateMealPlanRequest(BaseModel):
    ingredients: List[str] = Field(..., description="利用可能な食材", examples=[["鶏肉", "玉ねぎ", "人参"]])


class ErrorResponse(BaseModel):
    error: str


def _inline_refs(node: Any, defs: Dict[str, Any]) -> Any:
    if isinstance(node, list):
        return [_inline_refs(v, defs) for v in node]
    if not isinstance(node, dict):
        return node
    all_of = node.get("allOf")
    if isinstance(all_of, list) and len(all_of) == 1:
        merged = dict(all_of[0])
        merged.update({k: v for k, v in node.items() if k != "allOf"})
        return _inline_refs(merged, defs)
    if "$ref" in node:
        target = dict(defs[node["$ref"].rsplit("/", 1)[-1]])
        target.update({k: v for k, v in node.items() if k != "$ref"})
        return _inline_refs(target, defs)
    out: Dict[str, Any] = {}
    for key, value in node.items():
        if key == "$defs" or (key == "title" and isinstance(value, str)):
            continue
        out[key] = _inline_refs(value, defs)
    if out.get("type") == "object":
        out["additionalProperties"] = False
    return out


def meal_plan_json_schema() -> Dict[str, Any]:
    """JSON Schema for structured-output mode.

    Strict structured outputs want every object closed and no `$ref` siblings,
    so definitions are inlined and `additionalProperties` is set to false.
    """
    raw = MealPlan.model_json_schema(by_alias=True)
    return _inline_refs(raw, raw.get("$defs", {}))
