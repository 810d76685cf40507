# -*- coding: utf-8 -*-
"""Meal plan: shared prompt template for every generation route."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    mime_type: str

    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64()}"


@dataclass(frozen=True)
class MealPlanPrompt:
    text: str
    image: Optional[ImagePayload] = None


EXAMPLE_MEAL_PLAN: Dict[str, Any] = {
    "breakfast": {
        "name": "和風オムレツ",
        "ingredients": ["卵", "玉ねぎ", "醤油"],
        "cookingTime": "15分",
        "calories": "350kcal",
        "description": "ふわふわの卵に玉ねぎの甘味がマッチした和風オムレツ",
    },
    "lunch": {
        "name": "チキン野菜炒め",
        "ingredients": ["鶏肉", "人参", "ピーマン"],
        "cookingTime": "20分",
        "calories": "550kcal",
        "description": "彩り豊かな野菜と鶏肉のヘルシー炒め",
    },
    "dinner": {
        "name": "豚の生姜焼き",
        "ingredients": ["豚肉", "玉ねぎ", "生姜"],
        "cookingTime": "25分",
        "calories": "650kcal",
        "description": "ご飯が進む定番の生姜焼き",
    },
    "nutritionSummary": {
        "totalCalories": "1550kcal",
        "protein": "65g",
        "carbs": "180g",
        "fat": "45g",
    },
}

CALORIE_RANGE_KCAL = (1800, 2200)

_GUIDELINES = (
    "栄養バランスの目安:\n"
    "- タンパク質: 体重1kgあたり1-1.2g\n"
    "- 炭水化物: 総カロリーの50-60%\n"
    "- 脂質: 総カロリーの20-30%\n"
)


def clean_ingredients(ingredients: Sequence[str] | None) -> List[str]:
    """Trim names and drop blanks, keeping the caller's order."""
    if not ingredients:
        return []
    return [name.strip() for name in ingredients if name and name.strip()]


def _requirements(*, has_ingredients: bool, has_image: bool) -> List[str]:
    low, high = CALORIE_RANGE_KCAL
    rules: List[str] = []
    if has_image:
        rules.append("画像から食材を正確に識別する")
    if has_image and has_ingredients:
        rules.append("提供された全ての食材情報（テキストと画像の両方）を活用する")
        rules.append("テキストで提供された食材も必ず考慮に入れる")
    else:
        rules.append("各食事で提供された食材を可能な限り活用する")
    rules.extend(
        [
            "栄養バランスを考慮する（タンパク質、炭水化物、脂質、ビタミン、ミネラル）",
            "日本の家庭料理を中心とする",
            "調理時間は現実的な範囲で設定する",
            f"カロリーは成人の1日の摂取目安（{low}-{high}kcal）を考慮する",
            "各料理には簡潔で魅力的な説明を付ける",
            "足りない食材がある場合は、一般的な調味料や基本的な食材（米、卵、調味料など）を追加して良い",
        ]
    )
    return rules


def build_meal_plan_prompt(
    ingredients: Sequence[str] | None = None,
    image: ImagePayload | None = None,
    *,
    structured: bool = False,
) -> MealPlanPrompt:
    """Render the one-day meal plan instruction.

    `structured` drops the example document, since the schema travels with the
    request in that mode. Callers validate that at least one input is present.
    """
    names = clean_ingredients(ingredients)

    lines = [
        "栄養バランスの良い1日の献立（朝食、昼食、夕食）を提案してください。",
        "必ずJSON形式のみで回答してください。",
        "",
        "利用可能な情報:",
    ]
    if names:
        lines.append(f"- 利用可能な食材: {', '.join(names)}")
    if image is not None:
        lines.append("- 画像: 添付の画像に写っている食材を認識してください")
    lines.append("")
    lines.append("要件:")
    lines.extend(f"- {rule}" for rule in _requirements(has_ingredients=bool(names), has_image=image is not None))
    lines.append("")
    text = "\n".join(lines) + "\n" + _GUIDELINES

    if not structured:
        example = json.dumps(EXAMPLE_MEAL_PLAN, ensure_ascii=False, indent=2)
        text += f"\nJSON形式の例:\n{example}\n"

    return MealPlanPrompt(text=text, image=image)
