# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from unittest import mock

from kondate.meal_plan import actions
from kondate.meal_plan.errors import (
    MealPlanGenerationError,
    MealPlanInputError,
    NoJsonFoundError,
    ProviderError,
    SchemaValidationError,
)
from kondate.meal_plan.prompt import EXAMPLE_MEAL_PLAN, ImagePayload
from kondate.meal_plan.service import (
    HYBRID,
    IMAGE_CHAT,
    IMAGE_STRUCTURED,
    ROUTES,
    TEXT_CHAT,
    TEXT_STRUCTURED,
    call_provider,
    generate_meal_plan,
)

EXAMPLE_JSON = json.dumps(EXAMPLE_MEAL_PLAN, ensure_ascii=False)


class TestGenerateMealPlan(unittest.TestCase):
    def test_rejects_empty_input_without_calling_provider(self) -> None:
        with mock.patch("kondate.meal_plan.service.call_provider") as provider:
            for route in ROUTES.values():
                with self.assertRaises(MealPlanInputError):
                    generate_meal_plan(route, ingredients=[])
                with self.assertRaises(MealPlanInputError):
                    generate_meal_plan(route, ingredients=["  "], image=None)
            provider.assert_not_called()

    def test_returns_validated_plan(self) -> None:
        reply = f"こちらが献立です。\n{EXAMPLE_JSON}\n"
        with mock.patch("kondate.meal_plan.service.call_provider", return_value=reply) as provider:
            plan = generate_meal_plan(TEXT_CHAT, ingredients=["鶏肉", "玉ねぎ", "人参"])

        self.assertEqual(plan.to_payload(), EXAMPLE_MEAL_PLAN)
        route, prompt = provider.call_args.args
        self.assertIs(route, TEXT_CHAT)
        self.assertIn("鶏肉, 玉ねぎ, 人参", prompt.text)
        self.assertIn("JSON形式の例", prompt.text)

    def test_provider_failure_becomes_generation_error(self) -> None:
        with mock.patch(
            "kondate.meal_plan.service.call_provider",
            side_effect=ProviderError("OpenAI API error (HTTP 401: bad key)"),
        ):
            with self.assertLogs("kondate.meal_plan.service", level="ERROR"):
                with self.assertRaises(MealPlanGenerationError) as ctx:
                    generate_meal_plan(IMAGE_CHAT, image=ImagePayload(data=b"x", mime_type="image/png"))
        self.assertEqual(ctx.exception.message, "画像からの献立生成に失敗しました")
        self.assertIsInstance(ctx.exception.__cause__, ProviderError)

    def test_reply_without_json(self) -> None:
        with mock.patch("kondate.meal_plan.service.call_provider", return_value="材料が足りません"):
            with self.assertLogs("kondate.meal_plan.service", level="ERROR"):
                with self.assertRaises(MealPlanGenerationError) as ctx:
                    generate_meal_plan(HYBRID, ingredients=["豆腐"])
        self.assertEqual(ctx.exception.message, "ハイブリッド献立生成に失敗しました")
        self.assertIsInstance(ctx.exception.__cause__, NoJsonFoundError)

    def test_reply_failing_schema(self) -> None:
        partial = json.dumps({k: v for k, v in EXAMPLE_MEAL_PLAN.items() if k != "nutritionSummary"})
        with mock.patch("kondate.meal_plan.service.call_provider", return_value=partial):
            with self.assertLogs("kondate.meal_plan.service", level="ERROR"):
                with self.assertRaises(MealPlanGenerationError) as ctx:
                    generate_meal_plan(TEXT_CHAT, ingredients=["卵"])
        self.assertIsInstance(ctx.exception.__cause__, SchemaValidationError)

    def test_unexpected_error_is_wrapped(self) -> None:
        with mock.patch("kondate.meal_plan.service.call_provider", side_effect=KeyError("choices")):
            with self.assertLogs("kondate.meal_plan.service", level="ERROR"):
                with self.assertRaises(MealPlanGenerationError) as ctx:
                    generate_meal_plan(TEXT_CHAT, ingredients=["卵"])
        self.assertEqual(ctx.exception.message, "献立の生成に失敗しました")

    def test_structured_route_skips_brace_scanning(self) -> None:
        with mock.patch("kondate.meal_plan.service.call_provider", return_value=f"献立: {EXAMPLE_JSON}"):
            with self.assertLogs("kondate.meal_plan.service", level="ERROR"):
                with self.assertRaises(MealPlanGenerationError):
                    generate_meal_plan(TEXT_STRUCTURED, ingredients=["卵"])

        with mock.patch("kondate.meal_plan.service.call_provider", return_value=EXAMPLE_JSON) as provider:
            plan = generate_meal_plan(TEXT_STRUCTURED, ingredients=["卵"])
        self.assertEqual(plan.to_payload(), EXAMPLE_MEAL_PLAN)
        self.assertNotIn("JSON形式の例", provider.call_args.args[1].text)


class TestCallProvider(unittest.TestCase):
    def test_structured_route_passes_schema_to_openai(self) -> None:
        with mock.patch("kondate.providers.openai_chat.complete", return_value="{}") as complete:
            call_provider(TEXT_STRUCTURED, mock.sentinel.prompt)
        cfg, prompt = complete.call_args.args
        self.assertEqual(cfg.name, "OpenAI")
        self.assertEqual(cfg.model, TEXT_STRUCTURED.model)
        self.assertIs(prompt, mock.sentinel.prompt)
        self.assertEqual(complete.call_args.kwargs["json_schema"]["type"], "object")

    def test_chat_route_sends_no_schema(self) -> None:
        with mock.patch("kondate.providers.openai_chat.complete", return_value="{}") as complete:
            call_provider(TEXT_CHAT, mock.sentinel.prompt)
        self.assertIsNone(complete.call_args.kwargs["json_schema"])

    def test_hybrid_route_uses_gemini(self) -> None:
        with mock.patch("kondate.providers.gemini.complete", return_value="{}") as complete:
            call_provider(HYBRID, mock.sentinel.prompt)
        cfg = complete.call_args.args[0]
        self.assertEqual(cfg.name, "Gemini")
        self.assertEqual(cfg.model, HYBRID.model)


class TestActions(unittest.TestCase):
    def test_text_action(self) -> None:
        with mock.patch("kondate.meal_plan.service.call_provider", return_value=EXAMPLE_JSON) as provider:
            result = actions.generate_meal_plan(["鶏肉", "玉ねぎ", "人参"])
        self.assertEqual(result, EXAMPLE_MEAL_PLAN)
        self.assertIs(provider.call_args.args[0], TEXT_STRUCTURED)

    def test_image_action(self) -> None:
        with mock.patch("kondate.meal_plan.service.call_provider", return_value=EXAMPLE_JSON) as provider:
            result = actions.generate_meal_plan_from_image(b"\xff\xd8\xff", "image/jpeg")
        self.assertEqual(result, EXAMPLE_MEAL_PLAN)
        route, prompt = provider.call_args.args
        self.assertIs(route, IMAGE_STRUCTURED)
        self.assertEqual(prompt.image.mime_type, "image/jpeg")

    def test_missing_inputs(self) -> None:
        with mock.patch("kondate.meal_plan.service.call_provider") as provider:
            with self.assertRaises(MealPlanInputError):
                actions.generate_meal_plan([])
            with self.assertRaises(MealPlanInputError) as ctx:
                actions.generate_meal_plan_from_image(b"", "image/png")
            self.assertEqual(str(ctx.exception), "画像ファイルが見つかりません")
            provider.assert_not_called()

    def test_failure_message(self) -> None:
        with mock.patch("kondate.meal_plan.service.call_provider", side_effect=ProviderError("timeout")):
            with self.assertLogs("kondate.meal_plan.service", level="ERROR"):
                with self.assertRaises(MealPlanGenerationError) as ctx:
                    actions.generate_meal_plan(["卵"])
        self.assertEqual(str(ctx.exception), "献立の生成に失敗しました")


if __name__ == "__main__":
    unittest.main()
