# -*- coding: utf-8 -*-
"""Meal plan: API endpoints."""

from __future__ import annotations

import json
import logging
import mimetypes
from typing import Any, List, Optional, Sequence

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from ..config import settings
from .errors import MealPlanGenerationError, MealPlanInputError
from .models import ErrorResponse, GenerateMealPlanRequest, MealPlan
from .prompt import ImagePayload, clean_ingredients
from .service import HYBRID, IMAGE_CHAT, TEXT_CHAT, GenerationRoute, generate_meal_plan

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Meal plan"])

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

INGREDIENTS_REQUIRED = "食材のリストが必要です"
IMAGE_REQUIRED = "画像ファイルが見つかりません"
IMAGE_TOO_LARGE = "画像ファイルが大きすぎます"
INGREDIENTS_MALFORMED = "食材リストの形式が正しくありません"

INGREDIENTS_PATH = "/api/generate-meal-plan"
IMAGE_PATH = "/api/generate-meal-plan-from-image"
HYBRID_PATH = "/api/generate-meal-plan-hybrid"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def invalid_request_message(path: str, errors: Sequence[Any]) -> Optional[str]:
    """Client error message for a request FastAPI could not bind, or None off these routes.

    A malformed JSON body, a text part where a file belongs, or a file part
    where the ingredient string belongs all fail before the handler runs.
    """
    if path == INGREDIENTS_PATH:
        return INGREDIENTS_REQUIRED
    if path == IMAGE_PATH:
        return IMAGE_REQUIRED
    if path == HYBRID_PATH:
        fields = {err["loc"][1] for err in errors if len(err.get("loc", ())) > 1}
        return INGREDIENTS_MALFORMED if "ingredients" in fields else IMAGE_REQUIRED
    return None


def _image_mime(upload: UploadFile) -> str:
    mime = (upload.content_type or "").lower()
    if mime and "octet-stream" not in mime:
        return mime
    guessed, _ = mimetypes.guess_type(upload.filename or "")
    return guessed or "image/jpeg"


def _read_image(upload: UploadFile | None) -> ImagePayload | JSONResponse | None:
    if upload is None:
        return None
    limit = settings.max_image_bytes
    if upload.size is not None and upload.size > limit:
        log.info("rejected image upload: %d bytes > %d", upload.size, limit)
        return _error(400, IMAGE_TOO_LARGE)
    data = upload.file.read(limit + 1)
    if not data:
        return None
    if len(data) > limit:
        log.info("rejected image upload: more than %d bytes", limit)
        return _error(400, IMAGE_TOO_LARGE)
    return ImagePayload(data=data, mime_type=_image_mime(upload))


def _run(
    route: GenerationRoute,
    *,
    ingredients: List[str] | None = None,
    image: ImagePayload | None = None,
):
    try:
        return generate_meal_plan(route, ingredients=ingredients, image=image)
    except MealPlanInputError as exc:
        return _error(400, str(exc))
    except MealPlanGenerationError as exc:
        return _error(500, exc.message)


@router.post(
    "/generate-meal-plan",
    response_model=MealPlan,
    responses=_ERROR_RESPONSES,
    summary="Generate a meal plan from an ingredient list",
)
def generate_from_ingredients(request: GenerateMealPlanRequest):
    ingredients = clean_ingredients(request.ingredients)
    if not ingredients:
        log.info("rejected meal plan request: no usable ingredients")
        return _error(400, INGREDIENTS_REQUIRED)
    return _run(TEXT_CHAT, ingredients=ingredients)


@router.post(
    "/generate-meal-plan-from-image",
    response_model=MealPlan,
    responses=_ERROR_RESPONSES,
    summary="Generate a meal plan from a photo of ingredients",
)
def generate_from_image(image: Optional[UploadFile] = File(default=None)):
    payload = _read_image(image)
    if isinstance(payload, JSONResponse):
        return payload
    if payload is None:
        return _error(400, IMAGE_REQUIRED)
    return _run(IMAGE_CHAT, image=payload)


@router.post(
    "/generate-meal-plan-hybrid",
    response_model=MealPlan,
    responses=_ERROR_RESPONSES,
    summary="Generate a meal plan from an ingredient list and/or a photo",
)
def generate_hybrid(
    image: Optional[UploadFile] = File(default=None),
    ingredients: Optional[str] = Form(default=None, description="JSON-encoded string array"),
):
    names: List[str] = []
    if ingredients:
        try:
            decoded = json.loads(ingredients)
        except ValueError:
            log.info("rejected hybrid request: ingredients is not JSON")
            return _error(400, INGREDIENTS_MALFORMED)
        if not isinstance(decoded, list) or not all(isinstance(x, str) for x in decoded):
            log.info("rejected hybrid request: ingredients is not a string array")
            return _error(400, INGREDIENTS_MALFORMED)
        names = clean_ingredients(decoded)

    payload = _read_image(image)
    if isinstance(payload, JSONResponse):
        return payload
    return _run(HYBRID, ingredients=names, image=payload)
