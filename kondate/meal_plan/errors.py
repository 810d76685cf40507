# -*- coding: utf-8 -*-
"""Meal plan: exception types."""

from __future__ import annotations


class MealPlanError(Exception):
    """Base class for every meal plan failure."""


class MealPlanInputError(MealPlanError, ValueError):
    """The caller supplied neither ingredients nor an image, or malformed input."""


class ProviderError(MealPlanError, RuntimeError):
    """The model provider could not be reached or returned no usable reply."""


class NoJsonFoundError(MealPlanError, ValueError):
    """The provider reply does not contain a parseable JSON object."""


class SchemaValidationError(MealPlanError, ValueError):
    """The provider reply parsed as JSON but is not a valid meal plan."""


class MealPlanGenerationError(MealPlanError, RuntimeError):
    """Generation failed; `message` is safe to show to end users.

    The underlying provider/extraction error is kept as `__cause__`.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
