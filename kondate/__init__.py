"""AI meal planner backend: ingredients or a photo in, one-day meal plan out."""

__version__ = "1.0.0"
