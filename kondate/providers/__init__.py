"""Model provider clients (opaque external collaborators)."""

from .base import ProviderSettings
from .gemini import resolve_gemini_settings
from .openai_chat import resolve_openai_settings

__all__ = ["ProviderSettings", "resolve_gemini_settings", "resolve_openai_settings"]
