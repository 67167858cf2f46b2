from __future__ import annotations

"""
Google Gemini Generation Strategy.

Sends the sketch prompt through the Google GenAI SDK. The key is read from
GOOGLE_API_KEY, falling back to API_KEY.
"""

import logging

from sketchpad.core.generation.strategies.base import CodeGenerator

logger = logging.getLogger(__name__)

# --- Dynamic Dependency Check ---
GOOGLE_AVAILABLE = False
try:
    import google.genai as genai
    GOOGLE_AVAILABLE = True
except ImportError:
    pass


def _canonical_model(model_id: str) -> str:
    """'models/Gemini 2.5 Flash' -> 'gemini-2.5-flash'."""
    name = model_id.strip().lower().replace(" ", "-")
    return name[len("models/"):] if name.startswith("models/") else name


class GeminiGenerator(CodeGenerator):
    """
    Gemini models via genai.Client.models.generate_content.
    """

    provider = "GOOGLE"
    api_key_vars = ("GOOGLE_API_KEY", "API_KEY")

    def complete(self, prompt: str) -> str:
        if not GOOGLE_AVAILABLE:
            raise ImportError("Library 'google-genai' is not installed.")

        client = genai.Client(api_key=self.api_key())
        try:
            response = client.models.generate_content(
                model=_canonical_model(self.model_id),
                contents=prompt,
            )
        except Exception as e:
            logger.error(f"Gemini request failed ({self.model_id}): {e}")
            raise
        return response.text or ""
