from __future__ import annotations

"""
Anthropic Claude Generation Strategy.

Sends the sketch prompt as a single user turn to the Messages API and joins
the text blocks of the answer. Requires ANTHROPIC_API_KEY.
"""

import logging

from sketchpad.core.generation.strategies.base import CodeGenerator

logger = logging.getLogger(__name__)

# --- Dynamic Dependency Check ---
ANTHROPIC_AVAILABLE = False
try:
    import anthropic
    ANTHROPIC_AVAILABLE = True
except ImportError:
    pass

MAX_OUTPUT_TOKENS = 4096


class ClaudeGenerator(CodeGenerator):
    """
    Claude models via anthropic.Anthropic.messages.create.
    """

    provider = "ANTHROPIC"
    api_key_vars = ("ANTHROPIC_API_KEY",)

    def complete(self, prompt: str) -> str:
        if not ANTHROPIC_AVAILABLE:
            raise ImportError("Library 'anthropic' is not installed.")

        client = anthropic.Anthropic(api_key=self.api_key())
        try:
            message = client.messages.create(
                model=self.model_id,
                max_tokens=MAX_OUTPUT_TOKENS,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            logger.error(f"Claude request failed ({self.model_id}): {e}")
            raise

        parts = [block.text for block in message.content if getattr(block, "type", None) == "text"]
        return "".join(parts)
