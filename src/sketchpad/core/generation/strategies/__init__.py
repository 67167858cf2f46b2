from __future__ import annotations

from .anthropic import ANTHROPIC_AVAILABLE, ClaudeGenerator
from .base import CodeGenerator
from .google import GOOGLE_AVAILABLE, GeminiGenerator

__all__ = [
    "CodeGenerator",
    "GeminiGenerator",
    "GOOGLE_AVAILABLE",
    "ClaudeGenerator",
    "ANTHROPIC_AVAILABLE",
]
