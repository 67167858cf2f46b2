from __future__ import annotations

"""
Base Definitions for Code Generation Strategies.

Every AI provider adapter turns one fully rendered prompt into the model's raw
text answer. Prompt construction and answer cleanup live in the service.
"""

import os
from abc import ABC, abstractmethod
from typing import Tuple


class CodeGenerator(ABC):
    """
    Abstract provider adapter.

    Attributes:
        provider: Registry key of the provider (GOOGLE, ANTHROPIC).
        api_key_vars: Environment variables searched for the API key, in order.
    """

    provider: str = ""
    api_key_vars: Tuple[str, ...] = ()

    def __init__(self, model_id: str) -> None:
        self.model_id = model_id

    def api_key(self) -> str:
        """Return the first configured API key. Raises ValueError when none is set."""
        for name in self.api_key_vars:
            value = os.environ.get(name, "").strip()
            if value:
                return value
        raise ValueError(f"{self.api_key_vars[0] if self.api_key_vars else 'API key'} missing from environment variables.")

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Send a fully rendered prompt to the provider.

        Args:
            prompt: Complete instruction text.

        Returns:
            str: Raw text answer of the model.
        """
        pass
