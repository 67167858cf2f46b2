from __future__ import annotations

"""
AI Sketch Generation Service.

Renders the assistant prompt, routes it to the configured provider strategy,
and normalizes the answer into raw script text. Any provider failure is
reported as a GenerationError carrying a user-facing message; callers apply
successful results through the ordinary edit path.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from sketchpad.core.generation.strategies import ClaudeGenerator, CodeGenerator, GeminiGenerator
from sketchpad.domain.constants import DEFAULT_MODEL_BY_PROVIDER, DEFAULT_PROVIDER
from sketchpad.domain.errors import GenerationError

logger = logging.getLogger(__name__)

USER_FACING_FAILURE = (
    "Failed to generate code. Please check your connection or try a different prompt."
)

_FENCE_RX = re.compile(r"```[a-zA-Z]*")

_PROMPT_TEMPLATE = """
You are an expert creative coder using p5.js.

User Request: "{prompt}"

Current Code Context:
{current_code}

INSTRUCTIONS:
1. Write valid p5.js JavaScript code.
2. If the user asks to modify existing code, update the 'Current Code Context'.
3. If the user asks for something new, provide a complete sketch with setup() and draw().
4. DO NOT explain the code.
5. DO NOT use markdown code blocks (like ```javascript).
6. Return ONLY the raw JavaScript string.
7. Use windowWidth and windowHeight for canvas size to ensure it fits the mobile screen.
8. If using colors, favor the p5.js color palette or nice aesthetic hex codes.
"""

_STRATEGIES: Dict[str, Type[CodeGenerator]] = {
    "GOOGLE": GeminiGenerator,
    "ANTHROPIC": ClaudeGenerator,
}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def get_generator(provider: str = DEFAULT_PROVIDER, model_id: Optional[str] = None) -> CodeGenerator:
    """
    Instantiate the strategy for a provider.

    Args:
        provider: Provider key (GOOGLE, ANTHROPIC).
        model_id: Model identifier; provider default when omitted.

    Returns:
        CodeGenerator: Ready strategy.
    """
    key = (provider or DEFAULT_PROVIDER).upper()
    if key not in _STRATEGIES:
        raise ValueError(f"Unknown AI provider: {provider}")
    return _STRATEGIES[key](model_id or DEFAULT_MODEL_BY_PROVIDER[key])


def generator_from_config(config: Dict[str, Any]) -> CodeGenerator:
    """Strategy selected by the 'ai_provider' and 'ai_model' settings."""
    return get_generator(config.get("ai_provider", DEFAULT_PROVIDER), config.get("ai_model"))


def build_prompt(prompt: str, current_code: str) -> str:
    return _PROMPT_TEMPLATE.format(prompt=prompt, current_code=current_code)


def clean_generated_code(text: str) -> str:
    """Strip markdown fences the model may emit despite the instructions."""
    return _FENCE_RX.sub("", text or "").strip()


def generate_code(prompt: str, current_code: str, generator: CodeGenerator) -> str:
    """
    Produce replacement content for a script.

    Args:
        prompt: User request.
        current_code: Content of the script being edited.
        generator: Provider strategy.

    Returns:
        str: Raw JavaScript source.
    """
    if not prompt or not prompt.strip():
        raise GenerationError("Prompt is empty.")

    try:
        answer = generator.complete(build_prompt(prompt.strip(), current_code))
    except Exception as e:
        logger.error(f"{generator.provider} generation failed: {e}")
        raise GenerationError(USER_FACING_FAILURE) from e

    code = clean_generated_code(answer)
    if not code:
        raise GenerationError(USER_FACING_FAILURE)

    logger.info(f"Generated {len(code)} characters with {generator.provider}/{generator.model_id}")
    return code


# -----------------------------------------------------------------------------
# ASSISTANT TRANSCRIPT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str
    code: Optional[str] = None
    timestamp: float = field(default_factory=time.time)


class AssistantConversation:
    """
    Chat transcript of the assistant panel.

    Records each request and its outcome; failures are recorded as assistant
    messages with the user-facing error text and re-raised.
    """

    def __init__(self, generator: CodeGenerator) -> None:
        self.generator = generator
        self.messages: List[ChatMessage] = []

    def ask(self, prompt: str, current_code: str) -> str:
        self.messages.append(ChatMessage(role="user", content=prompt))
        try:
            code = generate_code(prompt, current_code, self.generator)
        except GenerationError as e:
            self.messages.append(ChatMessage(role="assistant", content=str(e)))
            raise
        self.messages.append(ChatMessage(role="assistant", content="Code updated.", code=code))
        return code
