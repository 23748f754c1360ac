"""
Unified AI Client with Provider Fallback

Attempts providers in order: OpenAI → Anthropic → None (triggers rule-based)
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class AIClient:
    """Unified AI client that tries multiple providers in order."""

    def __init__(
        self,
        *,
        openai_api_key: str | None = None,
        anthropic_api_key: str | None = None,
        openai_model: str = "gpt-4o",
        anthropic_model: str = "claude-3-5-sonnet-latest",
    ):
        """Initialize AI client with available API keys.

        Args:
            openai_api_key: OpenAI API key (priority 1)
            anthropic_api_key: Anthropic API key (priority 2)
            openai_model: Chat model used with OpenAI
            anthropic_model: Model used with Anthropic
        """
        self.openai_api_key = openai_api_key
        self.anthropic_api_key = anthropic_api_key
        self.openai_model = openai_model
        self.anthropic_model = anthropic_model

    @property
    def is_configured(self) -> bool:
        return bool(self.openai_api_key or self.anthropic_api_key)

    def generate_completion(
        self,
        *,
        system: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int = 2048,
        temperature: float = 0.5,
        json_mode: bool = False,
    ) -> str | None:
        """Generate completion using available AI provider.

        Tries providers in order:
        1. OpenAI (if key available)
        2. Anthropic (if key available)
        3. Returns None (triggers rule-based fallback)

        Args:
            system: System prompt
            messages: Conversation messages
            max_tokens: Maximum response tokens
            temperature: Sampling temperature
            json_mode: Ask the provider for a JSON object response

        Returns:
            Generated text response, or None if all providers failed
        """
        if self.openai_api_key:
            result = self._try_openai(
                system=system,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
                json_mode=json_mode,
            )
            if result is not None:
                logger.info("AI completion successful via OpenAI")
                return result

        if self.anthropic_api_key:
            result = self._try_anthropic(
                system=system,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
            if result is not None:
                logger.info("AI completion successful via Anthropic (fallback)")
                return result

        logger.warning("All AI providers failed or unavailable, falling back to rule-based")
        return None

    def generate_json(
        self,
        *,
        system: str,
        prompt: str,
        max_tokens: int = 4000,
        temperature: float = 0.5,
    ) -> dict[str, Any] | None:
        """Generate a JSON object, or None if no provider returned valid JSON."""
        text = self.generate_completion(
            system=system,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
            json_mode=True,
        )
        if text is None:
            return None

        try:
            data = json.loads(_strip_code_fence(text))
        except json.JSONDecodeError as e:
            logger.warning(f"AI response was not valid JSON: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning("AI response JSON was not an object")
            return None

        return data

    def _try_openai(
        self,
        *,
        system: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
        json_mode: bool,
    ) -> str | None:
        """Try OpenAI chat completions.

        Returns:
            Generated text or None on error
        """
        try:
            from openai import OpenAI

            client = OpenAI(api_key=self.openai_api_key)

            openai_messages: list[dict[str, Any]] = [{"role": "system", "content": system}]
            openai_messages.extend(messages)

            kwargs: dict[str, Any] = {}
            if json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            response = client.chat.completions.create(
                model=self.openai_model,
                messages=openai_messages,  # type: ignore[arg-type]
                max_tokens=max_tokens,
                temperature=temperature,
                **kwargs,
            )

            if response.choices and len(response.choices) > 0:
                return response.choices[0].message.content

            logger.warning("OpenAI response had no content")
            return None

        except Exception as e:
            logger.warning(f"OpenAI API error: {e}")
            return None

    def _try_anthropic(
        self,
        *,
        system: str,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str | None:
        """Try Anthropic Claude API.

        Returns:
            Generated text or None on error
        """
        try:
            from anthropic import Anthropic

            client = Anthropic(api_key=self.anthropic_api_key)

            response = client.messages.create(
                model=self.anthropic_model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=list(messages),  # type: ignore[arg-type]
            )

            if response.content and len(response.content) > 0:
                content_block = response.content[0]
                if hasattr(content_block, "text"):
                    return content_block.text

            logger.warning("Anthropic response had no text content")
            return None

        except Exception as e:
            logger.warning(f"Anthropic API error: {e}")
            return None


def _strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json fence if the model added one."""
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()


def get_ai_client() -> AIClient:
    """Get configured AI client instance.

    Returns:
        AIClient with available API keys from settings
    """
    from edpsych.config import settings

    return AIClient(
        openai_api_key=settings.OPENAI_API_KEY or None,
        anthropic_api_key=settings.ANTHROPIC_API_KEY or None,
        openai_model=settings.AI_MODEL,
        anthropic_model=settings.ANTHROPIC_MODEL,
    )
