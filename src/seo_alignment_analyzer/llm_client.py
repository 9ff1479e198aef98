"""
LLM client abstraction for content enhancement.

This module provides the completion provider used to rewrite text with
recommended keywords and phrases (Claude/Anthropic).
"""

import logging
import os
from typing import Optional, Protocol, runtime_checkable

import anthropic
import httpx

from .config import DEFAULT_COMPLETION_MODEL
from .errors import LLMClientError, ProviderAuthError, classify_provider_error

logger = logging.getLogger(__name__)


@runtime_checkable
class CompletionProvider(Protocol):
    """Anything that maps (system prompt, user prompt) to generated text."""

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        ...


class LLMClient:
    """
    Client for LLM-based content enhancement.

    Supports Anthropic Claude API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_COMPLETION_MODEL,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ):
        """
        Initialize the LLM client.

        Args:
            api_key: API key for the LLM provider. If None, reads from ANTHROPIC_API_KEY env var.
            model: Model identifier to use.
            max_tokens: Maximum tokens in each response.
            temperature: Sampling temperature.
        """
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

        if not self.api_key:
            raise ProviderAuthError(
                "No API key provided. Set ANTHROPIC_API_KEY environment variable "
                "or pass api_key parameter."
            )

        # Create custom httpx client with appropriate timeouts for serverless
        self._http_client = httpx.Client(
            timeout=httpx.Timeout(60.0, connect=30.0),
            follow_redirects=True,
        )
        self.client = anthropic.Anthropic(
            api_key=self.api_key,
            http_client=self._http_client,
            max_retries=0,
        )

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Generate text for a prompt.

        Args:
            system_prompt: Instructions framing the model's role.
            user_prompt: The task itself.

        Returns:
            Generated text ("" when the model returned no text blocks).

        Raises:
            ProviderError subclass: classified API failure.
        """
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except Exception as e:
            classified = classify_provider_error(e, "Completion request")
            if classified is e:
                raise
            raise classified from e

        texts = [block.text for block in response.content if getattr(block, "type", "text") == "text"]
        return "".join(texts)

    def close(self) -> None:
        self._http_client.close()

    def __enter__(self) -> "LLMClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def create_llm_client(
    api_key: Optional[str] = None,
    model: str = DEFAULT_COMPLETION_MODEL,
) -> LLMClient:
    """
    Factory function to create an LLM client.

    Args:
        api_key: Optional API key. If None, uses environment variable.
        model: Model to use.

    Returns:
        Configured LLMClient instance.
    """
    return LLMClient(api_key=api_key, model=model)


__all__ = ["CompletionProvider", "LLMClient", "LLMClientError", "create_llm_client"]
