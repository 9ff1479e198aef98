"""Tests for the Anthropic completion client."""

from unittest.mock import MagicMock, patch

import pytest

from fakes import FakeAPIError
from seo_alignment_analyzer.errors import ProviderAuthError, ProviderRateLimitedError
from seo_alignment_analyzer.llm_client import CompletionProvider, LLMClient, create_llm_client


@pytest.fixture
def mock_anthropic():
    with patch("seo_alignment_analyzer.llm_client.anthropic.Anthropic") as mock_cls:
        yield mock_cls


class TestLLMClient:
    """Tests for LLMClient."""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(ProviderAuthError, match="ANTHROPIC_API_KEY"):
            LLMClient()

    def test_reads_key_from_environment(self, monkeypatch, mock_anthropic):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
        client = LLMClient()
        assert client.api_key == "env-key"
        client.close()

    def test_complete_joins_text_blocks(self, mock_anthropic):
        mock_anthropic.return_value.messages.create.return_value = MagicMock(
            content=[
                MagicMock(type="text", text="Hello "),
                MagicMock(type="tool_use", text="ignored"),
                MagicMock(type="text", text="world"),
            ]
        )

        with LLMClient(api_key="test-key", temperature=0.3, max_tokens=2000) as client:
            result = client.complete("system prompt", "user prompt")

        assert result == "Hello world"
        kwargs = mock_anthropic.return_value.messages.create.call_args.kwargs
        assert kwargs["system"] == "system prompt"
        assert kwargs["messages"] == [{"role": "user", "content": "user prompt"}]
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 2000

    def test_api_errors_are_classified(self, mock_anthropic):
        mock_anthropic.return_value.messages.create.side_effect = FakeAPIError(
            "rate limited", status_code=429
        )
        with LLMClient(api_key="test-key") as client:
            with pytest.raises(ProviderRateLimitedError):
                client.complete("system", "user")

    def test_classified_errors_pass_through(self, mock_anthropic):
        original = ProviderAuthError("already classified")
        mock_anthropic.return_value.messages.create.side_effect = original
        with LLMClient(api_key="test-key") as client:
            with pytest.raises(ProviderAuthError) as exc_info:
                client.complete("system", "user")
        assert exc_info.value is original
        assert exc_info.value.__cause__ is None

    def test_satisfies_completion_protocol(self, mock_anthropic):
        client = create_llm_client(api_key="test-key")
        assert isinstance(client, CompletionProvider)
        client.close()
