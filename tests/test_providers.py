"""Tests for the SDK-backed providers and the provider factory."""

import httpx
import anthropic
import openai
import pytest
from unittest.mock import MagicMock, patch

from config import settings
from providers import ModelError, get_provider, list_providers
from providers.anthropic_provider import AnthropicProvider
from providers.litellm_provider import LiteLLMProvider
from providers.openai_provider import OpenAIProvider

MESSAGES = [{"role": "user", "content": "Hello"}]


def _anthropic_reply(text="Hi there", block_type="text"):
    block = MagicMock(type=block_type, text=text)
    response = MagicMock(content=[block])
    response.usage = MagicMock(input_tokens=11, output_tokens=3)
    return response


def _openai_reply(text="Hi there"):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = text
    response.usage = MagicMock(prompt_tokens=9, completion_tokens=4)
    return response


class TestAnthropicProvider:
    """Anthropic messages API with a mocked client."""

    def test_complete(self):
        client = MagicMock()
        client.messages.create.return_value = _anthropic_reply()
        provider = AnthropicProvider(api_key="sk-test", client=client)

        result = provider.complete("Be brief.", MESSAGES, model="sonnet", max_tokens=256)

        assert result.content == "Hi there"
        assert result.input_tokens == 11
        assert result.output_tokens == 3
        assert result.model == "claude-sonnet-4-20250514"
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["system"] == "Be brief."
        assert kwargs["max_tokens"] == 256
        assert kwargs["messages"] == MESSAGES

    def test_no_system_prompt_is_omitted(self):
        client = MagicMock()
        client.messages.create.return_value = _anthropic_reply()

        AnthropicProvider(api_key="sk-test", client=client).complete(None, MESSAGES)

        assert "system" not in client.messages.create.call_args.kwargs

    def test_api_error_becomes_model_error(self):
        client = MagicMock()
        client.messages.create.side_effect = anthropic.APIConnectionError(
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"),
        )

        with pytest.raises(ModelError) as exc_info:
            AnthropicProvider(api_key="sk-test", client=client).complete(None, MESSAGES)

        assert exc_info.value.provider == "anthropic"

    def test_non_text_block_is_model_error(self):
        client = MagicMock()
        client.messages.create.return_value = _anthropic_reply(block_type="tool_use")

        with pytest.raises(ModelError, match="Unexpected response type"):
            AnthropicProvider(api_key="sk-test", client=client).complete(None, MESSAGES)

    def test_empty_content_is_model_error(self):
        client = MagicMock()
        client.messages.create.return_value = MagicMock(content=[])

        with pytest.raises(ModelError):
            AnthropicProvider(api_key="sk-test", client=client).complete(None, MESSAGES)

    def test_availability_follows_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        assert AnthropicProvider(api_key="sk-test").is_available()
        assert not AnthropicProvider().is_available()


class TestOpenAIProvider:
    """OpenAI chat completions with a mocked client."""

    def test_complete_prepends_system_message(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_reply()

        result = OpenAIProvider(api_key="sk-test", client=client).complete("Be brief.", MESSAGES)

        assert result.content == "Hi there"
        assert result.input_tokens == 9
        assert result.model == "gpt-4o"
        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [{"role": "system", "content": "Be brief."}, *MESSAGES]

    def test_api_error_becomes_model_error(self):
        client = MagicMock()
        client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"),
        )

        with pytest.raises(ModelError):
            OpenAIProvider(api_key="sk-test", client=client).complete(None, MESSAGES)

    def test_missing_content_is_model_error(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_reply(text=None)

        with pytest.raises(ModelError):
            OpenAIProvider(api_key="sk-test", client=client).complete(None, MESSAGES)


class TestGetProvider:
    """Provider selection by name and by model."""

    def test_explicit_names(self):
        assert isinstance(get_provider("anthropic"), AnthropicProvider)
        assert isinstance(get_provider("claude"), AnthropicProvider)
        assert isinstance(get_provider("openai"), OpenAIProvider)
        assert isinstance(get_provider("GPT"), OpenAIProvider)

    def test_litellm(self):
        provider = get_provider("litellm", model="gpt-4o")
        assert isinstance(provider, LiteLLMProvider)
        assert provider.default_model == "gpt-4o"

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            get_provider("mistral")

    def test_detect_from_model(self):
        assert isinstance(get_provider(model="claude-opus"), AnthropicProvider)
        assert isinstance(get_provider(model="haiku"), AnthropicProvider)
        assert isinstance(get_provider(model="gpt-4o-mini"), OpenAIProvider)
        assert isinstance(get_provider(model="o1-mini"), OpenAIProvider)

    def test_unrecognised_model_routes_through_litellm(self):
        provider = get_provider(model="gemini/gemini-2.0-flash")
        assert isinstance(provider, LiteLLMProvider)
        assert provider.default_model == "gemini/gemini-2.0-flash"

    def test_default_from_settings(self):
        with patch.object(settings, "default_provider", "openai"):
            assert isinstance(get_provider(), OpenAIProvider)

    def test_settings_key_is_used(self):
        with patch.object(settings, "anthropic_api_key", "sk-from-settings"):
            assert get_provider("anthropic").api_key == "sk-from-settings"

    def test_list_providers(self):
        providers = list_providers()
        assert set(providers) == {"anthropic", "openai", "litellm"}
        assert providers["litellm"] is True
