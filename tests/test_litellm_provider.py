"""Tests for the LiteLLM provider and its model-string mapping."""

import httpx
import openai
import pytest
from unittest.mock import patch, MagicMock

from providers.base import LLMResponse, ModelError
from providers.litellm_provider import _to_litellm_model, LiteLLMProvider


class TestToLiteLLMModel:
    """Provider + model pairs map to LiteLLM model strings."""

    def test_openai_default(self):
        assert _to_litellm_model("openai", None) == "gpt-4o-mini"

    def test_openai_explicit_model(self):
        assert _to_litellm_model("openai", "gpt-4o") == "gpt-4o"
        assert _to_litellm_model("openai", "gpt-4o-mini") == "gpt-4o-mini"

    def test_anthropic_default(self):
        assert _to_litellm_model("anthropic", None) == "anthropic/claude-sonnet-4-20250514"

    def test_anthropic_alias(self):
        assert _to_litellm_model("claude", "claude-haiku") == "anthropic/claude-3-5-haiku-20241022"

    def test_anthropic_unknown_model_gets_prefix(self):
        assert _to_litellm_model("anthropic", "claude-next") == "anthropic/claude-next"

    def test_model_only_passes_through(self):
        assert _to_litellm_model(None, "gemini/gemini-2.0-flash") == "gemini/gemini-2.0-flash"

    def test_no_provider_no_model(self):
        assert _to_litellm_model(None, None) == "anthropic/claude-sonnet-4-20250514"


class TestLiteLLMProvider:
    """LiteLLMProvider with litellm.completion mocked out."""

    @pytest.fixture
    def completion_response(self):
        resp = MagicMock()
        resp.choices = [MagicMock()]
        resp.choices[0].message.content = '{"response": "Hi"}'
        resp.usage = MagicMock(prompt_tokens=12, completion_tokens=7)
        resp._hidden_params = {"response_cost": 0.002}
        resp.model = "gpt-4o-mini"
        return resp

    def test_complete_returns_llm_response(self, completion_response):
        with patch("litellm.completion", return_value=completion_response):
            provider = LiteLLMProvider(default_model="gpt-4o-mini")
            result = provider.complete("You are Autonoma.", [{"role": "user", "content": "Hi"}], max_tokens=100)

        assert isinstance(result, LLMResponse)
        assert result.content == '{"response": "Hi"}'
        assert result.input_tokens == 12
        assert result.output_tokens == 7
        assert result.cost == 0.002
        assert result.provider == "litellm"

    def test_system_prompt_goes_first(self, completion_response):
        with patch("litellm.completion", return_value=completion_response) as completion:
            LiteLLMProvider(default_model="gpt-4o-mini").complete(
                "System text", [{"role": "user", "content": "Hi"}],
            )

        messages = completion.call_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": "System text"}
        assert messages[1] == {"role": "user", "content": "Hi"}

    def test_no_system_prompt(self, completion_response):
        with patch("litellm.completion", return_value=completion_response) as completion:
            LiteLLMProvider(default_model="gpt-4o-mini").complete(None, [{"role": "user", "content": "Hi"}])

        assert completion.call_args.kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    def test_metadata_is_passed(self, completion_response):
        with patch("litellm.completion", return_value=completion_response) as completion:
            provider = LiteLLMProvider(default_model="gpt-4o-mini")
            provider.set_metadata({"agent": "intake"})
            provider.complete(None, [{"role": "user", "content": "Hi"}])

        assert completion.call_args.kwargs["metadata"] == {"agent": "intake"}

    def test_model_override(self, completion_response):
        with patch("litellm.completion", return_value=completion_response) as completion:
            LiteLLMProvider(default_model="gpt-4o-mini").complete(
                None, [{"role": "user", "content": "Hi"}], model="gpt-4o",
            )

        assert completion.call_args.kwargs["model"] == "gpt-4o"

    def test_sdk_error_becomes_model_error(self):
        error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1"))
        with patch("litellm.completion", side_effect=error):
            with pytest.raises(ModelError) as exc_info:
                LiteLLMProvider(default_model="gpt-4o-mini").complete(None, [{"role": "user", "content": "Hi"}])

        assert exc_info.value.provider == "litellm"

    def test_non_text_content_is_model_error(self, completion_response):
        completion_response.choices[0].message.content = None
        with patch("litellm.completion", return_value=completion_response):
            with pytest.raises(ModelError):
                LiteLLMProvider(default_model="gpt-4o-mini").complete(None, [{"role": "user", "content": "Hi"}])
