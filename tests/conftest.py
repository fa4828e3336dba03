"""Shared fixtures: a stand-in LLM provider that replays canned replies."""

from unittest.mock import MagicMock

import pytest

from providers.base import LLMResponse


def _make_provider(*texts):
    provider = MagicMock()
    provider.name = "mock"
    provider.default_model = "mock-model"
    provider.complete.side_effect = [
        LLMResponse(
            content=text,
            input_tokens=10,
            output_tokens=20,
            model="mock-model",
            provider="mock",
        )
        for text in texts
    ]
    return provider


@pytest.fixture
def mock_provider():
    """Factory: ``mock_provider(text1, text2, ...)`` replies with each text in turn."""
    return _make_provider
