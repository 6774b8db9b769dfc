"""Tests for the smart suggestion service with a stubbed OpenAI client."""

import asyncio
import json
from types import SimpleNamespace

import pytest

from services.openai.response_parser import parse_function_arguments
from services.openai.suggestion_schema import FUNCTION_NAME
from services.openai.suggestion_service import MAX_SUGGESTIONS, SmartSuggestionService


class _StubResponses:
    def __init__(self, suggestions):
        self.suggestions = suggestions
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        call = SimpleNamespace(
            type="function_call",
            name=FUNCTION_NAME,
            arguments=json.dumps({"suggestions": self.suggestions}),
        )
        return SimpleNamespace(
            output=[SimpleNamespace(type="reasoning"), call],
            usage=SimpleNamespace(input_tokens=42, output_tokens=7),
        )


def _client(suggestions):
    return SimpleNamespace(responses=_StubResponses(suggestions))


def test_suggest_returns_cleaned_suggestions_and_usage():
    client = _client(["A2", " A2 ", "B1", ""])
    service = SmartSuggestionService(client, model="test-model")

    result = asyncio.run(service.suggest("Shade", existing_data="A", contextual_information="Zirconia crown"))

    assert result["suggestions"] == ["A2", "B1"]
    assert result["input_tokens"] == 42
    assert result["output_tokens"] == 7
    assert result["latency"] >= 0

    (call,) = client.responses.calls
    assert call["model"] == "test-model"
    assert call["tool_choice"] == {"type": "function", "name": FUNCTION_NAME}
    user_text = call["input"][1]["content"][0]["text"]
    assert "Field Description: Shade" in user_text
    assert "Contextual Information: Zirconia crown" in user_text


def test_suggest_caps_number_of_suggestions():
    client = _client([f"S{i}" for i in range(MAX_SUGGESTIONS + 3)])
    result = asyncio.run(SmartSuggestionService(client).suggest("Notes"))
    assert len(result["suggestions"]) == MAX_SUGGESTIONS


def test_suggest_requires_field_description():
    with pytest.raises(ValueError):
        asyncio.run(SmartSuggestionService(_client([])).suggest("   "))


def test_missing_function_call_raises():
    response = SimpleNamespace(output=[SimpleNamespace(type="message")])
    with pytest.raises(RuntimeError):
        parse_function_arguments(response, tool_name=FUNCTION_NAME)
