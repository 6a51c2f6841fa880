"""
Tests for llm.py - model call wiring and reply extraction.
"""
import asyncio
import pytest
import sys
import os

import anthropic

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
import llm
from llm import extract_reply


class TestExtractReply:
    """Reply extraction over the result shapes a model may return."""

    def test_plain_string(self):
        assert extract_reply("hi") == "hi"

    def test_response_field(self):
        assert extract_reply({"response": "hi"}) == "hi"

    def test_chat_completion_shape(self):
        result = {"choices": [{"message": {"role": "assistant", "content": "hi"}}]}
        assert extract_reply(result) == "hi"

    def test_anthropic_content_blocks(self):
        result = {"content": [{"type": "text", "text": "Hello "}, {"type": "text", "text": "there"}]}
        assert extract_reply(result) == "Hello there"

    def test_response_field_beats_choices(self):
        result = {"response": "first", "choices": [{"message": {"content": "second"}}]}
        assert extract_reply(result) == "first"

    def test_non_string_response_falls_through(self):
        result = {"response": None, "choices": [{"message": {"content": "from choices"}}]}
        assert extract_reply(result) == "from choices"

    def test_unknown_shape_serialized(self):
        assert extract_reply({"foo": 1}) == '{"foo": 1}'

    def test_empty_choices_serialized(self):
        assert extract_reply({"choices": []}) == '{"choices": []}'

    def test_non_json_values_stringified(self):
        reply = extract_reply({"value": object()})
        assert reply.startswith('{"value": "<object object')


class _FakeResponse:
    model = "fake-model"
    stop_reason = "end_turn"

    def model_dump(self):
        return {"content": [{"type": "text", "text": "ok"}]}


class _FakeMessages:
    def __init__(self):
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return _FakeResponse()


class _FakeClient:
    def __init__(self):
        self.messages = _FakeMessages()


class TestRunModel:
    """run_model passes the system prompt separately and returns plain data."""

    def test_system_message_split_out(self, monkeypatch):
        fake = _FakeClient()
        monkeypatch.setattr(config, "ANTHROPIC_API_KEY", "test-key")
        monkeypatch.setattr(llm, "_client", fake)

        result = asyncio.run(llm.run_model([
            {"role": "system", "content": "be nice"},
            {"role": "user", "content": "hello"},
        ]))

        assert result == {"content": [{"type": "text", "text": "ok"}]}
        assert fake.messages.kwargs["system"] == "be nice"
        assert fake.messages.kwargs["messages"] == [{"role": "user", "content": "hello"}]
        assert fake.messages.kwargs["model"] == config.LLM_MODEL

    def test_explicit_model(self, monkeypatch):
        fake = _FakeClient()
        monkeypatch.setattr(config, "ANTHROPIC_API_KEY", "test-key")
        monkeypatch.setattr(llm, "_client", fake)

        asyncio.run(llm.run_model([{"role": "user", "content": "hello"}], model="other-model"))

        assert fake.messages.kwargs["model"] == "other-model"
        assert "system" not in fake.messages.kwargs

    def test_missing_api_key_raises(self, monkeypatch):
        monkeypatch.setattr(config, "ANTHROPIC_API_KEY", None)
        monkeypatch.setattr(llm, "_client", None)

        with pytest.raises(anthropic.AnthropicError):
            asyncio.run(llm.run_model([{"role": "user", "content": "hello"}]))
