"""Tests for the generation service client."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from schedule_engine.ai.client import VertexGenerationService, message_text
from schedule_engine.config import EngineSettings
from schedule_engine.errors import GenerationError


class FakeChat:
    """Chat model stand-in with a scripted ainvoke."""

    def __init__(self, response: Any = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[list] = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.response


def service_with(chat: FakeChat) -> VertexGenerationService:
    service = VertexGenerationService("gemini-2.0-flash")
    service._chat = chat
    return service


class TestMessageText:
    """Tests for reading text out of chat responses."""

    def test_plain_string(self):
        assert message_text('{"Monday": []}') == '{"Monday": []}'

    def test_string_content(self):
        assert message_text(AIMessage(content="hello")) == "hello"

    def test_list_of_parts(self):
        message = AIMessage(content=[
            {"type": "text", "text": '{"Friday": '},
            "[]",
            {"type": "image_url", "image_url": "ignored"},
            {"type": "text", "text": "}"},
        ])
        assert message_text(message) == '{"Friday": []}'

    def test_other_content(self):
        assert message_text(42) == "42"


class TestVertexGenerationService:
    """Tests for the ChatVertexAI-backed client."""

    def test_from_settings(self):
        settings = EngineSettings(
            llm_model_name="gemini-test",
            vertex_project="proj",
            vertex_region="europe-west2",
            generation_timeout_seconds=12,
        )
        service = VertexGenerationService.from_settings(settings)

        assert service.model_name == "gemini-test"
        assert service.vertex_project == "proj"
        assert service.vertex_region == "europe-west2"

    def test_generate_returns_text(self):
        chat = FakeChat(AIMessage(content='  {"Monday": []}\n'))
        text = asyncio.run(service_with(chat).generate("the prompt"))

        assert text == '{"Monday": []}'
        [messages] = chat.calls
        assert isinstance(messages[0], HumanMessage)
        assert messages[0].content == "the prompt"

    def test_generate_joins_parts(self):
        chat = FakeChat(AIMessage(content=[{"type": "text", "text": '{"Monday"'}, {"type": "text", "text": ": []}"}]))
        assert asyncio.run(service_with(chat).generate("p")) == '{"Monday": []}'

    @pytest.mark.parametrize("content", ["", "   ", []])
    def test_empty_response(self, content):
        chat = FakeChat(AIMessage(content=content))
        with pytest.raises(GenerationError, match="empty response"):
            asyncio.run(service_with(chat).generate("p"))

    def test_call_failure_wrapped(self):
        error = RuntimeError("403 permission denied")
        chat = FakeChat(error=error)

        with pytest.raises(GenerationError, match="permission denied") as exc_info:
            asyncio.run(service_with(chat).generate("p"))
        assert exc_info.value.__cause__ is error
