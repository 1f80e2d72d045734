"""
Clients for the external text-generation service.

The merge adapter depends only on the GenerationService protocol: one
prompt in, raw text out. Any transport or service failure surfaces as
GenerationError.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from langchain_core.messages import HumanMessage

from schedule_engine.config import EngineSettings
from schedule_engine.errors import GenerationError
from schedule_engine.logging import get_logger

logger = get_logger(__name__)


class GenerationService(Protocol):
    """Prompt-in, text-out contract with the generation service."""

    async def generate(self, prompt: str) -> str:
        ...


def message_text(resp: Any) -> str:
    """Plain text of a chat model response (string or list-of-parts content)."""
    if isinstance(resp, str):
        return resp
    content = getattr(resp, "content", resp)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return str(content)


class VertexGenerationService:
    """
    Gemini on Vertex AI through LangChain's ChatVertexAI.

    The chat model is created on first use so that constructing the service
    needs no credentials.
    """

    def __init__(
        self,
        model_name: str,
        *,
        vertex_project: Optional[str] = None,
        vertex_region: str = "us-central1",
        temperature: float = 0.2,
        timeout: float | None = None,
    ):
        self.model_name = model_name
        self.vertex_project = vertex_project
        self.vertex_region = vertex_region
        self.temperature = temperature
        self._timeout = timeout
        self._chat = None

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> "VertexGenerationService":
        return cls(
            settings.llm_model_name,
            vertex_project=settings.vertex_project,
            vertex_region=settings.vertex_region,
            temperature=settings.llm_temperature,
            timeout=settings.generation_timeout_seconds,
        )

    def _chat_model(self):
        if self._chat is None:
            from langchain_google_vertexai import ChatVertexAI

            self._chat = ChatVertexAI(
                project=self.vertex_project,
                location=self.vertex_region,
                model_name=self.model_name,
                temperature=self.temperature,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._chat

    async def generate(self, prompt: str) -> str:
        """
        Send one prompt and return the response text.

        Raises:
            GenerationError: If the call fails or returns no text
        """
        try:
            resp = await self._chat_model().ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            logger.warning("generation_call_failed", model=self.model_name, error=repr(e))
            raise GenerationError(f"Generation service call failed: {e}") from e

        text = message_text(resp).strip()
        if not text:
            raise GenerationError("Generation service returned an empty response")
        return text
