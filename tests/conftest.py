"""Shared fixtures: a scripted stand-in for the generation service."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Optional

import pytest


class StubGenerator:
    """Returns a canned response and records every prompt it was sent."""

    def __init__(
        self,
        response: Any = "",
        error: Optional[Exception] = None,
        delay: float = 0.0,
        on_generate: Optional[Callable[[], Any]] = None,
    ):
        self.response = response if isinstance(response, str) else json.dumps(response)
        self.error = error
        self.delay = delay
        self.on_generate = on_generate
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.on_generate is not None:
            self.on_generate()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_generator() -> Callable[..., StubGenerator]:
    """Factory for stub generation services."""
    return StubGenerator
