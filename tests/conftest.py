"""Test fixtures including MockProvider for deterministic prompt hooks."""

from __future__ import annotations

import json
import stat
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import pytest

from hookline.types.hooks import HookContext
from hookline.types.providers import ChatMessage, StreamEvent


class MockProvider:
    """A deterministic mock provider that streams scripted replies.

    Usage:
        provider = MockProvider(replies=['{"continue": false}', "yes"])
    """

    def __init__(self, replies: list[str], model: str = "mock-model"):
        self._replies = list(replies)
        self._reply_index = 0
        self._model = model
        self.calls: list[dict[str, Any]] = []

    @property
    def model_id(self) -> str:
        return self._model

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        tools: list[Any],
        system: str,
        max_tokens: int,
    ) -> AsyncIterator[StreamEvent]:
        """Yield the current reply in two text deltas."""
        self.calls.append({"messages": messages, "system": system, "max_tokens": max_tokens})
        if self._reply_index >= len(self._replies):
            yield StreamEvent(type="message_end", stop_reason="end_turn")
            return

        reply = self._replies[self._reply_index]
        self._reply_index += 1
        half = len(reply) // 2
        yield StreamEvent(type="text_delta", text=reply[:half])
        yield StreamEvent(type="text_delta", text=reply[half:])
        yield StreamEvent(
            type="message_end",
            stop_reason="end_turn",
            usage={"input_tokens": 10, "output_tokens": 5},
        )


class FailingMockProvider(MockProvider):
    """A mock provider that raises ConnectionError on every call."""

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        tools: list[Any],
        system: str,
        max_tokens: int,
    ) -> Any:
        raise ConnectionError("Simulated provider outage")
        yield  # pragma: no cover


@pytest.fixture
def hook_context(tmp_path: Path) -> HookContext:
    """A context rooted in a temporary project directory."""
    return HookContext(session_id="sess-123", cwd=str(tmp_path), project_dir=str(tmp_path))


@pytest.fixture
def write_script(tmp_path: Path):
    """Write an executable shell script into tmp_path and return its path."""

    def _write(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body)
        path.chmod(path.stat().st_mode | stat.S_IXUSR)
        return path

    return _write


@pytest.fixture
def hooks_json(tmp_path: Path):
    """Write a hook declaration to tmp_path/hooks.json and return its path."""

    def _write(config: dict[str, Any], name: str = "hooks.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(config))
        return path

    return _write


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider(replies=['{"continue": true}'])


@pytest.fixture
def failing_mock_provider() -> FailingMockProvider:
    return FailingMockProvider(replies=[])
