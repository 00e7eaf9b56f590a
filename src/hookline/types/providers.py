"""What a chat provider must offer to back prompt hooks."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class StreamEvent:
    """One chunk of a streamed reply. Prompt hooks only read ``text_delta``."""

    type: str  # "text_delta", "message_end", ...
    text: str | None = None
    stop_reason: str | None = None
    usage: dict[str, int] | None = None


@dataclass(slots=True)
class ChatMessage:
    role: str  # "user", "assistant"
    content: str = ""


class ProviderAdapter(Protocol):
    """Streaming chat completion, as exposed by agent provider adapters.

    Prompt hooks send one user message with no tools.
    """

    def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        tools: list,
        system: str,
        max_tokens: int,
    ) -> AsyncIterator[StreamEvent]: ...
