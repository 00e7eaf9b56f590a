"""LLM callbacks for prompt hooks."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable

from hookline.types.providers import ChatMessage, ProviderAdapter

DEFAULT_SYSTEM_PROMPT = (
    "You are a policy hook guarding an autonomous coding agent. "
    "Answer with a JSON object such as {\"continue\": true} or "
    "{\"continue\": false, \"systemMessage\": \"<reason>\"}."
)


def callback_from_provider(
    provider: ProviderAdapter,
    *,
    system: str = DEFAULT_SYSTEM_PROMPT,
    max_tokens: int = 1024,
) -> Callable[[str], Awaitable[str]]:
    """Build a prompt-hook callback on top of a streaming provider adapter.

    The prompt is sent as a single user message with no tools; the text
    deltas of the reply are concatenated into the response.
    """

    async def _callback(prompt: str) -> str:
        parts: list[str] = []
        stream = provider.chat_completion_stream(
            [ChatMessage(role="user", content=prompt)], [], system, max_tokens,
        )
        async for event in stream:
            if event.type == "text_delta" and event.text:
                parts.append(event.text)
        return "".join(parts)

    return _callback


def ensure_async(fn: Callable[[str], str | Awaitable[str]]) -> Callable[[str], Awaitable[str]]:
    """Wrap a blocking callable so it runs in a worker thread.

    Coroutine functions are returned unchanged.
    """
    if inspect.iscoroutinefunction(fn):
        return fn

    async def _callback(prompt: str) -> str:
        result = await asyncio.to_thread(fn, prompt)
        if inspect.isawaitable(result):
            result = await result
        return result

    return _callback
