"""Type definitions for hookline."""

from hookline.types.config import HookManagerOptions
from hookline.types.hooks import (
    HookContext,
    HookDefinition,
    HookEvent,
    HookEventResult,
    HookExecutionResult,
    HookGroup,
    HookOutput,
    HookStats,
    HookType,
)
from hookline.types.inputs import (
    HookInput,
    NotificationInput,
    PostToolUseInput,
    PreCompactInput,
    PreToolUseInput,
    SessionEndInput,
    SessionStartInput,
    StopInput,
    SubagentStopInput,
    UserPromptSubmitInput,
)
from hookline.types.providers import ChatMessage, ProviderAdapter, StreamEvent

__all__ = [
    "ChatMessage",
    "HookContext",
    "HookDefinition",
    "HookEvent",
    "HookEventResult",
    "HookExecutionResult",
    "HookGroup",
    "HookInput",
    "HookManagerOptions",
    "HookOutput",
    "HookStats",
    "HookType",
    "NotificationInput",
    "PostToolUseInput",
    "PreCompactInput",
    "PreToolUseInput",
    "ProviderAdapter",
    "SessionEndInput",
    "SessionStartInput",
    "StopInput",
    "StreamEvent",
    "SubagentStopInput",
    "UserPromptSubmitInput",
]
