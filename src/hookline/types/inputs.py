"""Event inputs handed to hooks.

One frozen dataclass per event, so each input carries exactly the fields that
make sense for it. ``to_dict()`` produces the camelCase JSON document written
to a command hook's stdin.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from hookline.types.hooks import HookContext, HookEvent


@dataclass(frozen=True, slots=True)
class _BaseInput:
    event: ClassVar[HookEvent]

    context: HookContext | None = field(default=None, kw_only=True)

    def payload(self) -> dict[str, Any]:
        """Event-specific fields in wire form."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"event": self.event.value}
        data.update(self.payload())
        if self.context is not None:
            data["context"] = self.context.to_dict()
        return data


@dataclass(frozen=True, slots=True)
class PreToolUseInput(_BaseInput):
    event: ClassVar[HookEvent] = HookEvent.PRE_TOOL_USE

    tool_name: str
    tool_input: dict[str, Any] = field(default_factory=dict)

    def payload(self) -> dict[str, Any]:
        return {"toolName": self.tool_name, "toolInput": self.tool_input}


@dataclass(frozen=True, slots=True)
class PostToolUseInput(_BaseInput):
    event: ClassVar[HookEvent] = HookEvent.POST_TOOL_USE

    tool_name: str
    tool_input: dict[str, Any] = field(default_factory=dict)
    tool_result: Any = None
    error: str | None = None

    def payload(self) -> dict[str, Any]:
        data = {
            "toolName": self.tool_name,
            "toolInput": self.tool_input,
            "toolResult": self.tool_result,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True, slots=True)
class UserPromptSubmitInput(_BaseInput):
    event: ClassVar[HookEvent] = HookEvent.USER_PROMPT_SUBMIT

    user_prompt: str

    def payload(self) -> dict[str, Any]:
        return {"userPrompt": self.user_prompt}


@dataclass(frozen=True, slots=True)
class StopInput(_BaseInput):
    event: ClassVar[HookEvent] = HookEvent.STOP

    stop_reason: str | None = None

    def payload(self) -> dict[str, Any]:
        return {"stopReason": self.stop_reason} if self.stop_reason is not None else {}


@dataclass(frozen=True, slots=True)
class SubagentStopInput(_BaseInput):
    event: ClassVar[HookEvent] = HookEvent.SUBAGENT_STOP

    agent_name: str
    stop_reason: str | None = None

    def payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {"agentName": self.agent_name}
        if self.stop_reason is not None:
            data["stopReason"] = self.stop_reason
        return data


@dataclass(frozen=True, slots=True)
class SessionStartInput(_BaseInput):
    event: ClassVar[HookEvent] = HookEvent.SESSION_START


@dataclass(frozen=True, slots=True)
class SessionEndInput(_BaseInput):
    event: ClassVar[HookEvent] = HookEvent.SESSION_END

    session_duration: float  # seconds

    def payload(self) -> dict[str, Any]:
        return {"sessionDuration": self.session_duration}


@dataclass(frozen=True, slots=True)
class PreCompactInput(_BaseInput):
    event: ClassVar[HookEvent] = HookEvent.PRE_COMPACT

    current_token_count: int
    max_tokens: int

    def payload(self) -> dict[str, Any]:
        return {"currentTokenCount": self.current_token_count, "maxTokens": self.max_tokens}


@dataclass(frozen=True, slots=True)
class NotificationInput(_BaseInput):
    event: ClassVar[HookEvent] = HookEvent.NOTIFICATION

    notification_type: str
    message: str

    def payload(self) -> dict[str, Any]:
        return {"notificationType": self.notification_type, "message": self.message}


HookInput = Union[
    PreToolUseInput,
    PostToolUseInput,
    UserPromptSubmitInput,
    StopInput,
    SubagentStopInput,
    SessionStartInput,
    SessionEndInput,
    PreCompactInput,
    NotificationInput,
]

INPUT_TYPES: dict[HookEvent, type[_BaseInput]] = {
    cls.event: cls
    for cls in (
        PreToolUseInput,
        PostToolUseInput,
        UserPromptSubmitInput,
        StopInput,
        SubagentStopInput,
        SessionStartInput,
        SessionEndInput,
        PreCompactInput,
        NotificationInput,
    )
}
