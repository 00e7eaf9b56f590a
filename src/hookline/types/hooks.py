"""Hook types for the hookline event system."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class HookEvent(Enum):
    """Lifecycle events that can trigger hooks.

    The value is the wire name used in configuration files and in the JSON
    handed to command hooks.
    """

    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    STOP = "Stop"
    SUBAGENT_STOP = "SubagentStop"
    SESSION_START = "SessionStart"
    SESSION_END = "SessionEnd"
    PRE_COMPACT = "PreCompact"
    NOTIFICATION = "Notification"

    @classmethod
    def parse(cls, value: HookEvent | str) -> HookEvent:
        """Resolve a HookEvent from an enum member, wire name or member name."""
        if isinstance(value, HookEvent):
            return value
        try:
            return cls(value)
        except ValueError:
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown hook event: {value!r}") from None


# Events whose groups are filtered by tool name
TOOL_EVENTS = frozenset({HookEvent.PRE_TOOL_USE, HookEvent.POST_TOOL_USE})


class HookType(Enum):
    """How a hook is executed."""

    COMMAND = "command"  # Shell command, JSON on stdin
    PROMPT = "prompt"  # LLM-evaluated prompt template


def new_hook_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class HookDefinition:
    """A single hook: a shell command or a prompt template.

    ``type`` is kept as given so that a definition with an unknown type can
    still be registered and reported as a failed execution.
    """

    type: HookType | str
    command: str = ""
    prompt: str = ""
    id: str = field(default_factory=new_hook_id)
    timeout: float | None = None  # seconds; None = type-specific default
    once: bool = False
    enabled: bool = True
    description: str = ""

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, HookType) else str(self.type)


@dataclass(slots=True)
class HookGroup:
    """An ordered list of hooks sharing one tool-name matcher."""

    hooks: list[HookDefinition] = field(default_factory=list)
    matcher: str | None = None  # Regex; None or "" matches every tool
    description: str = ""
    plugin_root: str | None = None


@dataclass(frozen=True, slots=True)
class HookContext:
    """Session-wide facts exposed to every hook.

    Frozen so that executors always work on a snapshot; the manager replaces
    the whole object on update.
    """

    session_id: str
    cwd: str
    project_dir: str | None = None
    plugin_root: str | None = None
    transcript_path: str | None = None
    env_file_path: str | None = None
    permission_mode: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"sessionId": self.session_id, "cwd": self.cwd}
        optional = {
            "projectDir": self.project_dir,
            "pluginRoot": self.plugin_root,
            "transcriptPath": self.transcript_path,
            "envFilePath": self.env_file_path,
            "permissionMode": self.permission_mode,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True, slots=True)
class HookOutput:
    """What a single hook reports back.

    ``continue_`` maps to the ``continue`` key on the wire.
    """

    continue_: bool = True
    system_message: str | None = None
    additional_context: str | None = None
    hook_specific_output: dict[str, Any] | None = None
    suppress_output: bool = False
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HookOutput:
        """Build a HookOutput from the JSON object a hook printed."""
        specific = data.get("hookSpecificOutput")
        return cls(
            continue_=data.get("continue", True) is not False,
            system_message=_opt_str(data.get("systemMessage")),
            additional_context=_opt_str(data.get("additionalContext")),
            hook_specific_output=dict(specific) if isinstance(specific, dict) else None,
            suppress_output=bool(data.get("suppressOutput", False)),
            error=_opt_str(data.get("error")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"continue": self.continue_}
        if self.system_message is not None:
            data["systemMessage"] = self.system_message
        if self.additional_context is not None:
            data["additionalContext"] = self.additional_context
        if self.hook_specific_output is not None:
            data["hookSpecificOutput"] = dict(self.hook_specific_output)
        if self.suppress_output:
            data["suppressOutput"] = True
        if self.error is not None:
            data["error"] = self.error
        return data


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True, slots=True)
class HookExecutionResult:
    """Outcome of running one hook.

    ``success`` means the hook ran to completion without infrastructure
    failure; it says nothing about whether the hook vetoed the event.
    """

    hook_id: str
    success: bool
    exit_code: int | None = None
    output: HookOutput | None = None
    duration: float = 0.0  # seconds
    error: str | None = None

    @property
    def blocked(self) -> bool:
        return self.output is not None and not self.output.continue_


@dataclass(slots=True)
class HookEventResult:
    """Aggregate verdict for one event, returned to the agent loop."""

    event: HookEvent
    all_passed: bool = True
    continue_: bool = True
    system_messages: list[str] = field(default_factory=list)
    additional_context: list[str] = field(default_factory=list)
    hook_specific_output: dict[str, Any] | None = None
    results: list[HookExecutionResult] = field(default_factory=list)
    total_duration: float = 0.0  # seconds

    @property
    def blocked(self) -> bool:
        return not self.continue_

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event.value,
            "allPassed": self.all_passed,
            "continue": self.continue_,
            "systemMessages": list(self.system_messages),
            "additionalContext": list(self.additional_context),
            "hookSpecificOutput": self.hook_specific_output,
            "results": [
                {
                    "hookId": r.hook_id,
                    "success": r.success,
                    "exitCode": r.exit_code,
                    "output": r.output.to_dict() if r.output else None,
                    "duration": r.duration,
                    "error": r.error,
                }
                for r in self.results
            ],
            "totalDuration": self.total_duration,
        }


@dataclass(frozen=True, slots=True)
class HookStats:
    """Counts of registered hooks."""

    total: int
    by_event: dict[str, int]
