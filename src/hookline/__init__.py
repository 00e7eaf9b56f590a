"""hookline — lifecycle hooks for autonomous agent loops.

Usage:
    from hookline import HookDefinition, HookEvent, HookManager, HookType

    manager = HookManager()
    manager.add_hook(
        HookEvent.PRE_TOOL_USE,
        HookDefinition(type=HookType.COMMAND, command="python3 ${PROJECT_DIR}/guard.py"),
        matcher="Bash",
    )
    result = await manager.pre_tool_use("Bash", {"command": "rm -rf build"})
    if result.blocked:
        print(result.system_messages)
"""

from hookline.hooks.loader import HookConfigError
from hookline.hooks.manager import HookManager
from hookline.hooks.prompt import callback_from_provider
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

__version__ = "0.1.0"

__all__ = [
    # Core API
    "HookManager",
    "HookManagerOptions",
    "HookConfigError",
    "callback_from_provider",
    # Definitions
    "HookContext",
    "HookDefinition",
    "HookEvent",
    "HookGroup",
    "HookType",
    # Results
    "HookEventResult",
    "HookExecutionResult",
    "HookOutput",
    "HookStats",
    # Event inputs
    "HookInput",
    "NotificationInput",
    "PostToolUseInput",
    "PreCompactInput",
    "PreToolUseInput",
    "SessionEndInput",
    "SessionStartInput",
    "StopInput",
    "SubagentStopInput",
    "UserPromptSubmitInput",
]
