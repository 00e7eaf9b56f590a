"""Hook execution engine: command hooks and prompt hooks.

Command hook protocol:
- Input: the event as JSON on stdin
- Output: stdout is a JSON HookOutput (or plain text, taken as a system message)
- Exit codes: 0 = success, 2 = block (stderr is the reason), other = non-blocking failure
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import time
from collections.abc import Awaitable, Callable
from typing import Any

from hookline.hooks.process import run_shell
from hookline.hooks.prompt import ensure_async
from hookline.types.config import DEFAULT_COMMAND_TIMEOUT, DEFAULT_PROMPT_TIMEOUT
from hookline.types.hooks import (
    HookContext,
    HookDefinition,
    HookExecutionResult,
    HookOutput,
    HookType,
)
from hookline.types.inputs import HookInput

logger = logging.getLogger(__name__)

LLMCallback = Callable[[str], Awaitable[str] | str]

BLOCKING_EXIT_CODE = 2
DEFAULT_BLOCK_MESSAGE = "Hook blocked execution"

# ${NAME} placeholders recognised in command strings. Anything else is left as is.
_PLACEHOLDER_RE = re.compile(r"\$\{([A-Z_]+)\}")

# Keyword heuristic for free-text prompt responses
_ALLOW_RE = re.compile(r"\b(allow|allowed|yes|continue|approve|approved)\b")
_DENY_RE = re.compile(r"\b(deny|denied|no|block|blocked|reject|rejected)\b")


def build_hook_env(context: HookContext) -> dict[str, str]:
    """Build the variables exported to a command hook, without os.environ."""
    values: dict[str, str | None] = {
        "SESSION_ID": context.session_id,
        "CWD": context.cwd,
        "PROJECT_DIR": context.project_dir or context.cwd,
        "PLUGIN_ROOT": context.plugin_root,
        "TRANSCRIPT_PATH": context.transcript_path,
        "ENV_FILE": context.env_file_path,
    }
    env: dict[str, str] = {}
    for key, value in values.items():
        if value is None:
            continue
        env[key] = value
        env[f"HOOKLINE_{key}"] = value
    return env


def substitute_variables(command: str, context: HookContext) -> str:
    """Replace the allow-listed ``${NAME}`` placeholders in *command*.

    Values are inserted literally in a single pass, so a substituted value is
    never itself expanded. Unknown placeholders are left untouched.
    """
    plugin_root = context.plugin_root or ""
    project_dir = context.project_dir or context.cwd
    values = {
        "SKILL_ROOT": plugin_root,
        "PLUGIN_ROOT": plugin_root,
        "HOOKLINE_PLUGIN_ROOT": plugin_root,
        "PROJECT_DIR": project_dir,
        "HOOKLINE_PROJECT_DIR": project_dir,
        "CWD": context.cwd,
        "HOOKLINE_CWD": context.cwd,
    }

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        return values[name] if name in values else match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, command)


def parse_hook_output(stdout: str) -> HookOutput:
    """Interpret the stdout of a hook that exited 0."""
    text = stdout.strip()
    if not text:
        return HookOutput()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return HookOutput(system_message=text)
    if not isinstance(data, dict):
        return HookOutput(system_message=text)
    return HookOutput.from_dict(data)


async def execute_command_hook(
    hook: HookDefinition,
    hook_input: HookInput,
    context: HookContext,
    *,
    default_timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> HookExecutionResult:
    """Run a command hook to completion or timeout."""
    start = time.monotonic()

    if not hook.command:
        return HookExecutionResult(
            hook_id=hook.id,
            success=False,
            duration=time.monotonic() - start,
            error="No command specified for command hook",
        )

    timeout = hook.timeout or default_timeout
    command = substitute_variables(hook.command, context)
    env = {**os.environ, **build_hook_env(context)}
    payload = json.dumps(hook_input.to_dict(), default=str)

    try:
        proc = await run_shell(
            command, stdin=payload, cwd=context.cwd, env=env, timeout_sec=timeout,
        )
    except OSError as exc:
        return HookExecutionResult(
            hook_id=hook.id,
            success=False,
            duration=time.monotonic() - start,
            error=f"Failed to start hook: {exc}",
        )

    if proc.timed_out:
        return HookExecutionResult(
            hook_id=hook.id,
            success=False,
            duration=time.monotonic() - start,
            error=f"Hook timed out after {timeout}s: {command}",
        )

    error: str | None = None
    if proc.exit_code == 0:
        output = parse_hook_output(proc.stdout)
    elif proc.exit_code == BLOCKING_EXIT_CODE:
        output = HookOutput(
            continue_=False,
            system_message=proc.stderr.strip() or DEFAULT_BLOCK_MESSAGE,
        )
    else:
        output = HookOutput()
        stderr = proc.stderr.strip()
        error = stderr or f"Hook exited with code {proc.exit_code}"
        logger.warning("Hook %s exited with code %s: %s", hook.id, proc.exit_code, stderr)

    return HookExecutionResult(
        hook_id=hook.id,
        success=proc.exit_code == 0,
        exit_code=proc.exit_code,
        output=output,
        duration=time.monotonic() - start,
        error=error,
    )


def render_prompt(template: str, hook_input: HookInput) -> str:
    """Substitute ``$VARIABLE`` tokens in a prompt template from the event input."""
    fields = hook_input.to_dict()
    values = {
        "$TOOL_NAME": str(fields.get("toolName", "")),
        "$TOOL_INPUT": _json_or_empty(fields, "toolInput"),
        "$TOOL_RESULT": _json_or_empty(fields, "toolResult"),
        "$USER_PROMPT": str(fields.get("userPrompt", "")),
        "$STOP_REASON": str(fields.get("stopReason") or ""),
        "$AGENT_NAME": str(fields.get("agentName", "")),
        "$NOTIFICATION_MESSAGE": str(fields.get("message", "")),
        "$EVENT": hook_input.event.value,
    }
    # Longest first, so $TOOL_INPUT is never read as $TOOL_ followed by text
    tokens = sorted(values, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(t) for t in tokens))
    return pattern.sub(lambda m: values[m.group(0)], template)


def _json_or_empty(fields: dict[str, Any], key: str) -> str:
    if fields.get(key) is None:
        return ""
    return json.dumps(fields[key], default=str)


def interpret_prompt_response(response: str) -> HookOutput:
    """Turn an LLM response into a HookOutput.

    A JSON object is taken as a structured HookOutput. Anything else goes
    through a best-effort keyword heuristic that fails open.
    """
    text = response.strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict):
        return HookOutput.from_dict(data)

    logger.info("Prompt hook response is not a JSON object, using keyword heuristic")
    lowered = text.lower()
    if _ALLOW_RE.search(lowered):
        return HookOutput(continue_=True)
    if _DENY_RE.search(lowered):
        return HookOutput(continue_=False, system_message=response)
    return HookOutput(continue_=True, system_message=response)


async def execute_prompt_hook(
    hook: HookDefinition,
    hook_input: HookInput,
    context: HookContext,
    llm_callback: LLMCallback | None = None,
    *,
    default_timeout: float = DEFAULT_PROMPT_TIMEOUT,
) -> HookExecutionResult:
    """Evaluate a prompt hook through the injected LLM callback."""
    start = time.monotonic()

    if not hook.prompt:
        return HookExecutionResult(
            hook_id=hook.id,
            success=False,
            duration=time.monotonic() - start,
            error="No prompt specified for prompt hook",
        )
    if llm_callback is None:
        return HookExecutionResult(
            hook_id=hook.id,
            success=False,
            duration=time.monotonic() - start,
            error="No LLM callback configured for prompt hook",
        )

    timeout = hook.timeout or default_timeout
    prompt = render_prompt(hook.prompt, hook_input)

    try:
        response = await asyncio.wait_for(_call(llm_callback, prompt), timeout=timeout)
    except TimeoutError:
        return HookExecutionResult(
            hook_id=hook.id,
            success=False,
            duration=time.monotonic() - start,
            error=f"Prompt hook timed out after {timeout}s",
        )
    except Exception as exc:
        logger.warning("Prompt hook %s failed: %s", hook.id, exc)
        return HookExecutionResult(
            hook_id=hook.id,
            success=False,
            duration=time.monotonic() - start,
            error=f"Prompt hook failed: {type(exc).__name__}: {exc}",
        )

    return HookExecutionResult(
        hook_id=hook.id,
        success=True,
        output=interpret_prompt_response(str(response)),
        duration=time.monotonic() - start,
    )


async def _call(callback: LLMCallback, prompt: str) -> str:
    # Blocking callbacks run in a worker thread so wait_for can time them out
    return await ensure_async(callback)(prompt)


async def execute_hook(
    hook: HookDefinition,
    hook_input: HookInput,
    context: HookContext,
    *,
    llm_callback: LLMCallback | None = None,
    default_command_timeout: float = DEFAULT_COMMAND_TIMEOUT,
    default_prompt_timeout: float = DEFAULT_PROMPT_TIMEOUT,
) -> HookExecutionResult:
    """Dispatch a hook to the executor for its type."""
    hook_type = hook.type_name
    if hook_type == HookType.COMMAND.value:
        return await execute_command_hook(
            hook, hook_input, context, default_timeout=default_command_timeout,
        )
    if hook_type == HookType.PROMPT.value:
        return await execute_prompt_hook(
            hook, hook_input, context, llm_callback, default_timeout=default_prompt_timeout,
        )
    return HookExecutionResult(
        hook_id=hook.id,
        success=False,
        error=f"Unknown hook type: {hook_type}",
    )
