"""Hook registry and event dispatch."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any

from hookline.hooks.executor import LLMCallback, execute_hook
from hookline.hooks.loader import load_hooks_file, parse_hooks_config
from hookline.hooks.matcher import matches
from hookline.observability.metrics import record_hook_blocked, record_hook_execution
from hookline.observability.tracing import annotate_result, span
from hookline.types.config import HookManagerOptions
from hookline.types.hooks import (
    TOOL_EVENTS,
    HookContext,
    HookDefinition,
    HookEvent,
    HookEventResult,
    HookExecutionResult,
    HookGroup,
    HookStats,
    new_hook_id,
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

logger = logging.getLogger(__name__)


class HookManager:
    """Registers hooks per lifecycle event and executes them.

    One manager belongs to one agent session. The agent loop calls
    :meth:`execute_hooks` (or one of the per-event wrappers) and acts on the
    returned :class:`HookEventResult`: when ``continue_`` is False the event
    is vetoed and ``system_messages`` carries the reasons.

    Example:
        manager = HookManager(HookManagerOptions(parallel=False))
        manager.add_hook(
            HookEvent.PRE_TOOL_USE,
            HookDefinition(type=HookType.COMMAND, command="python3 check.py"),
            matcher="Write|Edit",
        )
        result = await manager.pre_tool_use("Write", {"file_path": "/etc/passwd"})
        if result.blocked:
            print(result.system_messages)
    """

    def __init__(
        self,
        options: HookManagerOptions | None = None,
        *,
        llm_callback: LLMCallback | None = None,
        session_id: str | None = None,
        cwd: str | None = None,
        **overrides: Any,
    ) -> None:
        self._options = options or HookManagerOptions()
        if overrides:
            self._options = dataclasses.replace(self._options, **overrides)
        self._llm_callback = llm_callback
        self._groups: dict[HookEvent, list[HookGroup]] = {event: [] for event in HookEvent}
        self._executed_once: set[str] = set()
        self._lock = threading.Lock()
        self._context = HookContext(
            session_id=session_id or new_hook_id(),
            cwd=cwd or os.getcwd(),
        )
        if self._options.debug:
            logging.getLogger("hookline").setLevel(logging.DEBUG)

    @property
    def options(self) -> HookManagerOptions:
        return self._options

    def set_llm_callback(self, callback: LLMCallback | None) -> None:
        """Set the text-completion callback used by prompt hooks."""
        self._llm_callback = callback

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def update_context(self, **fields: Any) -> HookContext:
        """Merge *fields* into the session context. Returns the new snapshot."""
        with self._lock:
            self._context = dataclasses.replace(self._context, **fields)
            return self._context

    def get_context(self) -> HookContext:
        return self._context

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_hook_group(self, event: HookEvent | str, group: HookGroup) -> None:
        """Append a group to *event*; groups run in registration order."""
        event = HookEvent.parse(event)
        with self._lock:
            self._groups[event].append(group)
        logger.debug(
            "Registered %d hook(s) for %s (matcher=%r)", len(group.hooks), event.value, group.matcher,
        )

    def add_hook(
        self, event: HookEvent | str, hook: HookDefinition, matcher: str | None = None,
    ) -> HookDefinition:
        """Register a single hook in its own group."""
        self.add_hook_group(event, HookGroup(hooks=[hook], matcher=matcher))
        return hook

    def remove_hook(self, hook_id: str) -> bool:
        """Remove the first hook with *hook_id*. Returns True if one was found."""
        with self._lock:
            for groups in self._groups.values():
                for group in groups:
                    for index, hook in enumerate(group.hooks):
                        if hook.id == hook_id:
                            del group.hooks[index]
                            return True
        return False

    def load_from_config(self, config: dict[str, Any], plugin_root: str | None = None) -> int:
        """Append every group of a parsed declaration. Returns the group count.

        Sources are additive: loading a second declaration never replaces the
        groups of the first.
        """
        pairs = parse_hooks_config(config, plugin_root=plugin_root)
        for event, group in pairs:
            self.add_hook_group(event, group)
        return len(pairs)

    def load_from_file(self, path: str | Path, plugin_root: str | None = None) -> int:
        """Load a JSON/TOML/YAML declaration file. Returns the group count."""
        pairs = load_hooks_file(path, plugin_root=plugin_root)
        for event, group in pairs:
            self.add_hook_group(event, group)
        return len(pairs)

    def get_hooks(self, event: HookEvent | str) -> list[HookGroup]:
        event = HookEvent.parse(event)
        with self._lock:
            return list(self._groups[event])

    def has_hooks(self, event: HookEvent | str) -> bool:
        return any(group.hooks for group in self.get_hooks(event))

    def get_stats(self) -> HookStats:
        """Count registered hooks, per event and in total."""
        with self._lock:
            by_event = {
                event.value: sum(len(g.hooks) for g in groups)
                for event, groups in self._groups.items()
            }
        return HookStats(total=sum(by_event.values()), by_event=by_event)

    def clear(self) -> None:
        """Drop every registered hook and forget which once-hooks ran."""
        with self._lock:
            for event in self._groups:
                self._groups[event] = []
            self._executed_once.clear()

    def reset_once(self) -> None:
        """Allow once-hooks to run again."""
        with self._lock:
            self._executed_once.clear()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _matching_hooks(
        self, event: HookEvent, tool_name: str | None, context: HookContext,
    ) -> list[tuple[HookDefinition, HookContext]]:
        """Select enabled hooks for an event, each paired with its context."""
        selected: list[tuple[HookDefinition, HookContext]] = []
        with self._lock:
            for group in self._groups[event]:
                if event in TOOL_EVENTS and group.matcher and not matches(group.matcher, tool_name):
                    continue
                group_context = context
                if group.plugin_root:
                    group_context = dataclasses.replace(context, plugin_root=group.plugin_root)
                for hook in group.hooks:
                    if not hook.enabled:
                        continue
                    if hook.once and hook.id in self._executed_once:
                        continue
                    selected.append((hook, group_context))
        return selected

    def _claim_once(self, hook: HookDefinition) -> bool:
        """Atomically mark a once-hook as executed. False if already claimed."""
        if not hook.once:
            return True
        with self._lock:
            if hook.id in self._executed_once:
                return False
            self._executed_once.add(hook.id)
            return True

    async def execute_hooks(self, hook_input: HookInput) -> HookEventResult:
        """Run every hook registered for the input's event and aggregate the verdict.

        Individual hook failures never raise; they are reported in
        ``results`` and ``all_passed``.
        """
        event = hook_input.event
        context = hook_input.context or self._context
        if hook_input.context is None:
            hook_input = dataclasses.replace(hook_input, context=context)

        tool_name = getattr(hook_input, "tool_name", None)
        selected = self._matching_hooks(event, tool_name, context)
        if not selected:
            return HookEventResult(event=event)

        attributes = {"hook.event": event.value, "hook.count": len(selected)}
        with span("hookline.execute_hooks", attributes) as current_span:
            start = time.monotonic()
            stopped_early = False
            if self._options.parallel:
                gathered = await asyncio.gather(
                    *(self._run_claimed(hook, hook_input, ctx) for hook, ctx in selected),
                )
                results = [r for r in gathered if r is not None]
            else:
                results = []
                for hook, ctx in selected:
                    result = await self._run_claimed(hook, hook_input, ctx)
                    if result is None:
                        continue
                    results.append(result)
                    if result.blocked:
                        stopped_early = True
                        break
            duration = time.monotonic() - start

            aggregate = aggregate_results(event, results, total_duration=duration)
            if stopped_early:
                aggregate.continue_ = False
                logger.debug("Sequential %s hooks stopped early on a blocking hook", event.value)
            annotate_result(current_span, aggregate)

        if aggregate.blocked:
            record_hook_blocked(event.value)
        elif not aggregate.all_passed:
            failed = [r.hook_id for r in aggregate.results if not r.success]
            logger.warning("Some %s hooks failed without blocking: %s", event.value, failed)
        return aggregate

    async def _run_claimed(
        self, hook: HookDefinition, hook_input: HookInput, context: HookContext,
    ) -> HookExecutionResult | None:
        if not self._claim_once(hook):
            return None
        return await self._execute_hook(hook, hook_input, context)

    async def _execute_hook(
        self, hook: HookDefinition, hook_input: HookInput, context: HookContext,
    ) -> HookExecutionResult:
        """Execute a single hook, converting unexpected errors into a failed result."""
        logger.debug("Executing hook %s (%s) for %s", hook.id, hook.type_name, hook_input.event.value)
        start = time.monotonic()
        try:
            result = await execute_hook(
                hook,
                hook_input,
                context,
                llm_callback=self._llm_callback,
                default_command_timeout=self._options.default_command_timeout,
                default_prompt_timeout=self._options.default_prompt_timeout,
            )
        except Exception as exc:
            logger.exception("Hook %s raised", hook.id)
            result = HookExecutionResult(
                hook_id=hook.id,
                success=False,
                duration=time.monotonic() - start,
                error=f"Hook failed: {type(exc).__name__}: {exc}",
            )
        if not result.success:
            logger.debug("Hook %s failed: %s", hook.id, result.error)
        record_hook_execution(
            hook_input.event.value,
            hook.type_name,
            success=result.success,
            duration_ms=result.duration * 1000,
        )
        return result

    # ------------------------------------------------------------------
    # Per-event entry points
    # ------------------------------------------------------------------

    async def pre_tool_use(self, tool_name: str, tool_input: dict[str, Any]) -> HookEventResult:
        return await self.execute_hooks(
            PreToolUseInput(tool_name=tool_name, tool_input=tool_input, context=self._context),
        )

    async def post_tool_use(
        self,
        tool_name: str,
        tool_input: dict[str, Any],
        tool_result: Any,
        error: str | None = None,
    ) -> HookEventResult:
        return await self.execute_hooks(
            PostToolUseInput(
                tool_name=tool_name,
                tool_input=tool_input,
                tool_result=tool_result,
                error=error,
                context=self._context,
            ),
        )

    async def user_prompt_submit(self, user_prompt: str) -> HookEventResult:
        return await self.execute_hooks(
            UserPromptSubmitInput(user_prompt=user_prompt, context=self._context),
        )

    async def stop(self, stop_reason: str | None = None) -> HookEventResult:
        return await self.execute_hooks(StopInput(stop_reason=stop_reason, context=self._context))

    async def subagent_stop(
        self, agent_name: str, stop_reason: str | None = None,
    ) -> HookEventResult:
        return await self.execute_hooks(
            SubagentStopInput(agent_name=agent_name, stop_reason=stop_reason, context=self._context),
        )

    async def session_start(self) -> HookEventResult:
        return await self.execute_hooks(SessionStartInput(context=self._context))

    async def session_end(self, session_duration: float) -> HookEventResult:
        return await self.execute_hooks(
            SessionEndInput(session_duration=session_duration, context=self._context),
        )

    async def pre_compact(self, current_token_count: int, max_tokens: int) -> HookEventResult:
        return await self.execute_hooks(
            PreCompactInput(
                current_token_count=current_token_count,
                max_tokens=max_tokens,
                context=self._context,
            ),
        )

    async def notification(self, notification_type: str, message: str) -> HookEventResult:
        return await self.execute_hooks(
            NotificationInput(
                notification_type=notification_type, message=message, context=self._context,
            ),
        )


def aggregate_results(
    event: HookEvent,
    results: list[HookExecutionResult],
    *,
    total_duration: float = 0.0,
) -> HookEventResult:
    """Fold per-hook results into one verdict.

    ``continue_`` is the AND of every output's ``continue_`` (a missing output
    counts as continue). Messages keep execution order; hook-specific output
    maps are merged shallowly, later results winning.
    """
    aggregate = HookEventResult(event=event, results=list(results), total_duration=total_duration)
    merged: dict[str, Any] = {}
    for result in results:
        if not result.success:
            aggregate.all_passed = False
        output = result.output
        if output is None:
            continue
        if not output.continue_:
            aggregate.continue_ = False
        if output.system_message:
            aggregate.system_messages.append(output.system_message)
        if output.additional_context:
            aggregate.additional_context.append(output.additional_context)
        if output.hook_specific_output:
            merged.update(output.hook_specific_output)
    aggregate.hook_specific_output = merged or None
    return aggregate
