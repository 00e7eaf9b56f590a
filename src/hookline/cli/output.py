"""Output formatting for CLI mode (plain text or rich tables)."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from hookline.types.hooks import HookEvent, HookEventResult, HookGroup, HookStats

STYLE_EVENT = "bold #a78bfa"  # violet, primary accent
STYLE_DETAIL = "#7c7c8a"  # muted grey
STYLE_OK = "#34d399"  # green
STYLE_FAIL = "bold #f87171"  # red


def _hook_body(hook_type: str, command: str, prompt: str) -> str:
    body = command if hook_type == "command" else prompt
    body = " ".join(body.split())
    return body if len(body) <= 60 else body[:57] + "..."


def _flags(once: bool, enabled: bool, timeout: float | None) -> str:
    flags = []
    if once:
        flags.append("once")
    if not enabled:
        flags.append("disabled")
    if timeout is not None:
        flags.append(f"{timeout:g}s")
    return ",".join(flags)


def print_hooks(groups: dict[HookEvent, list[HookGroup]], *, use_rich: bool) -> None:
    """List registered hooks per event."""
    rows: list[tuple[str, str, str, str, str, str]] = []
    for event, event_groups in groups.items():
        for group in event_groups:
            for hook in group.hooks:
                rows.append((
                    event.value,
                    group.matcher or "*",
                    hook.type_name,
                    _hook_body(hook.type_name, hook.command, hook.prompt),
                    _flags(hook.once, hook.enabled, hook.timeout),
                    hook.id[:8],
                ))

    if not rows:
        click.echo("No hooks registered.")
        return

    if not use_rich:
        for row in rows:
            click.echo("  ".join(row))
        return

    table = Table(show_header=True, header_style="bold", box=None)
    for column in ("Event", "Matcher", "Type", "Command / Prompt", "Flags", "ID"):
        table.add_column(column)
    for event, matcher, hook_type, body, flags, hook_id in rows:
        table.add_row(
            Text(event, style=STYLE_EVENT), matcher, hook_type, body,
            Text(flags, style=STYLE_DETAIL), Text(hook_id, style=STYLE_DETAIL),
        )
    Console().print(table)


def print_stats(stats: HookStats, *, use_rich: bool) -> None:
    if not use_rich:
        for event, count in stats.by_event.items():
            click.echo(f"{event:<18} {count}")
        click.echo(f"{'total':<18} {stats.total}")
        return

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Event")
    table.add_column("Hooks", justify="right")
    for event, count in stats.by_event.items():
        table.add_row(Text(event, style=STYLE_EVENT), str(count))
    table.add_row(Text("total", style="bold"), Text(str(stats.total), style="bold"))
    Console().print(table)


def print_event_result(result: HookEventResult, *, use_rich: bool) -> None:
    """Print the aggregate verdict of one event."""
    verdict = "blocked" if result.blocked else "continue"
    summary = (
        f"{result.event.value}: {verdict} "
        f"({len(result.results)} hook(s), all passed: {result.all_passed}, "
        f"{result.total_duration * 1000:.0f}ms)"
    )

    if not use_rich:
        click.echo(summary)
        for r in result.results:
            status = "ok" if r.success else "FAILED"
            exit_code = "-" if r.exit_code is None else str(r.exit_code)
            line = f"  [{status}] {r.hook_id[:8]} exit={exit_code} {r.duration * 1000:.0f}ms"
            if r.error:
                line += f" error={r.error}"
            click.echo(line)
        for message in result.system_messages:
            click.echo(f"  message: {message}")
        for context in result.additional_context:
            click.echo(f"  context: {context}")
        return

    console = Console()
    console.print(Text(summary, style=STYLE_FAIL if result.blocked else STYLE_OK))
    if result.results:
        table = Table(show_header=True, header_style="bold", box=None)
        for column in ("Hook", "Status", "Exit", "Duration", "Error"):
            table.add_column(column)
        for r in result.results:
            table.add_row(
                r.hook_id[:8],
                Text("ok", style=STYLE_OK) if r.success else Text("failed", style=STYLE_FAIL),
                "-" if r.exit_code is None else str(r.exit_code),
                f"{r.duration * 1000:.0f}ms",
                Text(r.error or "", style=STYLE_DETAIL),
            )
        console.print(table)
    for message in result.system_messages:
        console.print(Text(f"message: {message}", style="bold"))
    for context in result.additional_context:
        console.print(Text(f"context: {context}", style=STYLE_DETAIL))
