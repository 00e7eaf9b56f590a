"""CLI entry point for hookline."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
import sys
from typing import Any

import click

from hookline.cli.output import print_event_result, print_hooks, print_stats
from hookline.core.config import hook_files, load_manager_options
from hookline.hooks.events import build_hook_input
from hookline.hooks.loader import HookConfigError
from hookline.hooks.manager import HookManager
from hookline.types.hooks import HookEvent

EVENT_NAMES = [event.value for event in HookEvent]

config_option = click.option(
    "--config", "-c", "config_files", multiple=True, type=click.Path(dir_okay=False),
    help="Hook declaration file (JSON/TOML/YAML). Repeatable; defaults to configured files.",
)
cwd_option = click.option("--cwd", default=None, help="Working directory for hooks")


def _build_manager(
    config_files: tuple[str, ...], cwd: str | None, *, sequential: bool = False,
) -> HookManager:
    options = load_manager_options(cwd)
    if sequential:
        options = dataclasses.replace(options, parallel=False)
    manager = HookManager(options, cwd=cwd)

    files = list(config_files) or [str(p) for p in hook_files(cwd)]
    for path in files:
        try:
            manager.load_from_file(path)
        except HookConfigError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1)
    return manager


def _use_rich(ctx: click.Context) -> bool:
    rich = ctx.obj.get("rich") if ctx.obj else None
    return rich if rich is not None else sys.stdout.isatty()


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--rich/--no-rich", default=None, help="Rich terminal output (default: auto)")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, rich: bool | None) -> None:
    """hookline -- lifecycle hooks for agent loops.

    \b
    Usage:
      hookline list -c hooks.json
      hookline fire PreToolUse -c hooks.json --tool-name Write --payload '{"toolInput": {}}'
      hookline stats
      hookline config
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["rich"] = rich


@cli.command("list")
@config_option
@cwd_option
@click.pass_context
def list_cmd(ctx: click.Context, config_files: tuple[str, ...], cwd: str | None) -> None:
    """List registered hooks per event."""
    manager = _build_manager(config_files, cwd)
    groups = {event: manager.get_hooks(event) for event in HookEvent}
    print_hooks(groups, use_rich=_use_rich(ctx))


@cli.command("stats")
@config_option
@cwd_option
@click.pass_context
def stats_cmd(ctx: click.Context, config_files: tuple[str, ...], cwd: str | None) -> None:
    """Count registered hooks per event."""
    manager = _build_manager(config_files, cwd)
    print_stats(manager.get_stats(), use_rich=_use_rich(ctx))


@cli.command("fire")
@click.argument("event", type=click.Choice(EVENT_NAMES))
@config_option
@cwd_option
@click.option("--payload", "-p", default=None, help="Event payload as JSON, or '-' to read stdin")
@click.option("--tool-name", default=None, help="Tool name (PreToolUse/PostToolUse)")
@click.option("--sequential", is_flag=True, help="Run hooks one at a time, stopping on block")
@click.option("--json", "as_json", is_flag=True, help="Print the aggregate result as JSON")
@click.pass_context
def fire_cmd(
    ctx: click.Context,
    event: str,
    config_files: tuple[str, ...],
    cwd: str | None,
    payload: str | None,
    tool_name: str | None,
    sequential: bool,
    as_json: bool,
) -> None:
    """Fire EVENT and report the verdict.

    Exits 2 when the event is blocked, 1 when a hook failed without
    blocking, 0 otherwise.
    """
    data: dict[str, Any] = {}
    if payload is not None:
        raw = sys.stdin.read() if payload == "-" else payload
        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            click.echo(f"Error: invalid payload JSON: {e}", err=True)
            raise SystemExit(1)
        if not isinstance(data, dict):
            click.echo("Error: payload must be a JSON object", err=True)
            raise SystemExit(1)
    if tool_name:
        data["toolName"] = tool_name

    manager = _build_manager(config_files, cwd, sequential=sequential)
    try:
        hook_input = build_hook_input(event, data, context=manager.get_context())
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    result = asyncio.run(manager.execute_hooks(hook_input))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print_event_result(result, use_rich=_use_rich(ctx))

    if result.blocked:
        raise SystemExit(2)
    if not result.all_passed:
        raise SystemExit(1)


@cli.command("config")
@cwd_option
def config_cmd(cwd: str | None) -> None:
    """Show effective hook manager settings."""
    options = load_manager_options(cwd)
    for field in dataclasses.fields(options):
        click.echo(f"{field.name}: {getattr(options, field.name)}")
    files = hook_files(cwd)
    click.echo("files:")
    if files:
        for path in files:
            marker = "" if path.exists() else "  (missing)"
            click.echo(f"  {path}{marker}")
    else:
        click.echo("  (no hook files configured)")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
