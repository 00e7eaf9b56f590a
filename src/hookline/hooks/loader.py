"""Hook declaration parsing (JSON/TOML/YAML).

A declaration maps event names to ordered lists of groups::

    {
      "hooks": {
        "PreToolUse": [
          {"matcher": "Write|Edit",
           "hooks": [{"type": "command", "command": "python3 ${PLUGIN_ROOT}/check.py",
                      "timeout": 10}]}
        ]
      }
    }

The ``hooks`` wrapper is optional. Timeouts are in seconds.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from hookline.types.hooks import HookDefinition, HookEvent, HookGroup, new_hook_id

logger = logging.getLogger(__name__)


class HookConfigError(ValueError):
    """A hook declaration document is structurally invalid."""


def parse_hooks_config(
    config: dict[str, Any], *, plugin_root: str | None = None,
) -> list[tuple[HookEvent, HookGroup]]:
    """Turn a parsed declaration into ``(event, group)`` pairs in encounter order.

    Problems inside a single hook definition (missing command, unknown type)
    are kept and surface as failed executions. Problems with the document
    shape raise HookConfigError before anything is returned.
    """
    if not isinstance(config, dict):
        raise HookConfigError(f"Hook config must be a mapping, got {type(config).__name__}")

    section = config.get("hooks", config)
    if not isinstance(section, dict):
        raise HookConfigError("'hooks' must be a mapping of event name to groups")

    pairs: list[tuple[HookEvent, HookGroup]] = []
    for event_name, groups in section.items():
        if event_name == "description" and section is config:
            continue
        try:
            event = HookEvent.parse(event_name)
        except ValueError as exc:
            raise HookConfigError(str(exc)) from None

        if groups is None:
            continue
        if not isinstance(groups, list):
            raise HookConfigError(f"Groups for {event.value} must be a list")

        for index, group_data in enumerate(groups):
            pairs.append((event, _build_group(event, index, group_data, plugin_root)))
    return pairs


def _build_group(
    event: HookEvent, index: int, data: Any, plugin_root: str | None,
) -> HookGroup:
    where = f"{event.value}[{index}]"
    if not isinstance(data, dict):
        raise HookConfigError(f"Hook group {where} must be a mapping")

    hooks_data = data.get("hooks", [])
    if not isinstance(hooks_data, list):
        raise HookConfigError(f"'hooks' in group {where} must be a list")

    matcher = data.get("matcher")
    if matcher is not None and not isinstance(matcher, str):
        raise HookConfigError(f"'matcher' in group {where} must be a string")

    return HookGroup(
        hooks=[_build_hook(f"{where}.hooks[{i}]", h) for i, h in enumerate(hooks_data)],
        matcher=matcher or None,
        description=str(data.get("description", "")),
        plugin_root=plugin_root,
    )


def _build_hook(where: str, data: Any) -> HookDefinition:
    if not isinstance(data, dict):
        raise HookConfigError(f"Hook {where} must be a mapping")

    timeout = data.get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise HookConfigError(f"'timeout' of hook {where} must be a number") from None
        if timeout <= 0:
            logger.warning("Ignoring non-positive timeout for hook %s", where)
            timeout = None

    return HookDefinition(
        type=str(data.get("type", "command")),
        command=str(data.get("command", "") or ""),
        prompt=str(data.get("prompt", "") or ""),
        id=str(data.get("id") or new_hook_id()),
        timeout=timeout,
        once=bool(data.get("once", False)),
        enabled=data.get("enabled", True) is not False,
        description=str(data.get("description", "")),
    )


def read_hooks_file(path: str | Path) -> dict[str, Any]:
    """Read a JSON, TOML or YAML hook declaration file."""
    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise HookConfigError(f"Cannot read hooks file {path}: {exc}") from exc

    suffix = path.suffix.lower()
    if suffix in (".yml", ".yaml"):
        try:
            import yaml
        except ImportError:
            raise HookConfigError(f"pyyaml not installed, cannot load {path}") from None
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise HookConfigError(f"Failed to parse YAML hooks file {path}: {exc}") from exc
    elif suffix == ".toml":
        import tomllib

        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise HookConfigError(f"Failed to parse TOML hooks file {path}: {exc}") from exc
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise HookConfigError(f"Failed to parse JSON hooks file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise HookConfigError(f"Hooks file {path} must contain a mapping")
    return data


def load_hooks_file(
    path: str | Path, *, plugin_root: str | None = None,
) -> list[tuple[HookEvent, HookGroup]]:
    """Read and parse one declaration file."""
    pairs = parse_hooks_config(read_hooks_file(path), plugin_root=plugin_root)
    logger.info("Loaded %d hook groups from %s", len(pairs), path)
    return pairs
