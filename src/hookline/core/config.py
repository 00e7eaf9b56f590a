"""Configuration loading (TOML, env vars)."""

from __future__ import annotations

import dataclasses
import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from hookline.types.config import HookManagerOptions

logger = logging.getLogger(__name__)

# Load .env from current directory (and parents), won't override existing env vars
load_dotenv()

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    logger.warning("Ignoring %s=%r: expected a boolean", name, raw)
    return None


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: expected a number of seconds", name, raw)
        return None


def load_env_config() -> dict[str, Any]:
    """Load hook settings from environment variables."""
    config: dict[str, Any] = {}

    if (parallel := _env_bool("HOOKLINE_PARALLEL")) is not None:
        config["parallel"] = parallel
    if (debug := _env_bool("HOOKLINE_DEBUG")) is not None:
        config["debug"] = debug
    if (timeout := _env_float("HOOKLINE_COMMAND_TIMEOUT")) is not None:
        config["default_command_timeout"] = timeout
    if (timeout := _env_float("HOOKLINE_PROMPT_TIMEOUT")) is not None:
        config["default_prompt_timeout"] = timeout
    if hooks_file := os.environ.get("HOOKLINE_HOOKS_FILE"):
        config["files"] = [hooks_file]

    return config


def load_toml_config(cwd: str | None = None) -> dict[str, Any]:
    """Load configuration from .hookline/config.toml if it exists.

    Looks in *cwd*, then the process working directory, then
    ``~/.hookline/config.toml``. The first file found wins.
    """
    candidates: list[Path] = []
    if cwd:
        candidates.append(Path(cwd) / ".hookline" / "config.toml")
    candidates.append(Path.cwd() / ".hookline" / "config.toml")
    candidates.append(Path.home() / ".hookline" / "config.toml")

    for toml_path in candidates:
        if not toml_path.exists():
            continue
        try:
            with open(toml_path, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning("Cannot read config file %s: %s", toml_path, exc)
    return {}


def load_hooks_section(cwd: str | None = None) -> dict[str, Any]:
    """Load the [hooks] section from config."""
    section = load_toml_config(cwd).get("hooks", {})
    return section if isinstance(section, dict) else {}


_OPTION_FIELDS = {f.name for f in dataclasses.fields(HookManagerOptions)}


def load_manager_options(cwd: str | None = None) -> HookManagerOptions:
    """Build HookManagerOptions from the [hooks] TOML section, overridden by env vars."""
    merged: dict[str, Any] = {}
    for source in (load_hooks_section(cwd), load_env_config()):
        merged.update({k: v for k, v in source.items() if k in _OPTION_FIELDS})

    for key in ("default_command_timeout", "default_prompt_timeout"):
        if key in merged:
            merged[key] = float(merged[key])
    for key in ("parallel", "debug"):
        if key in merged:
            merged[key] = bool(merged[key])
    return HookManagerOptions(**merged)


def hook_files(cwd: str | None = None) -> list[Path]:
    """Hook declaration files named in config, relative paths resolved against *cwd*."""
    base = Path(cwd) if cwd else Path.cwd()
    names: list[str] = []
    files = load_hooks_section(cwd).get("files", [])
    if isinstance(files, str):
        files = [files]
    names.extend(str(f) for f in files)
    names.extend(load_env_config().get("files", []))

    paths: list[Path] = []
    for name in names:
        path = Path(name).expanduser()
        if not path.is_absolute():
            path = base / path
        if path not in paths:
            paths.append(path)
    return paths
