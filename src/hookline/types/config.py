"""Configuration types for hookline."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_COMMAND_TIMEOUT = 60.0  # seconds
DEFAULT_PROMPT_TIMEOUT = 30.0  # seconds


@dataclass(frozen=True, slots=True)
class HookManagerOptions:
    """Construction-time policy for a HookManager."""

    default_command_timeout: float = DEFAULT_COMMAND_TIMEOUT
    default_prompt_timeout: float = DEFAULT_PROMPT_TIMEOUT
    parallel: bool = True  # False = sequential with early stop on block
    debug: bool = False
