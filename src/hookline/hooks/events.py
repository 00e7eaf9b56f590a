"""Hook input builder for event data."""

from __future__ import annotations

import dataclasses
import re
from typing import Any

from hookline.types.hooks import HookContext, HookEvent
from hookline.types.inputs import INPUT_TYPES, HookInput

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def build_hook_input(
    event: HookEvent | str,
    payload: dict[str, Any] | None = None,
    *,
    context: HookContext | None = None,
) -> HookInput:
    """Build the typed input for *event* from a loose payload mapping.

    Keys may be camelCase (the wire form) or snake_case. Keys that do not
    belong to the event are ignored; a missing required field raises
    ``ValueError``.
    """
    event = HookEvent.parse(event)
    cls = INPUT_TYPES[event]
    names = {f.name for f in dataclasses.fields(cls) if f.name != "context"}

    kwargs: dict[str, Any] = {}
    for key, value in (payload or {}).items():
        name = _snake(key)
        if name in names:
            kwargs[name] = value

    try:
        return cls(**kwargs, context=context)  # type: ignore[return-value]
    except TypeError as exc:
        raise ValueError(f"Invalid payload for {event.value}: {exc}") from None
