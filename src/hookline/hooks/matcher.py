"""Tool-name matching for hook groups."""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from hookline.types.hooks import HookGroup

logger = logging.getLogger(__name__)

# Maximum allowed length for a matcher pattern to mitigate ReDoS.
_MAX_PATTERN_LEN = 1024


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | None:
    if len(pattern) > _MAX_PATTERN_LEN:
        logger.warning("Skipping oversized hook matcher (%d chars)", len(pattern))
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        logger.warning("Invalid regex in hook matcher %r: %s", pattern, exc)
        return None


def matches(pattern: str | None, tool_name: str | None) -> bool:
    """Return True if *pattern* matches the whole of *tool_name*.

    The pattern is a regular expression, so ``Edit|Write`` is plain
    alternation and a literal name matches itself. An empty pattern, an empty
    tool name or a pattern that does not compile never matches.
    """
    if not pattern or not tool_name:
        return False
    compiled = _compile(pattern)
    if compiled is None:
        return False
    return compiled.fullmatch(tool_name) is not None


def find_matching_hooks(tool_name: str, groups: list[HookGroup]) -> list[HookGroup]:
    """Return every group whose matcher matches *tool_name*, in input order."""
    return [g for g in groups if matches(g.matcher, tool_name)]
