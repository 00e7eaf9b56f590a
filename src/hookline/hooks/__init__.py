"""Hook engine: matching, execution and per-event dispatch."""

from hookline.hooks.events import build_hook_input
from hookline.hooks.executor import LLMCallback, execute_hook
from hookline.hooks.loader import HookConfigError, load_hooks_file, parse_hooks_config
from hookline.hooks.manager import HookManager, aggregate_results
from hookline.hooks.matcher import find_matching_hooks, matches
from hookline.hooks.prompt import callback_from_provider, ensure_async

__all__ = [
    "HookConfigError",
    "HookManager",
    "LLMCallback",
    "aggregate_results",
    "build_hook_input",
    "callback_from_provider",
    "ensure_async",
    "execute_hook",
    "find_matching_hooks",
    "load_hooks_file",
    "matches",
    "parse_hooks_config",
]
