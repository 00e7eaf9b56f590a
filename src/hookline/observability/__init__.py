"""OpenTelemetry metrics and spans for hook execution."""

from hookline.observability.metrics import (
    record_hook_blocked,
    record_hook_execution,
    reset_instruments,
)
from hookline.observability.tracing import annotate_result, get_tracer, span

__all__ = [
    "annotate_result",
    "get_tracer",
    "record_hook_blocked",
    "record_hook_execution",
    "reset_instruments",
    "span",
]
