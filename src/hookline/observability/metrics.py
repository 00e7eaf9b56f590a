"""Hook metrics recording — counters, histograms, with no-op fallback."""

from __future__ import annotations

from typing import Any

try:
    from opentelemetry import metrics

    _HAS_OTEL = True
except ImportError:
    _HAS_OTEL = False

# Lazily-created instruments
_meter: Any = None
_execution_counter: Any = None
_blocked_counter: Any = None
_duration_histogram: Any = None


def _ensure_instruments() -> None:
    """Create meter and instruments on first use."""
    global _meter, _execution_counter, _blocked_counter, _duration_histogram

    if not _HAS_OTEL or _meter is not None:
        return

    _meter = metrics.get_meter("hookline")
    _execution_counter = _meter.create_counter(
        "hookline.hook_executions",
        description="Hook executions, by event, type and outcome",
    )
    _blocked_counter = _meter.create_counter(
        "hookline.events_blocked",
        description="Events vetoed by at least one hook",
    )
    _duration_histogram = _meter.create_histogram(
        "hookline.hook_duration",
        description="Wall-clock duration of a single hook",
        unit="ms",
    )


def record_hook_execution(
    event: str, hook_type: str, *, success: bool, duration_ms: float,
) -> None:
    """Record one finished hook."""
    if not _HAS_OTEL:
        return
    _ensure_instruments()
    attrs = {"event": event, "hook_type": hook_type}
    _execution_counter.add(1, {**attrs, "success": str(success).lower()})
    _duration_histogram.record(duration_ms, attrs)


def record_hook_blocked(event: str) -> None:
    """Record an event whose aggregate verdict was block."""
    if not _HAS_OTEL:
        return
    _ensure_instruments()
    _blocked_counter.add(1, {"event": event})


def reset_instruments() -> None:
    """Reset module-level instruments — useful for test isolation."""
    global _meter, _execution_counter, _blocked_counter, _duration_histogram
    _meter = None
    _execution_counter = None
    _blocked_counter = None
    _duration_histogram = None
