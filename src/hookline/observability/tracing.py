"""Spans around hook dispatch. Falls back to no-ops without OpenTelemetry."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from hookline.types.hooks import HookEventResult

try:
    from opentelemetry import trace

    _HAS_OTEL = True
except ImportError:
    _HAS_OTEL = False

TRACER_NAME = "hookline"


class _NoOpSpan:
    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def record_exception(self, exception: BaseException) -> None:
        pass

    def end(self) -> None:
        pass


class _NoOpTracer:
    def start_span(self, name: str, **kwargs: Any) -> _NoOpSpan:
        return _NoOpSpan()

    @contextmanager
    def start_as_current_span(self, name: str, **kwargs: Any) -> Generator[_NoOpSpan, None, None]:
        yield _NoOpSpan()


def get_tracer(name: str = TRACER_NAME) -> Any:
    if _HAS_OTEL:
        return trace.get_tracer(name)
    return _NoOpTracer()


@contextmanager
def span(name: str, attributes: dict[str, Any] | None = None) -> Generator[Any, None, None]:
    """Open a span as the current span; attributes are set at start."""
    with get_tracer().start_as_current_span(name, attributes=attributes) as s:
        yield s


def annotate_result(s: Any, result: HookEventResult) -> None:
    """Copy the verdict of an event onto its dispatch span."""
    s.set_attribute("hook.blocked", result.blocked)
    s.set_attribute("hook.all_passed", result.all_passed)
    s.set_attribute("hook.results", len(result.results))
    s.set_attribute("hook.duration_ms", result.total_duration * 1000)
