from __future__ import annotations

from opentelemetry import trace

from tableside.api.middleware.request_id import get_request_id
from tableside.application.gateway.context import TraceContext


def current_trace_id() -> str | None:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.trace_id, "032x")


def current_trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())
