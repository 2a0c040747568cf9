"""LLM observability."""

from .tracing import flush, record_span_error, set_span_output, setup_langfuse, start_span

__all__ = [
    "setup_langfuse",
    "flush",
    "start_span",
    "set_span_output",
    "record_span_error",
]
