"""
Langfuse tracing helpers for LLM requests.

This module wraps the Langfuse SDK so the OpenAI skills can emit spans
without a hard dependency when tracing is disabled or the SDK is absent.
"""

from __future__ import annotations

from contextlib import contextmanager
import json
import logging
import os
from typing import Any, Iterator

from ..config import LangfuseConfig
from ..utils.logging import truncate_text


logger = logging.getLogger(__name__)

_TRACER = None
_CFG: LangfuseConfig | None = None


def setup_langfuse(cfg: LangfuseConfig) -> None:
    """Initialize Langfuse tracing if enabled and keys are available."""
    global _TRACER, _CFG  # noqa: PLW0603
    _CFG = cfg
    _TRACER = None
    if not cfg.enabled:
        return
    public_key = cfg.public_key or os.getenv("LANGFUSE_PUBLIC_KEY")
    secret_key = cfg.secret_key or os.getenv("LANGFUSE_SECRET_KEY")
    if not public_key or not secret_key:
        logger.warning("Langfuse enabled but keys are missing; tracing disabled")
        return
    try:
        from langfuse import Langfuse  # type: ignore
    except ImportError:
        logger.warning("Langfuse enabled but the langfuse package is not installed")
        return

    _TRACER = Langfuse(
        public_key=public_key,
        secret_key=secret_key,
        host=cfg.host or os.getenv("LANGFUSE_HOST"),
    )


def get_tracer():
    return _TRACER


@contextmanager
def start_span(
    name: str,
    input_value: Any | None = None,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Any | None]:
    """Start a Langfuse span if tracing is enabled, else yield None."""
    tracer = get_tracer()
    if tracer is None:
        yield None
        return

    cm = tracer.start_as_current_span(
        name=name,
        input=_normalize_text(input_value),
        metadata=_clean_attributes(attributes or {}),
    )
    with cm as span:
        yield span


def set_span_output(span: Any | None, output_value: Any) -> None:
    if span is None:
        return
    payload = _normalize_text(output_value)
    if payload is not None:
        span.update(output=payload)


def record_span_error(span: Any | None, exc: Exception) -> None:
    if span is None:
        return
    span.update(level="ERROR", status_message=str(exc))


def flush() -> None:
    """Flush pending traces before the process exits."""
    tracer = get_tracer()
    if tracer is not None:
        tracer.flush()


def _normalize_text(value: Any) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=True, default=str)
    max_chars = _CFG.max_text_chars if _CFG is not None else 20000
    return truncate_text(text, max_chars)


def _clean_attributes(attrs: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in attrs.items():
        if value is None:
            continue
        cleaned[key] = value if isinstance(value, (str, int, float, bool)) else str(value)
    return cleaned
