"""Tests for Langfuse tracing setup behavior."""

from __future__ import annotations

from contextlib import contextmanager
import sys
import types

import httpx

from web_skills.config import AppConfig, LangfuseConfig
from web_skills.llm import tracing
from web_skills.runner import run_pipeline
from web_skills.skills import OpenAISearch


class _DummySpan:
    def __init__(self):
        self.updates: list[dict] = []

    def update(self, **kwargs):
        self.updates.append(kwargs)


class _DummyTracer:
    def __init__(self):
        self.spans: list[tuple[str, dict, _DummySpan]] = []
        self.flushed = 0

    def flush(self):
        self.flushed += 1

    @contextmanager
    def start_as_current_span(self, name, input=None, metadata=None):
        span = _DummySpan()
        self.spans.append((name, {"input": input, "metadata": metadata}, span))
        yield span


def test_setup_langfuse_reads_keys_and_host_from_env(monkeypatch):
    captured: dict = {}

    class DummyLangfuse:
        def __init__(self, **kwargs):
            captured.update(kwargs)

    fake_module = types.SimpleNamespace(Langfuse=DummyLangfuse)
    monkeypatch.setitem(sys.modules, "langfuse", fake_module)
    monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk-test")
    monkeypatch.setenv("LANGFUSE_SECRET_KEY", "sk-test")
    monkeypatch.setenv("LANGFUSE_HOST", "https://us.cloud.langfuse.com")

    try:
        tracing.setup_langfuse(LangfuseConfig(enabled=True))
        assert isinstance(tracing.get_tracer(), DummyLangfuse)
    finally:
        tracing.setup_langfuse(LangfuseConfig())

    assert captured["public_key"] == "pk-test"
    assert captured["secret_key"] == "sk-test"
    assert captured["host"] == "https://us.cloud.langfuse.com"


def test_setup_langfuse_disables_tracer_when_keys_missing(monkeypatch):
    monkeypatch.delenv("LANGFUSE_PUBLIC_KEY", raising=False)
    monkeypatch.delenv("LANGFUSE_SECRET_KEY", raising=False)

    tracing.setup_langfuse(LangfuseConfig(enabled=True))

    assert tracing.get_tracer() is None


def test_start_span_yields_none_when_disabled():
    tracing.setup_langfuse(LangfuseConfig())

    with tracing.start_span("openai.responses", input_value="hi") as span:
        tracing.set_span_output(span, "ignored")
        assert span is None


def test_start_span_records_input_output_and_drops_empty_attributes(monkeypatch):
    tracer = _DummyTracer()
    monkeypatch.setattr(tracing, "_TRACER", tracer)
    monkeypatch.setattr(tracing, "_CFG", LangfuseConfig(enabled=True, max_text_chars=5))

    with tracing.start_span(
        "openai.chat_completions",
        input_value="a long prompt",
        attributes={"llm.model": None, "skill": "search-openai", "extra": ["x"]},
    ) as span:
        tracing.set_span_output(span, {"id": 1})
        tracing.record_span_error(span, RuntimeError("boom"))

    name, started, recorded = tracer.spans[0]
    assert name == "openai.chat_completions"
    assert started["input"] == "a lon...(truncated)"
    assert started["metadata"] == {"skill": "search-openai", "extra": "['x']"}
    assert recorded.updates[0] == {"output": '{"id"...(truncated)'}
    assert recorded.updates[1] == {"level": "ERROR", "status_message": "boom"}


def test_flush_reaches_active_tracer(monkeypatch):
    tracer = _DummyTracer()
    monkeypatch.setattr(tracing, "_TRACER", tracer)

    tracing.flush()

    assert tracer.flushed == 1


def test_openai_skill_request_is_traced(tmp_path, monkeypatch):
    tracer = _DummyTracer()
    monkeypatch.setattr(tracing, "_TRACER", tracer)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-1234567890")
    cfg = AppConfig()
    cfg.output.root_dir = str(tmp_path)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "c1", "choices": [{"message": {"content": "Yes."}}]})

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        run_pipeline(OpenAISearch(cfg), "is it traced", client=client)

    name, started, span = tracer.spans[0]
    assert name == "openai.chat_completions"
    assert started["input"] == "is it traced"
    assert started["metadata"]["llm.model"] == cfg.openai.search_model
    assert "Yes." in span.updates[0]["output"]
