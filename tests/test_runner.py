"""End-to-end pipeline tests with a mocked HTTP transport."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from web_skills.config import AppConfig
from web_skills.errors import (
    ConfigError,
    HttpStatusError,
    InvalidInputError,
    InvalidUrlError,
    MissingPayloadError,
)
from web_skills.output.renderer import NO_RESULTS
from web_skills.runner import PipelineState, run_download, run_pipeline
from web_skills.skills import BingSearch, GitHubSearch, OpenAIResponses, OpenAISearch


BING_PAGE = """
<html><body><ol id="b_results">
  <li class="b_algo">
    <h2><a href="https://openai.com/codex">OpenAI Codex</a></h2>
    <div class="b_caption"><p>Codex translates natural language to code.</p></div>
  </li>
  <li class="b_algo">
    <h2><a href="https://github.com/openai/codex">openai/codex</a></h2>
    <div class="b_caption"><p>Lightweight coding agent.</p></div>
  </li>
  <li class="b_algo">
    <h2><a href="https://en.wikipedia.org/wiki/OpenAI_Codex">OpenAI Codex - Wikipedia</a></h2>
  </li>
</ol></body></html>
"""


def _config(tmp_path: Path) -> AppConfig:
    cfg = AppConfig()
    cfg.output.root_dir = str(tmp_path)
    return cfg


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _html(body: str):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=body, headers={"Content-Type": "text/html; charset=utf-8"})

    return handler


def test_bing_search_end_to_end(tmp_path: Path):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _html(BING_PAGE)(request)

    skill = BingSearch(_config(tmp_path))
    with _client(handler) as client:
        result = run_pipeline(skill, "openai codex", client=client)

    assert seen[0].url.params["q"] == "openai codex"
    assert len(result.records) == 3
    assert result.answer is None
    assert result.output_file == tmp_path / "search-bing" / "openai-codex.md"
    lines = result.output_file.read_text(encoding="utf-8").splitlines()
    assert lines[0] == '# Search results for "openai codex"'
    assert "- [OpenAI Codex](https://openai.com/codex)" in lines
    assert "  Codex translates natural language to code." in lines


def test_pipeline_overwrites_previous_artifact(tmp_path: Path):
    skill = BingSearch(_config(tmp_path))
    with _client(_html(BING_PAGE)) as client:
        first = run_pipeline(skill, "openai codex", client=client)
    with _client(_html("<html></html>")) as client:
        second = run_pipeline(skill, "openai   codex", client=client)

    assert first.output_file == second.output_file
    text = second.output_file.read_text(encoding="utf-8")
    assert NO_RESULTS in text
    assert "OpenAI Codex" not in text


def test_pipeline_explicit_output_path(tmp_path: Path):
    explicit = tmp_path / "elsewhere" / "result.md"
    skill = BingSearch(_config(tmp_path))
    with _client(_html(BING_PAGE)) as client:
        result = run_pipeline(skill, "openai codex", explicit, client=client)

    assert result.output_file == explicit
    assert explicit.exists()
    assert not (tmp_path / "search-bing" / "openai-codex.md").exists()


def test_empty_input_fails_while_building(tmp_path: Path):
    skill = BingSearch(_config(tmp_path))

    with pytest.raises(InvalidInputError) as excinfo:
        run_pipeline(skill, "   ")

    assert excinfo.value.state == PipelineState.BUILDING


def test_http_failure_is_tagged_with_fetching_state(tmp_path: Path):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    skill = BingSearch(_config(tmp_path))
    with _client(handler) as client:
        with pytest.raises(HttpStatusError) as excinfo:
            run_pipeline(skill, "openai codex", client=client)

    assert excinfo.value.state == PipelineState.FETCHING
    assert excinfo.value.body == "unavailable"
    assert not (tmp_path / "search-bing" / "openai-codex.md").exists()


def test_invalid_json_is_tagged_with_extracting_state(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    skill = GitHubSearch(_config(tmp_path))
    with _client(_html("<html>not json</html>")) as client:
        with pytest.raises(MissingPayloadError) as excinfo:
            run_pipeline(skill, "codex", client=client)

    assert excinfo.value.state == PipelineState.EXTRACTING


def test_github_search_renders_stars(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "full_name": "openai/codex",
                        "html_url": "https://github.com/openai/codex",
                        "description": "Coding agent",
                        "stargazers_count": 42,
                    }
                ]
            },
        )

    skill = GitHubSearch(_config(tmp_path))
    with _client(handler) as client:
        result = run_pipeline(skill, "codex", client=client)

    assert seen[0].url.path == "/search/repositories"
    assert seen[0].headers["authorization"] == "Bearer ghp_test"
    text = result.output_file.read_text(encoding="utf-8")
    assert "- [openai/codex](https://github.com/openai/codex) ⭐ 42" in text
    assert "  Coding agent" in text


def test_openai_search_without_key_fails_before_fetching(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    skill = OpenAISearch(_config(tmp_path))

    with pytest.raises(ConfigError, match="OPENAI_API_KEY") as excinfo:
        run_pipeline(skill, "what is codex")

    assert excinfo.value.state == PipelineState.BUILDING


def test_openai_search_saves_answer_and_citations(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-1234567890")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "id": "chatcmpl-9",
                "choices": [
                    {
                        "message": {
                            "content": "Codex is a coding agent.",
                            "annotations": [
                                {
                                    "type": "url_citation",
                                    "url_citation": {
                                        "url": "https://openai.com/codex",
                                        "title": "Codex",
                                    },
                                }
                            ],
                        }
                    }
                ],
            },
        )

    skill = OpenAISearch(_config(tmp_path))
    with _client(handler) as client:
        result = run_pipeline(skill, "What Is Codex", client=client)

    body = json.loads(seen[0].content)
    assert seen[0].method == "POST"
    assert seen[0].url.path.endswith("/chat/completions")
    assert body["messages"][1] == {"role": "user", "content": "What Is Codex"}
    assert "web_search_options" in body
    assert result.output_file == tmp_path / "search-openai" / "what-is-codex.md"
    assert result.answer.text == "Codex is a coding agent."
    assert [r.url for r in result.records] == ["https://openai.com/codex"]
    text = result.output_file.read_text(encoding="utf-8")
    assert text.startswith('# Search results for "What Is Codex"\n\nCodex is a coding agent.\n\n---\n\n')
    assert "  [1]: https://openai.com/codex (Codex)" in text


def test_openai_responses_passes_previous_response_id(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-1234567890")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "id": "resp_2",
                "output": [{"type": "message", "content": [{"type": "output_text", "text": "Sure."}]}],
            },
        )

    skill = OpenAIResponses(_config(tmp_path), previous_response_id="resp_1")
    with _client(handler) as client:
        result = run_pipeline(skill, "Tell me more", client=client)

    body = json.loads(seen[0].content)
    assert body["input"] == "Tell me more"
    assert body["previous_response_id"] == "resp_1"
    assert result.answer.response_id == "resp_2"
    assert result.records == []
    assert result.output_file == tmp_path / "responses-openai" / "tell-me-more.md"
    assert "---" not in result.output_file.read_text(encoding="utf-8")


def test_openai_missing_answer_is_tagged_with_extracting_state(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-1234567890")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": []})

    skill = OpenAISearch(_config(tmp_path))
    with _client(handler) as client:
        with pytest.raises(MissingPayloadError) as excinfo:
            run_pipeline(skill, "q", client=client)

    assert excinfo.value.state == PipelineState.EXTRACTING


def test_run_download_streams_to_default_path(tmp_path: Path):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/latest":
            return httpx.Response(302, headers={"Location": "/files/a.zip"})
        return httpx.Response(200, content=b"PK\x03\x04data")

    with _client(handler) as client:
        result = run_download("https://example.com/latest", None, _config(tmp_path), client=client)

    expected = tmp_path / "download" / "https-example-com-latest"
    assert result.path == expected
    assert expected.read_bytes() == b"PK\x03\x04data"
    assert result.final_url == "https://example.com/files/a.zip"


def test_run_download_rejects_invalid_url(tmp_path: Path):
    with pytest.raises(InvalidUrlError) as excinfo:
        run_download("ftp://example.com/file", None, _config(tmp_path))

    assert excinfo.value.state == PipelineState.FETCHING


def test_query_with_path_segments_writes_inside_skill_dir(tmp_path: Path):
    root = tmp_path / "root"
    skill = BingSearch(_config(root))
    with _client(_html(BING_PAGE)) as client:
        result = run_pipeline(skill, "../../escaped now", client=client)

    assert result.output_file == root / "search-bing" / "escaped-now.md"
    assert not (tmp_path / "escaped-now.md").exists()
