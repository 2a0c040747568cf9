from pathlib import Path

import pytest

from web_skills.config import (
    AppConfig,
    OpenAIConfig,
    get_openai_api_key,
    load_config,
)
from web_skills.errors import ConfigError


def test_load_config_defaults_without_file(monkeypatch):
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    monkeypatch.delenv("DEFAULT_MODEL", raising=False)

    cfg = load_config(None)

    assert cfg.fetch.redirect_budget == 5
    assert cfg.openai.base_url == "https://api.openai.com/v1"
    assert cfg.output.root_dir == "."


def test_load_config_merges_yaml_sections(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    monkeypatch.delenv("DEFAULT_MODEL", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(
        "fetch:\n"
        "  redirect_budget: 2\n"
        "output:\n"
        "  root_dir: out\n"
        "unknown_section:\n"
        "  ignored: true\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.fetch.redirect_budget == 2
    assert cfg.fetch.timeout_seconds == 20.0
    assert cfg.output.root_dir == "out"


def test_load_config_empty_file_uses_defaults(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)).fetch == AppConfig().fetch


def test_environment_overrides_openai_settings(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("OPENAI_BASE_URL", "https://proxy.example.com/v1")
    monkeypatch.setenv("DEFAULT_MODEL", "gpt-test-search")
    path = tmp_path / "config.yaml"
    path.write_text("openai:\n  base_url: https://file.example.com/v1\n", encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg.openai.base_url == "https://proxy.example.com/v1"
    assert cfg.openai.search_model == "gpt-test-search"


def test_inline_api_key_wins_over_environment(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "from-env")

    assert get_openai_api_key(OpenAIConfig(api_key="inline")) == "inline"
    assert get_openai_api_key(OpenAIConfig()) == "from-env"


@pytest.mark.parametrize(
    "content, message",
    [
        ("fetch:\n  bogus: 1\n", "bogus"),
        ("fetch: 3\n", "Invalid config"),
        ("- just\n- a list\n", "must contain a mapping"),
        ("fetch: [unclosed\n", "Invalid YAML"),
    ],
)
def test_load_config_rejects_malformed_files(tmp_path: Path, content, message):
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_config(str(path))
