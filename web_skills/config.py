"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings (timeouts, redirect budget)
- OpenAIConfig: Chat Completions / Responses API settings
- GitHubConfig: GitHub search API settings
- YouTubeConfig: YouTube Data API settings
- MailConfig: mail.tm REST API and SMTP relay settings
- OutputConfig: Where default artifact directories are created
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml

from .errors import ConfigError


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching.

    Attributes:
        timeout_seconds: Per-operation timeout (connect, read, write, pool)
        deadline_seconds: Overall wall-clock budget for one fetch, None for unbounded
        redirect_budget: Maximum number of redirects followed per fetch
        chunk_size: Bytes per chunk when streaming a body to disk
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string for page scraping
    """

    timeout_seconds: float = 20.0
    deadline_seconds: float | None = 120.0
    redirect_budget: int = 5
    chunk_size: int = 64 * 1024
    trust_env: bool = True
    user_agent: str = "Mozilla/5.0 (X11; Linux x86_64)"


@dataclass
class OpenAIConfig:
    """Configuration for the OpenAI-backed skills.

    Attributes:
        api_key_env: Environment variable name containing the API key
        api_key: Optional inline API key (overrides env var)
        base_url: API base URL; OPENAI_BASE_URL overrides when set
        search_model: Model for web-search chat completions; DEFAULT_MODEL overrides
        responses_model: Model for the Responses API
        system_prompt: System message sent with search requests
        user_location: Approximate location passed to web_search_options
    """

    api_key_env: str = "OPENAI_API_KEY"
    api_key: str | None = None
    base_url: str = "https://api.openai.com/v1"
    search_model: str = "gpt-4o-search-preview"
    responses_model: str = "gpt-4o-mini"
    system_prompt: str = "You are a helpful assistant with web browsing capability."
    user_location: dict[str, str] = field(
        default_factory=lambda: {
            "country": "US",
            "region": "California",
            "city": "San Francisco",
        }
    )


@dataclass
class GitHubConfig:
    """Configuration for GitHub repository search.

    Attributes:
        api_url: Base URL of the GitHub REST API
        token_env: Optional environment variable with a token for higher rate limits
    """

    api_url: str = "https://api.github.com"
    token_env: str = "GITHUB_TOKEN"


@dataclass
class YouTubeConfig:
    """Configuration for YouTube search.

    Attributes:
        api_url: Base URL of the YouTube Data API v3
        api_key_env: Environment variable with the Data API key
        api_key: Optional inline API key (overrides env var)
        max_results: Page size requested from the Data API
    """

    api_url: str = "https://www.googleapis.com/youtube/v3"
    api_key_env: str = "YOUTUBE_API_KEY"
    api_key: str | None = None
    max_results: int = 25


@dataclass
class MailConfig:
    """Configuration for the disposable mailbox skills.

    Attributes:
        api_url: mail.tm REST API base URL
        smtp_host: SMTP relay host used by send-mail
        smtp_port: SMTP relay port
        smtp_timeout: Socket timeout for the SMTP session
    """

    api_url: str = "https://api.mail.tm"
    smtp_host: str = "in.mail.tm"
    smtp_port: int = 25
    smtp_timeout: float = 30.0


@dataclass
class OutputConfig:
    """Configuration for artifact output.

    Attributes:
        root_dir: Directory under which per-skill default folders are created
    """

    root_dir: str = "."


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Path of the log file, relative to the output root
        mask_chars: Characters kept at each end when masking secrets in logs
    """

    level: str = "WARNING"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "web-skills.jsonl"
    mask_chars: int = 5


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing of LLM requests.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (optional)
        secret_key: Langfuse secret key (optional)
        host: Langfuse host URL (optional)
        max_text_chars: Maximum characters for prompt/response payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    youtube: YouTubeConfig = field(default_factory=YouTubeConfig)
    mail: MailConfig = field(default_factory=MailConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)


_SECTIONS = {
    "fetch": FetchConfig,
    "openai": OpenAIConfig,
    "github": GitHubConfig,
    "youtube": YouTubeConfig,
    "mail": MailConfig,
    "output": OutputConfig,
    "logging": LoggingConfig,
    "langfuse": LangfuseConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    Environment overrides (OPENAI_BASE_URL, DEFAULT_MODEL) are applied
    after the file so a shell export always wins.

    Raises:
        ConfigError: The file is not valid YAML, is not a mapping, or names
            a key a section does not have
    """
    if not path:
        return _apply_env(AppConfig())

    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    try:
        return _apply_env(_merge_config(AppConfig(), raw))
    except TypeError as exc:
        raise ConfigError(f"Invalid config in {path}: {exc}") from exc


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(**{name: cls(**data.get(name, {})) for name, cls in _SECTIONS.items()})


def _apply_env(cfg: AppConfig) -> AppConfig:
    base_url = os.getenv("OPENAI_BASE_URL")
    if base_url:
        cfg.openai.base_url = base_url
    model = os.getenv("DEFAULT_MODEL")
    if model:
        cfg.openai.search_model = model
    return cfg


def get_openai_api_key(cfg: OpenAIConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env)


def get_youtube_api_key(cfg: YouTubeConfig) -> str | None:
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env)


def get_github_token(cfg: GitHubConfig) -> str | None:
    return os.getenv(cfg.token_env) if cfg.token_env else None
