"""Search skills: result pages scraped with selectors, and JSON search APIs."""

from __future__ import annotations

import html
from typing import Any, Mapping

from ..config import get_github_token, get_youtube_api_key
from ..core.types import Record, TransportConfig
from ..errors import ConfigError
from ..extract import FieldMappingStrategy, FieldSelector, SelectorStrategy
from .base import Skill


YOUTUBE_BASE = "https://www.youtube.com"


class BingSearch(Skill):
    """Scrape the Bing result page (one ``li.b_algo`` per organic result)."""

    name = "search-bing"
    output_dir = "search-bing"

    def title(self, target: str) -> str:
        return f'Search results for "{target}"'

    def transport(self, target: str) -> TransportConfig:
        return TransportConfig(
            url="https://www.bing.com/search",
            params={"q": target},
            headers={"User-Agent": self.cfg.fetch.user_agent},
        )

    @property
    def strategy(self) -> SelectorStrategy:
        return SelectorStrategy(
            container="li.b_algo",
            fields={
                "title": FieldSelector("h2 a"),
                "url": FieldSelector("h2 a", attribute="href"),
                "description": FieldSelector(".b_caption p"),
            },
        )


class GitHubSearch(Skill):
    """Repository search through the GitHub REST API."""

    name = "search-github"
    output_dir = "search-github"
    badge = "⭐ {stars}"

    def title(self, target: str) -> str:
        return f'GitHub search results for "{target}"'

    def transport(self, target: str) -> TransportConfig:
        headers = {"Accept": "application/vnd.github+json", "User-Agent": "web-skills"}
        token = get_github_token(self.cfg.github)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return TransportConfig(
            url=f"{self.cfg.github.api_url.rstrip('/')}/search/repositories",
            params={"q": target},
            headers=headers,
        )

    @property
    def strategy(self) -> FieldMappingStrategy:
        return FieldMappingStrategy(
            items_path="items",
            fields={
                "title": "full_name",
                "url": "html_url",
                "description": "description",
                "stars": "stargazers_count",
            },
        )


def youtube_watch_link(record: Record) -> Record | None:
    """Keep only watch links, cut at the first extra parameter."""
    if not record.url.startswith(f"{YOUTUBE_BASE}/watch"):
        return None
    record.url = record.url.split("&", 1)[0]
    return record


class YouTubeSearch(Skill):
    """Scrape the YouTube result page for ``a#video-title`` links.

    YouTube renders most results client-side, so the static page often
    yields nothing; an empty artifact is a valid outcome.
    """

    name = "search-youtube"
    output_dir = "search-youtube"

    def title(self, target: str) -> str:
        return f'YouTube search results for "{target}"'

    def transport(self, target: str) -> TransportConfig:
        return TransportConfig(
            url=f"{YOUTUBE_BASE}/results",
            params={"search_query": target},
            headers={"User-Agent": self.cfg.fetch.user_agent},
        )

    @property
    def strategy(self) -> SelectorStrategy:
        return SelectorStrategy(
            container="a#video-title",
            fields={
                "title": FieldSelector(),
                "url": FieldSelector(attribute="href"),
            },
            base_url=YOUTUBE_BASE,
            normalize=youtube_watch_link,
        )


def _video_url(item: Mapping[str, Any]) -> str:
    return f"{YOUTUBE_BASE}/watch?v={item['id']['videoId']}"


def _unescaped(path: str):
    first, second = path.split(".")

    def read(item: Mapping[str, Any]) -> str:
        return html.unescape(item[first][second])

    return read


class YouTubeApiSearch(Skill):
    """Video search through the YouTube Data API v3 ``search`` endpoint."""

    name = "search-youtube-api"
    output_dir = "search-youtube-api"

    def title(self, target: str) -> str:
        return f'YouTube search results for "{target}"'

    def transport(self, target: str) -> TransportConfig:
        api_key = get_youtube_api_key(self.cfg.youtube)
        if not api_key:
            raise ConfigError(f"Please set {self.cfg.youtube.api_key_env} in your environment")
        return TransportConfig(
            url=f"{self.cfg.youtube.api_url.rstrip('/')}/search",
            params={
                "part": "snippet",
                "type": "video",
                "q": target,
                "maxResults": self.cfg.youtube.max_results,
                "key": api_key,
            },
            headers={"Accept": "application/json"},
        )

    @property
    def strategy(self) -> FieldMappingStrategy:
        return FieldMappingStrategy(
            items_path="items",
            fields={
                "title": _unescaped("snippet.title"),
                "url": _video_url,
                "description": _unescaped("snippet.description"),
                "channel": "snippet.channelTitle",
            },
        )
