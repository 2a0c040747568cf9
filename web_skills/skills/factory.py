"""Skill factory and registry."""

from __future__ import annotations

from typing import Any

from ..config import AppConfig
from .base import Skill
from .openai import OpenAIResponses, OpenAISearch
from .search import BingSearch, GitHubSearch, YouTubeApiSearch, YouTubeSearch


_SKILL_REGISTRY: dict[str, type[Skill]] = {
    cls.name: cls
    for cls in (
        BingSearch,
        GitHubSearch,
        YouTubeSearch,
        YouTubeApiSearch,
        OpenAISearch,
        OpenAIResponses,
    )
}


def available_skills() -> list[str]:
    """Return the registered skill names."""
    return sorted(_SKILL_REGISTRY.keys())


def create_skill(name: str, cfg: AppConfig, **options: Any) -> Skill:
    """Build a skill instance by name.

    Args:
        name: Registered skill name (see available_skills())
        cfg: Application configuration
        **options: Skill-specific constructor options (e.g. previous_response_id)
    """
    builder = _SKILL_REGISTRY.get(name.lower().strip())
    if builder is None:
        supported = ", ".join(available_skills())
        raise ValueError(f"Unsupported skill: {name}. Supported: {supported}")
    return builder(cfg, **options)
