"""
Provider-specific skills.

Each skill supplies the request, extraction strategy and title for one
provider; the runner drives them all through the same pipeline.
"""

from .base import Skill
from .factory import available_skills, create_skill
from .openai import OpenAIResponses, OpenAISearch
from .search import BingSearch, GitHubSearch, YouTubeApiSearch, YouTubeSearch

__all__ = [
    "Skill",
    "BingSearch",
    "GitHubSearch",
    "YouTubeSearch",
    "YouTubeApiSearch",
    "OpenAISearch",
    "OpenAIResponses",
    "available_skills",
    "create_skill",
]
