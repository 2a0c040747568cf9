"""Tests for the skill registry."""

import pytest

from web_skills.config import AppConfig
from web_skills.errors import ConfigError
from web_skills.skills import (
    BingSearch,
    GitHubSearch,
    OpenAIResponses,
    YouTubeApiSearch,
    available_skills,
    create_skill,
)


def test_available_skills_contains_search_and_answer_skills():
    names = available_skills()
    assert names == sorted(names)
    for name in (
        "search-bing",
        "search-github",
        "search-youtube",
        "search-youtube-api",
        "search-openai",
        "response-openai",
    ):
        assert name in names


def test_create_skill_by_name():
    assert isinstance(create_skill("search-bing", AppConfig()), BingSearch)
    assert isinstance(create_skill(" Search-GitHub ", AppConfig()), GitHubSearch)


def test_create_skill_passes_options():
    skill = create_skill("response-openai", AppConfig(), previous_response_id="resp_1")

    assert isinstance(skill, OpenAIResponses)
    assert skill.payload("hi")["previous_response_id"] == "resp_1"


def test_create_skill_rejects_unknown_name():
    with pytest.raises(ValueError, match="Unsupported skill"):
        create_skill("search-altavista", AppConfig())


def test_youtube_api_requires_key(monkeypatch):
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
    skill = YouTubeApiSearch(AppConfig())

    with pytest.raises(ConfigError, match="YOUTUBE_API_KEY"):
        skill.transport("cats")


def test_youtube_api_transport_and_mapping(monkeypatch):
    monkeypatch.setenv("YOUTUBE_API_KEY", "yt-key")
    skill = YouTubeApiSearch(AppConfig())

    transport = skill.transport("cats")
    records = skill.strategy.extract(
        {
            "items": [
                {
                    "id": {"videoId": "abc"},
                    "snippet": {
                        "title": "Cats &amp; Dogs",
                        "description": "",
                        "channelTitle": "Pets",
                    },
                },
                {"id": {"kind": "youtube#channel"}, "snippet": {"title": "No video"}},
            ]
        }
    )

    assert transport.params["key"] == "yt-key"
    assert transport.params["q"] == "cats"
    assert len(records) == 1
    assert records[0].title == "Cats & Dogs"
    assert records[0].url == "https://www.youtube.com/watch?v=abc"
    assert records[0].meta == {"channel": "Pets"}


def test_openai_skill_subclass_must_define_payload():
    from web_skills.extract import ChatCompletionAnswer
    from web_skills.skills.openai import _OpenAISkill

    class NoPayload(_OpenAISkill):
        name = "no-payload"
        endpoint = "chat/completions"

        def title(self, target):
            return target

        @property
        def strategy(self):
            return ChatCompletionAnswer()

    with pytest.raises(TypeError, match="payload"):
        NoPayload(AppConfig())
