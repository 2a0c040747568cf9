"""
Typed failures raised by the acquisition pipeline.

Every failure a skill can produce is a subclass of SkillError. The
orchestrator tags the exception with the pipeline state it failed in,
and the CLI maps any of them to a single diagnostic line and exit code 1.
OSError from the filesystem is deliberately not wrapped.
"""

from __future__ import annotations

from typing import Any


class SkillError(Exception):
    """Base class for all pipeline failures.

    Attributes:
        state: Pipeline state the failure happened in, set by the runner
    """

    state: Any = None


class InvalidInputError(SkillError, ValueError):
    """The primary argument (query, prompt, URL) is empty or malformed."""


class InvalidUrlError(SkillError, ValueError):
    """A URL could not be parsed or uses an unsupported scheme."""

    def __init__(self, url: str):
        super().__init__(f"Invalid URL: {url}")
        self.url = url


class HttpError(SkillError):
    """An HTTP exchange failed.

    Attributes:
        url: The URL that was being requested
        status_code: Response status, or None for transport-level failures
        body: Response body prefix for diagnostics, if any was read
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.body = body


class HttpStatusError(HttpError):
    """The terminal response had a non-2xx status."""

    def __init__(self, url: str, status_code: int, body: str | None = None):
        super().__init__(f"HTTP {status_code}", url, status_code=status_code, body=body)


class FetchTimeoutError(HttpError):
    """The request exceeded its timeout or overall deadline."""


class TooManyRedirectsError(SkillError):
    """The redirect budget ran out before a terminal response."""

    def __init__(self, url: str, budget: int):
        super().__init__(f"Too many redirects (budget {budget}) at {url}")
        self.url = url
        self.budget = budget


class MissingPayloadError(SkillError):
    """The upstream response lacks the field the skill needs."""


class ConfigError(SkillError):
    """Required configuration (API key, account file) is missing or invalid."""
