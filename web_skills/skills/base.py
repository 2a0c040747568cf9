"""
Abstract base class for skills.

A skill is the provider-specific part of one acquisition: it builds the
HTTP request for a target, names the extraction strategy, and picks the
artifact title and default directory. Everything else (path resolution,
fetching, persistence, error tagging) is done by the runner.

To add a new skill:
1. Inherit from Skill and set name/output_dir
2. Implement title(), transport() and strategy
3. Register the class in factory.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import httpx

from ..config import AppConfig
from ..core.types import AcquisitionRequest, Answer, FetchResult, Record, TransportConfig
from ..extract.base import ExtractionStrategy
from ..fetch import fetch as fetch_url
from ..output.renderer import render_answer, render_records


class Skill(ABC):
    """Provider-specific half of the acquisition pipeline.

    Attributes:
        name: Registry/CLI name, e.g. "search-bing"
        output_dir: Default artifact directory under the output root
        suffix: Artifact file suffix
        url_input: Slugify the target as a URL (any non-alphanumeric run)
        lowercase_slug: Lowercase the derived file name
        badge: Optional format string rendered after each record link
    """

    name: str = ""
    output_dir: str = ""
    suffix: str = ".md"
    url_input: bool = False
    lowercase_slug: bool = False
    badge: str | None = None

    def __init__(self, cfg: AppConfig):
        self.cfg = cfg

    @abstractmethod
    def title(self, target: str) -> str:
        """Heading used for the rendered artifact."""
        raise NotImplementedError

    @abstractmethod
    def transport(self, target: str) -> TransportConfig:
        """Build the HTTP request for a target."""
        raise NotImplementedError

    @property
    @abstractmethod
    def strategy(self) -> ExtractionStrategy[Any]:
        raise NotImplementedError

    def build_request(self, target: str, output_path: str | Path | None = None) -> AcquisitionRequest:
        return AcquisitionRequest(
            target=target,
            transport=self.transport(target),
            output_path=Path(output_path) if output_path else None,
        )

    def default_dir(self) -> Path:
        return Path(self.cfg.output.root_dir) / self.output_dir

    def fetch(self, request: AcquisitionRequest, client: httpx.Client | None = None) -> FetchResult:
        transport = request.transport
        fetch_cfg = self.cfg.fetch
        return fetch_url(
            transport.url,
            redirect_budget=fetch_cfg.redirect_budget,
            method=transport.method,
            headers=transport.headers,
            params=transport.params,
            json=transport.json,
            timeout=fetch_cfg.timeout_seconds,
            deadline=fetch_cfg.deadline_seconds,
            client=client,
            trust_env=fetch_cfg.trust_env,
        )

    def render(self, extracted: list[Record] | Answer, request: AcquisitionRequest) -> str:
        title = self.title(request.target)
        if isinstance(extracted, Answer):
            return render_answer(extracted, title)
        return render_records(extracted, title, self.badge)
