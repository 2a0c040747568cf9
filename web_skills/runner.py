"""
Pipeline orchestration for a single skill invocation.

This module coordinates one acquisition:
1. Validate the input and resolve the artifact path
2. Fetch the resource (bounded redirects)
3. Extract records or an answer with the skill's strategy
4. Render the artifact
5. Persist it, replacing any previous file at the same path

Failures are raised, not retried. SkillError instances are tagged with
the state they failed in; OSError from persistence propagates untouched.
"""

from __future__ import annotations

from enum import Enum
import logging
from pathlib import Path

import httpx

from .config import AppConfig
from .core.paths import resolve_output_path
from .core.types import Answer, FetchResult, PipelineResult, Record, RenderedArtifact
from .errors import InvalidInputError, SkillError
from .fetch import fetch
from .output.writer import write_artifact
from .skills.base import Skill
from .utils.logging import get_logger, log_event


class PipelineState(str, Enum):
    BUILDING = "building"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    RENDERING = "rendering"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class _Tracker:
    """Records the current state and tags failures with it."""

    def __init__(self, logger: logging.Logger, name: str, target: str):
        self.logger = logger
        self.name = name
        self.target = target
        self.state = PipelineState.BUILDING

    def enter(self, state: PipelineState) -> None:
        self.state = state
        self.logger.debug("%s: %s", self.name, state.value)

    def __enter__(self) -> "_Tracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            return False
        if isinstance(exc, SkillError) and exc.state is None:
            exc.state = self.state
        if isinstance(exc, (SkillError, OSError)):
            log_event(
                self.logger,
                "Pipeline failed",
                event="pipeline_failed",
                skill=self.name,
                target=self.target,
                state=self.state.value,
                error=f"{type(exc).__name__}: {exc}",
            )
            self.state = PipelineState.FAILED
        return False


def _require_input(value: str, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{what} must be a non-empty string")
    return value


def run_pipeline(
    skill: Skill,
    target: str,
    output_path: str | Path | None = None,
    *,
    client: httpx.Client | None = None,
    logger: logging.Logger | None = None,
) -> PipelineResult:
    """Run one skill end to end and return the uniform result.

    Args:
        skill: The provider-specific skill
        target: Query text, prompt or URL
        output_path: Explicit artifact path; derived from target when None
        client: Optional httpx client (tests inject a MockTransport here)
        logger: Logger for pipeline events

    Returns:
        PipelineResult with the extracted records and the artifact path

    Raises:
        SkillError: Any typed failure, with ``state`` set
        OSError: The artifact could not be written
    """
    logger = logger or get_logger("runner")
    with _Tracker(logger, skill.name, str(target)) as tracker:
        _require_input(target, "input")
        request = skill.build_request(target, output_path)
        path = resolve_output_path(
            target,
            skill.default_dir(),
            request.output_path,
            skill.suffix,
            url=skill.url_input,
            lowercase=skill.lowercase_slug,
        )

        tracker.enter(PipelineState.FETCHING)
        result = skill.fetch(request, client)

        tracker.enter(PipelineState.EXTRACTING)
        extracted = skill.strategy.run(result)

        tracker.enter(PipelineState.RENDERING)
        content = skill.render(extracted, request)

        tracker.enter(PipelineState.PERSISTING)
        written = write_artifact(RenderedArtifact(content=content, output_path=path))
        tracker.enter(PipelineState.DONE)

    if isinstance(extracted, Answer):
        records = [Record(title=c.title, url=c.url) for c in extracted.citations]
        answer: Answer | None = extracted
    else:
        records, answer = extracted, None

    log_event(
        logger,
        "Pipeline complete",
        event="pipeline_complete",
        skill=skill.name,
        output=str(written),
        total=len(records),
    )
    return PipelineResult(records=records, output_file=written, answer=answer)


def run_download(
    url: str,
    output_path: str | Path | None,
    cfg: AppConfig,
    *,
    client: httpx.Client | None = None,
    logger: logging.Logger | None = None,
) -> FetchResult:
    """Stream a URL to disk through the Bounded Redirect Fetcher.

    The default path is ``download/<url-slug>`` under the output root.
    Fetching and persisting happen together, one chunk at a time.
    """
    logger = logger or get_logger("runner")
    with _Tracker(logger, "download", str(url)) as tracker:
        _require_input(url, "url")
        path = resolve_output_path(
            url.strip(),
            Path(cfg.output.root_dir) / "download",
            output_path,
            url=True,
        )
        tracker.enter(PipelineState.FETCHING)
        result = fetch(
            url.strip(),
            path,
            cfg.fetch.redirect_budget,
            headers={"User-Agent": cfg.fetch.user_agent},
            timeout=cfg.fetch.timeout_seconds,
            deadline=cfg.fetch.deadline_seconds,
            client=client,
            trust_env=cfg.fetch.trust_env,
            chunk_size=cfg.fetch.chunk_size,
        )
        tracker.enter(PipelineState.DONE)

    log_event(
        logger,
        "Download complete",
        event="download_complete",
        url=url,
        final_url=result.final_url,
        output=str(result.path),
        redirects=len(result.redirects),
    )
    return result
