"""
Artifact rendering for Markdown and JSON output.

All functions are pure: they return the artifact text and never touch
the filesystem. Persistence lives in writer.py.
"""

from __future__ import annotations

import json
from typing import Any

from ..core.types import Answer, Record


NO_RESULTS = "_No results found._"


def render_records(records: list[Record], title: str, badge: str | None = None) -> str:
    """Render records as a Markdown link list.

    Args:
        records: Records in page/API order
        title: Heading text
        badge: Optional format string applied to record.meta and appended
            after the link, e.g. "⭐ {stars}"

    Returns:
        Markdown text; an empty list renders a "no results" line
    """
    lines = [f"# {title}", ""]
    if not records:
        lines.extend([NO_RESULTS, ""])
    for record in records:
        link = f"- [{record.title}]({record.url})"
        if badge:
            suffix = _format_badge(badge, record)
            if suffix:
                link = f"{link} {suffix}"
        lines.extend([link, ""])
        if record.description:
            lines.extend([f"  {record.description}", ""])
    return "\n".join(lines)


def render_answer(answer: Answer, title: str) -> str:
    """Render a free-text answer with an optional citation list.

    The separator rule and citations only appear when at least one
    citation exists.
    """
    content = f"# {title}\n\n{answer.text}\n\n"
    if answer.citations:
        content += "---\n\n" + "\n".join(format_citations(answer)) + "\n"
    return content


def format_citations(answer: Answer) -> list[str]:
    return [
        f"  [{index}]: {citation.url} ({citation.title})"
        for index, citation in enumerate(answer.citations, start=1)
    ]


def render_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def _format_badge(badge: str, record: Record) -> str:
    try:
        return badge.format(**record.meta)
    except (KeyError, IndexError, ValueError):
        return ""
