"""
Single-answer extraction for chat/response LLM APIs.

Both OpenAI response shapes are supported: Chat Completions
(``choices[0].message``) and the Responses API (``output[].content[]``).
URL citations are read from ``url_citation`` annotations, which appear
either nested (``{"url_citation": {"url", "title"}}``) or flat.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..core.types import Answer, Citation, FetchResult
from ..errors import MissingPayloadError
from .base import ExtractionStrategy
from .fields import lookup


class AnswerStrategy(ExtractionStrategy[Answer]):
    def parse(self, result: FetchResult) -> Any:
        return result.json()


class ChatCompletionAnswer(AnswerStrategy):
    """Reads the first choice of a Chat Completions response."""

    def extract(self, document: Any) -> Answer:
        message = lookup(document, "choices.0.message")
        content = message.get("content") if isinstance(message, Mapping) else None
        if not isinstance(content, str) or not content.strip():
            raise MissingPayloadError("No assistant response returned")
        return Answer(
            text=content.strip(),
            citations=_citations(message.get("annotations")),
            response_id=document.get("id") if isinstance(document, Mapping) else None,
        )


class ResponsesAnswer(AnswerStrategy):
    """Reads the assistant message of a Responses API response.

    The first ``message`` output item is preferred, since web-search
    responses put tool-call items ahead of it; otherwise the first output
    item is used.
    """

    def extract(self, document: Any) -> Answer:
        part = _first_output_text(document)
        text = part.get("text") if isinstance(part, Mapping) else None
        if not isinstance(text, str) or not text.strip():
            raise MissingPayloadError("No valid assistant response returned")
        return Answer(
            text=text.strip(),
            citations=_citations(part.get("annotations")),
            response_id=document.get("id"),
        )


def _first_output_text(document: Any) -> Any:
    output = lookup(document, "output")
    if not isinstance(output, list):
        return None
    for item in output:
        if isinstance(item, Mapping) and item.get("type") == "message":
            for part in item.get("content") or []:
                if isinstance(part, Mapping) and part.get("type") in ("output_text", None):
                    return part
    return lookup(output, "0.content.0")


def _citations(annotations: Iterable[Any] | None) -> list[Citation]:
    citations: list[Citation] = []
    for annotation in annotations or []:
        if not isinstance(annotation, Mapping) or annotation.get("type") != "url_citation":
            continue
        source = annotation.get("url_citation") or annotation
        url = source.get("url") if isinstance(source, Mapping) else None
        if not url:
            continue
        citations.append(Citation(url=url, title=source.get("title") or ""))
    return citations
