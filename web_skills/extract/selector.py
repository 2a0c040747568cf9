"""
Selector-based extraction from HTML pages.

One Record is produced per element matching the container selector.
Field values come from CSS sub-selectors evaluated inside the container,
reading either the element text or an attribute. Containers missing a
title or url are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Mapping
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..core.types import FetchResult, Record
from .base import ExtractionStrategy


logger = logging.getLogger(__name__)

RecordHook = Callable[[Record], "Record | None"]
_RECORD_FIELDS = ("title", "url", "description")


@dataclass(frozen=True)
class FieldSelector:
    """How to read one field from a container element.

    Attributes:
        selector: CSS selector relative to the container; None means the container itself
        attribute: Attribute to read; None reads the element text
        required: Skip the container when this field is empty
    """
    selector: str | None = None
    attribute: str | None = None
    required: bool = False


class SelectorStrategy(ExtractionStrategy[list[Record]]):
    """Extract records from markup with CSS selectors.

    Args:
        container: CSS selector matching one element per record
        fields: Record field name -> FieldSelector; names other than
            title/url/description are stored in Record.meta
        base_url: When set, relative urls are joined against it
        normalize: Hook applied to each record; returning None drops it
        parser: BeautifulSoup parser name
    """

    def __init__(
        self,
        container: str,
        fields: Mapping[str, FieldSelector],
        base_url: str | None = None,
        normalize: RecordHook | None = None,
        parser: str = "html.parser",
    ):
        self.container = container
        self.fields = dict(fields)
        self.base_url = base_url
        self.normalize = normalize
        self.parser = parser

    def parse(self, result: FetchResult) -> BeautifulSoup:
        return BeautifulSoup(result.text(), self.parser)

    def extract(self, document: BeautifulSoup | str) -> list[Record]:
        soup = document if isinstance(document, BeautifulSoup) else BeautifulSoup(document, self.parser)
        records: list[Record] = []
        for index, element in enumerate(soup.select(self.container)):
            try:
                record = self._extract_one(element)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.debug("Skipping container %d: %s", index, exc)
                continue
            if record is not None:
                records.append(record)
        return records

    def _extract_one(self, element: Tag) -> Record | None:
        values: dict[str, str] = {}
        for name, spec in self.fields.items():
            value = _read_field(element, spec)
            if not value and (spec.required or name in ("title", "url")):
                return None
            values[name] = value

        url = values.get("url", "")
        if self.base_url:
            url = urljoin(self.base_url, url)
        record = Record(
            title=values.get("title", ""),
            url=url,
            description=values.get("description", ""),
            meta={k: v for k, v in values.items() if k not in _RECORD_FIELDS},
        )
        if self.normalize is not None:
            return self.normalize(record)
        return record


def _read_field(element: Tag, spec: FieldSelector) -> str:
    if spec.selector is None:
        matches = [element]
    else:
        matches = element.select(spec.selector)
    if not matches:
        return ""

    if spec.attribute is not None:
        value = matches[0].get(spec.attribute)
        if isinstance(value, list):
            value = " ".join(value)
        return (value or "").strip()

    # Text of every match, like jQuery/cheerio .text() on a selection
    texts = (" ".join(match.get_text().split()) for match in matches)
    return " ".join(text for text in texts if text)
