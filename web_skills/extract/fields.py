"""
Field-mapping extraction from JSON API responses.

The item list is located with a dotted path (``items``,
``data.results``), then each item is mapped to a Record through a
field -> dotted path (or callable) mapping. Absent optional fields are
set to an explicit placeholder instead of being omitted.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from ..core.types import FetchResult, Record
from .base import ExtractionStrategy


logger = logging.getLogger(__name__)

FieldSpec = str | Callable[[Mapping[str, Any]], Any]
_RECORD_FIELDS = ("title", "url", "description")


def lookup(data: Any, path: str) -> Any:
    """Resolve a dotted path in nested dicts/lists, returning None when absent.

    Examples:
        >>> lookup({"a": {"b": [1, 2]}}, "a.b.1")
        2
        >>> lookup({"a": {}}, "a.b.c") is None
        True
    """
    current = data
    for part in path.split(".") if path else []:
        if isinstance(current, Mapping):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


class FieldMappingStrategy(ExtractionStrategy[list[Record]]):
    """Extract records from a parsed JSON document.

    Args:
        items_path: Dotted path to the list of items ("" for a top-level list)
        fields: Record field name -> dotted path or callable(item); names
            other than title/url/description are stored in Record.meta
        placeholder: Value used for absent optional fields
    """

    def __init__(self, items_path: str, fields: Mapping[str, FieldSpec], placeholder: Any = ""):
        self.items_path = items_path
        self.fields = dict(fields)
        self.placeholder = placeholder

    def parse(self, result: FetchResult) -> Any:
        return result.json()

    def extract(self, document: Any) -> list[Record]:
        items = lookup(document, self.items_path)
        if not isinstance(items, list):
            return []

        records: list[Record] = []
        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                logger.debug("Skipping item %d: not an object", index)
                continue
            values = {name: _resolve(item, spec) for name, spec in self.fields.items()}
            title, url = values.get("title"), values.get("url")
            if not title or not url:
                logger.debug("Skipping item %d: missing title or url", index)
                continue
            description = values.get("description")
            records.append(
                Record(
                    title=str(title),
                    url=str(url),
                    description=self.placeholder if description is None else str(description),
                    meta={
                        name: self.placeholder if value is None else value
                        for name, value in values.items()
                        if name not in _RECORD_FIELDS
                    },
                )
            )
        return records


def _resolve(item: Mapping[str, Any], spec: FieldSpec) -> Any:
    if callable(spec):
        try:
            return spec(item)
        except (KeyError, IndexError, TypeError):
            return None
    return lookup(item, spec)
