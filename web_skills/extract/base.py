"""
Abstract base class for extraction strategies.

A strategy turns one FetchResult into either an ordered list of Records
or a single Answer. New strategies should inherit from ExtractionStrategy
and implement parse() and extract().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from ..core.types import FetchResult


T = TypeVar("T")


class ExtractionStrategy(ABC, Generic[T]):
    """Turns a raw response into typed output.

    Strategies never fail on zero matches and skip malformed items
    instead of raising.
    """

    @abstractmethod
    def parse(self, result: FetchResult) -> Any:
        """Decode the response body into the document extract() expects."""
        raise NotImplementedError

    @abstractmethod
    def extract(self, document: Any) -> T:
        """Produce output from a decoded document."""
        raise NotImplementedError

    def run(self, result: FetchResult) -> T:
        return self.extract(self.parse(result))
