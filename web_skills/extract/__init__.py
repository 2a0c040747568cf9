"""
Extraction strategies.

Selector-based (HTML), field-mapping (JSON) and single-answer (LLM)
strategies share the ExtractionStrategy interface so the runner can
drive any skill the same way.
"""

from .answer import AnswerStrategy, ChatCompletionAnswer, ResponsesAnswer
from .base import ExtractionStrategy
from .fields import FieldMappingStrategy, lookup
from .selector import FieldSelector, SelectorStrategy

__all__ = [
    "AnswerStrategy",
    "ChatCompletionAnswer",
    "ExtractionStrategy",
    "FieldMappingStrategy",
    "FieldSelector",
    "ResponsesAnswer",
    "SelectorStrategy",
    "lookup",
]
