"""
Output generation.

This package handles rendering artifacts to Markdown/JSON
and persisting them to disk.
"""

from .renderer import NO_RESULTS, format_citations, render_answer, render_json, render_records
from .writer import write_artifact

__all__ = [
    "NO_RESULTS",
    "format_citations",
    "render_answer",
    "render_json",
    "render_records",
    "write_artifact",
]
