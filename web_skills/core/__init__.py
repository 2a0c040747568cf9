"""
Core domain models and path resolution.

This package contains data types and helpers that are
independent of any specific provider.
"""

from .paths import resolve_output_path, slugify
from .types import (
    AcquisitionRequest,
    Account,
    Answer,
    Citation,
    FetchResult,
    PipelineResult,
    Record,
    RenderedArtifact,
    TransportConfig,
)

__all__ = [
    "AcquisitionRequest",
    "Account",
    "Answer",
    "Citation",
    "FetchResult",
    "PipelineResult",
    "Record",
    "RenderedArtifact",
    "TransportConfig",
    "resolve_output_path",
    "slugify",
]
