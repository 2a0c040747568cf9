from __future__ import annotations

from pathlib import Path

from ..core.types import RenderedArtifact


def write_artifact(artifact: RenderedArtifact) -> Path:
    """Write an artifact, replacing any existing file at its path.

    Parent directories are created. A failed write may leave a truncated
    file behind; OSError propagates to the caller unchanged.
    """
    path = Path(artifact.output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(artifact.content, encoding="utf-8")
    return path
