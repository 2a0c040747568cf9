"""Deterministic default output paths derived from a skill's primary input.

Two inputs that slugify identically resolve to the same path and the later
run overwrites the earlier artifact.
"""

from __future__ import annotations

import re
from pathlib import Path


_SEPARATOR_RE = re.compile(r"[\s/\\]+")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")


def slugify(text: str, *, url: bool = False, lowercase: bool = False) -> str:
    """Convert an input string into a filesystem-safe slug.

    Args:
        text: Query text or URL
        url: Collapse every run of non-alphanumerics instead of only whitespace
            and path separators
        lowercase: Lowercase the slug

    Returns:
        The slug, or "untitled" when nothing survives

    Examples:
        >>> slugify("hello world")
        'hello-world'
        >>> slugify("../AC/DC live")
        'AC-DC-live'
        >>> slugify("https://a.com/x?y=1", url=True)
        'https-a-com-x-y-1'
    """
    pattern = _NON_ALNUM_RE if url else _SEPARATOR_RE
    # No separators survive and no leading dot, so the slug is one plain file name
    slug = pattern.sub("-", text.strip()).lstrip(".-").rstrip("-")
    if lowercase:
        slug = slug.lower()
    return slug or "untitled"


def resolve_output_path(
    text: str,
    base_dir: str | Path,
    explicit_path: str | Path | None = None,
    suffix: str = "",
    *,
    url: bool = False,
    lowercase: bool = False,
) -> Path:
    """Return the artifact path for an input.

    An explicit path is returned as-is and the caller owns its directories.
    Otherwise base_dir is created and the path is base_dir/<slug><suffix>.
    """
    if explicit_path:
        return Path(explicit_path)
    base = Path(base_dir)
    base.mkdir(parents=True, exist_ok=True)
    return base / f"{slugify(text, url=url, lowercase=lowercase)}{suffix}"
