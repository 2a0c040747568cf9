"""
HTTP fetching.

This package holds the Bounded Redirect Fetcher used by every skill,
both for in-memory page/API fetches and for streamed downloads.
"""

from .fetcher import DEFAULT_REDIRECT_BUDGET, fetch

__all__ = ["DEFAULT_REDIRECT_BUDGET", "fetch"]
