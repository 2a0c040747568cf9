"""
web-skills - fetch, extract, render and save web resources.

Each skill builds one request (a search page, a search API, an LLM
answer, a download), extracts records from the response and writes a
Markdown or JSON artifact to a deterministic path.

Main entry point is the CLI via the `web-skills` command.

Example:
    $ web-skills search-bing "openai codex"
    ✅ Saved 10 results to search-bing/openai-codex.md
"""

__all__ = ["__version__", "create_skill", "run_download", "run_pipeline", "resolve_output_path"]
__version__ = "0.1.0"

from .core.paths import resolve_output_path
from .runner import run_download, run_pipeline
from .skills import create_skill
