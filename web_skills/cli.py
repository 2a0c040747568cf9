"""
Command-line interface for web-skills.

Uses Typer to expose one sub-command per skill. Every command prints a
single summary line on success and a single error line (exit code 1) on
failure; --verbose adds a traceback. Supports loading .env files for
API key configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv
import typer
from rich.console import Console

from .config import AppConfig, load_config
from .errors import ConfigError, HttpError, SkillError
from .llm.tracing import flush, setup_langfuse
from .mail import check_mail, register_email, send_mail
from .output.renderer import format_citations
from .runner import run_download, run_pipeline
from .skills import available_skills, create_skill
from .utils.logging import setup_logging

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)


class _State:
    def __init__(self, cfg: AppConfig, verbose: bool):
        self.cfg = cfg
        self.verbose = verbose


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="YAML config file."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Debug logging and tracebacks on failure."
    ),
):
    """Acquire a remote resource, extract records and save a Markdown/JSON artifact."""
    load_dotenv()
    try:
        cfg = load_config(str(config) if config else None)
    except ConfigError as exc:
        _fail(verbose, exc)
    if log_level:
        cfg.logging.level = log_level
    if verbose:
        cfg.logging.level = "DEBUG"
    setup_logging(cfg.logging, Path(cfg.output.root_dir))
    setup_langfuse(cfg.langfuse)
    ctx.obj = _State(cfg, verbose)


def _fail(verbose: bool, exc: Exception) -> NoReturn:
    if verbose:
        err_console.print_exception()
    err_console.print(f"❌ {_describe(exc)}", markup=False)
    raise typer.Exit(code=1)


def _describe(exc: Exception) -> str:
    message = str(exc) or type(exc).__name__
    if isinstance(exc, HttpError) and exc.body:
        body = " ".join(exc.body.split())
        message = f"{message}: {body[:200]}"
    return message


def _run_skill(
    ctx: typer.Context,
    name: str,
    target: str,
    output: Path | None,
    **options,
) -> None:
    state: _State = ctx.obj
    try:
        skill = create_skill(name, state.cfg, **options)
        result = run_pipeline(skill, target, output)
    except (SkillError, OSError, ValueError) as exc:
        _fail(state.verbose, exc)
    finally:
        flush()

    if result.answer is None:
        console.print(f"✅ Saved {len(result.records)} results to {result.output_file}", markup=False)
        return
    console.print(f"✅ Saved response to {result.output_file}", markup=False)
    console.print(result.answer.text, markup=False)
    if result.answer.citations:
        console.print("\nCitations:\n" + "\n".join(format_citations(result.answer)), markup=False)


@app.command("search-bing")
def search_bing(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query."),
    output: Path | None = typer.Argument(None, help="Output file (default search-bing/<slug>.md)."),
):
    """Search Bing and save the organic results."""
    _run_skill(ctx, "search-bing", query, output)


@app.command("search-github")
def search_github(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query."),
    output: Path | None = typer.Argument(None, help="Output file (default search-github/<slug>.md)."),
):
    """Search GitHub repositories and save name, stars and description."""
    _run_skill(ctx, "search-github", query, output)


@app.command("search-youtube")
def search_youtube(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query."),
    output: Path | None = typer.Argument(None, help="Output file (default search-youtube/<slug>.md)."),
):
    """Search YouTube by scraping the result page."""
    _run_skill(ctx, "search-youtube", query, output)


@app.command("search-youtube-api")
def search_youtube_api(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query."),
    output: Path | None = typer.Argument(
        None, help="Output file (default search-youtube-api/<slug>.md)."
    ),
):
    """Search YouTube through the Data API (needs YOUTUBE_API_KEY)."""
    _run_skill(ctx, "search-youtube-api", query, output)


@app.command("search-openai")
def search_openai(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Question to research."),
    output: Path | None = typer.Argument(None, help="Output file (default search-openai/<slug>.md)."),
):
    """Answer a question with OpenAI web search and save answer + citations."""
    _run_skill(ctx, "search-openai", query, output)


@app.command("response-openai")
def response_openai(
    ctx: typer.Context,
    prompt: str = typer.Argument(..., help="Prompt text."),
    previous_response_id: str | None = typer.Argument(
        None, help="Continue the conversation of an earlier response."
    ),
    output: Path | None = typer.Argument(
        None, help="Output file (default responses-openai/<slug>.md)."
    ),
):
    """Generate a reply with the OpenAI Responses API."""
    _run_skill(
        ctx,
        "response-openai",
        prompt,
        output,
        previous_response_id=previous_response_id or None,
    )


@app.command()
def download(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL to download."),
    output: Path | None = typer.Argument(None, help="Output file (default download/<slug>)."),
):
    """Download a URL to disk, following at most the configured redirects."""
    state: _State = ctx.obj
    try:
        result = run_download(url, output, state.cfg)
    except (SkillError, OSError) as exc:
        _fail(state.verbose, exc)
    console.print(f"✅ Saved {url} → {result.path}", markup=False)


@app.command("register-email")
def register(ctx: typer.Context):
    """Register a new disposable mailbox."""
    state: _State = ctx.obj
    try:
        result = register_email(state.cfg)
    except (SkillError, OSError) as exc:
        _fail(state.verbose, exc)
    console.print(f"✅ Registered {result.account.address} → {result.output_file}", markup=False)


@app.command("send-mail")
def send(
    ctx: typer.Context,
    account: Path = typer.Argument(..., help="Account JSON written by register-email."),
    to: str | None = typer.Argument(None, help="Recipient (default: the account itself)."),
    subject: str | None = typer.Argument(None, help="Subject line."),
    text: str | None = typer.Argument(None, help="Message body."),
):
    """Send a message from a registered mailbox."""
    state: _State = ctx.obj
    try:
        result = send_mail(account, state.cfg, to, subject, text)
    except (SkillError, OSError) as exc:
        _fail(state.verbose, exc)
    console.print(f"✅ Message sent: {result.info['messageId']}", markup=False)
    console.print(f"✅ Saved send result to {result.output_file}", markup=False)


@app.command("check-mail")
def check(
    ctx: typer.Context,
    account: Path = typer.Argument(..., help="Account JSON written by register-email."),
    output: Path | None = typer.Argument(None, help="Output file (default check-mail/<user>.json)."),
):
    """Fetch the inbox of a registered mailbox."""
    state: _State = ctx.obj
    try:
        result = check_mail(account, state.cfg, output)
    except (SkillError, OSError) as exc:
        _fail(state.verbose, exc)
    console.print(f"✅ Saved {len(result.messages)} messages to {result.output_file}", markup=False)


@app.command("skills")
def list_skills():
    """List the registered search/answer skills."""
    for name in available_skills():
        console.print(name, markup=False)


if __name__ == "__main__":
    app()
