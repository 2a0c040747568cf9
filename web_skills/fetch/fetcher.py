"""
HTTP fetching with a bounded redirect budget.

Redirects are followed here rather than by httpx so the hop budget is
explicit: a fetch with budget N issues at most N + 1 requests, which also
bounds redirect cycles. Successful bodies are either read into memory (for
extraction) or streamed chunk by chunk to a file (for downloads), so a large
download never sits wholly in memory. Each blocking operation is bounded by
the httpx timeout and by an optional overall deadline.
"""

from __future__ import annotations

import logging
from pathlib import Path
import time
from typing import Any, Iterator, Mapping

import httpx

from ..core.types import FetchResult
from ..errors import (
    FetchTimeoutError,
    HttpError,
    HttpStatusError,
    InvalidUrlError,
    TooManyRedirectsError,
)


logger = logging.getLogger(__name__)

DEFAULT_REDIRECT_BUDGET = 5
DEFAULT_CHUNK_SIZE = 64 * 1024
# Bytes of an error body kept for diagnostics before the connection is released
DIAGNOSTIC_BYTES = 2048


def fetch(
    url: str,
    destination: str | Path | None = None,
    redirect_budget: int = DEFAULT_REDIRECT_BUDGET,
    *,
    method: str = "GET",
    headers: Mapping[str, str] | None = None,
    params: Mapping[str, Any] | None = None,
    json: Any = None,
    timeout: float | httpx.Timeout = 20.0,
    deadline: float | None = None,
    client: httpx.Client | None = None,
    trust_env: bool = True,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> FetchResult:
    """Fetch a URL, following at most ``redirect_budget`` redirects.

    Args:
        url: Absolute http(s) URL
        destination: File to stream the body into; None keeps it in memory
        redirect_budget: Redirects allowed before TooManyRedirectsError
        method: HTTP method of the first request
        headers: Request headers (Authorization is dropped on cross-host redirects)
        params: Query parameters for the first request
        json: JSON body for the first request
        timeout: httpx timeout applied to every network operation
        deadline: Overall seconds allowed for the whole fetch, None for unbounded
        client: Client to reuse; a private one is created and closed otherwise
        trust_env: Whether a private client honors proxy environment variables
        chunk_size: Bytes per chunk when streaming to destination

    Returns:
        FetchResult with body (in memory) or path (streamed) populated

    Raises:
        InvalidUrlError: url (or a redirect target) is not an http(s) URL
        TooManyRedirectsError: the budget ran out on a redirect response
        HttpStatusError: the terminal response was not 2xx
        FetchTimeoutError: a timeout or the deadline expired
        HttpError: any other transport failure
    """
    if client is None:
        with httpx.Client(timeout=timeout, trust_env=trust_env) as own_client:
            return fetch(
                url,
                destination,
                redirect_budget,
                method=method,
                headers=headers,
                params=params,
                json=json,
                timeout=timeout,
                deadline=deadline,
                client=own_client,
                chunk_size=chunk_size,
            )

    expires = time.monotonic() + deadline if deadline is not None else None
    current = _parse_url(url)
    request_headers = dict(headers or {})
    budget = redirect_budget
    visited: list[str] = []

    while True:
        _check_deadline(expires, str(current))
        try:
            with client.stream(
                method,
                current,
                headers=request_headers,
                params=params,
                json=json,
                timeout=timeout,
                follow_redirects=False,
            ) as response:
                location = response.headers.get("location")
                if 300 <= response.status_code < 400 and location:
                    if budget <= 0:
                        raise TooManyRedirectsError(str(response.url), redirect_budget)
                    target = _parse_url(str(response.url.join(location)))
                    logger.debug(
                        "Redirect %s %s -> %s", response.status_code, response.url, target
                    )
                    visited.append(str(response.url))
                    if target.host != response.url.host:
                        request_headers.pop("Authorization", None)
                        request_headers.pop("authorization", None)
                    method, json = _redirect_method(response.status_code, method, json)
                    params = None
                    current = target
                    budget -= 1
                    continue

                if not 200 <= response.status_code < 300:
                    raise HttpStatusError(
                        str(response.url), response.status_code, _drain(response)
                    )

                result = FetchResult(
                    url=url,
                    final_url=str(response.url),
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    redirects=visited,
                    encoding=response.charset_encoding or "utf-8",
                )
                if destination is not None:
                    result.path = _stream_to_file(response, Path(destination), chunk_size, expires)
                else:
                    result.body = b"".join(_iter_body(response, chunk_size, expires))
                logger.debug(
                    "Fetched %s (%s) after %d redirect(s)",
                    result.final_url,
                    result.status_code,
                    len(visited),
                )
                return result
        except httpx.TimeoutException as exc:
            raise FetchTimeoutError(f"Timed out: {exc}", str(current)) from exc
        except httpx.InvalidURL as exc:
            raise InvalidUrlError(str(current)) from exc
        except httpx.TransportError as exc:
            raise HttpError(f"{type(exc).__name__}: {exc}", str(current)) from exc


def _parse_url(url: str) -> httpx.URL:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidUrlError(str(url)) from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidUrlError(str(url))
    return parsed


def _redirect_method(status_code: int, method: str, body: Any) -> tuple[str, Any]:
    """Return the method and JSON body to use for the next hop.

    301/302/303 turn anything but GET/HEAD into a bodiless GET, as browsers
    do. 307/308 replay the original request unchanged.
    """
    if status_code in (301, 302, 303) and method not in ("GET", "HEAD"):
        return "GET", None
    return method, body


def _check_deadline(expires: float | None, url: str) -> None:
    if expires is not None and time.monotonic() > expires:
        raise FetchTimeoutError("Deadline exceeded", url)


def _iter_body(
    response: httpx.Response, chunk_size: int, expires: float | None
) -> Iterator[bytes]:
    for chunk in response.iter_bytes(chunk_size):
        _check_deadline(expires, str(response.url))
        yield chunk


def _stream_to_file(
    response: httpx.Response, destination: Path, chunk_size: int, expires: float | None
) -> Path:
    # Writes are synchronous, so the next chunk is not read until the
    # previous one is on disk. A failure mid-stream leaves a truncated file.
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("wb") as handle:
        for chunk in _iter_body(response, chunk_size, expires):
            handle.write(chunk)
    return destination


def _drain(response: httpx.Response) -> str:
    """Read a short prefix of an error body and discard the rest."""
    kept = bytearray()
    for chunk in response.iter_bytes():
        kept.extend(chunk)
        if len(kept) >= DIAGNOSTIC_BYTES:
            break
    return bytes(kept[:DIAGNOSTIC_BYTES]).decode(
        response.charset_encoding or "utf-8", errors="replace"
    )
