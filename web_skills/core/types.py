"""
Core data types for the acquisition pipeline.

This module defines the data structures that flow through one pipeline run:
- TransportConfig / AcquisitionRequest: what to fetch and where to write it
- FetchResult: what the Bounded Redirect Fetcher produced
- Record / Citation / Answer: what extraction strategies produce
- RenderedArtifact / PipelineResult: what gets persisted and returned
- Account: mailbox credentials shared by the mail skills
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import json
from pathlib import Path
from typing import Any, Mapping

from ..errors import ConfigError, MissingPayloadError


@dataclass(frozen=True)
class TransportConfig:
    """HTTP request description consumed by the fetcher.

    Attributes:
        url: Absolute http(s) URL
        method: HTTP method
        headers: Extra request headers
        params: Query string parameters merged into the URL
        json: JSON body for POST requests, or None
    """
    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, Any] | None = None
    json: Any = None


@dataclass(frozen=True)
class AcquisitionRequest:
    """One acquisition: the primary input plus the request built from it.

    Attributes:
        target: The query text, prompt or URL given by the caller
        transport: The HTTP request to issue
        output_path: Explicit artifact path, or None to derive it from target
    """
    target: str
    transport: TransportConfig
    output_path: Path | None = None


@dataclass
class FetchResult:
    """Result of a successful fetch.

    Exactly one of body and path is populated: body for in-memory fetches,
    path when the body was streamed to a file.

    Attributes:
        url: The URL originally requested
        final_url: The URL that produced the terminal response
        status_code: Terminal HTTP status (always 2xx)
        headers: Terminal response headers
        body: Response bytes for in-memory fetches
        path: Destination file for streamed fetches
        redirects: URLs visited before final_url, in order
    """
    url: str
    final_url: str
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
    path: Path | None = None
    redirects: list[str] = field(default_factory=list)
    encoding: str = "utf-8"

    def text(self) -> str:
        if self.body is None:
            return ""
        return self.body.decode(self.encoding or "utf-8", errors="replace")

    def json(self) -> Any:
        try:
            return json.loads(self.text())
        except json.JSONDecodeError as exc:
            raise MissingPayloadError(f"Response from {self.final_url} is not valid JSON") from exc


@dataclass
class Record:
    """One extracted item.

    Attributes:
        title: Title or name shown as link text
        url: Link target
        description: Optional description line ("" when absent)
        meta: Provider-specific extras (e.g. stars for repositories)
    """
    title: str
    url: str
    description: str = ""
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Citation:
    url: str
    title: str = ""


@dataclass
class Answer:
    """Free-text answer returned by a chat/response provider.

    Attributes:
        text: The assistant's answer, stripped
        citations: URL citations in the order the provider listed them
        response_id: Provider response id, usable for follow-up turns
    """
    text: str
    citations: list[Citation] = field(default_factory=list)
    response_id: str | None = None


@dataclass(frozen=True)
class RenderedArtifact:
    content: str
    output_path: Path


@dataclass
class PipelineResult:
    """Uniform result every skill returns.

    Attributes:
        records: Extracted records; for answer skills, one per citation
        output_file: Path of the persisted artifact
        answer: The free-text answer for chat/response skills, else None
    """
    records: list[Record]
    output_file: Path
    answer: Answer | None = None


@dataclass
class Account:
    """Disposable mailbox credentials.

    Attributes:
        address: Full mailbox address (user@domain)
        password: Account password
        id: Provider account id, when known
    """
    address: str
    password: str
    id: str | None = None

    @property
    def username(self) -> str:
        return self.address.split("@", 1)[0]

    @classmethod
    def from_file(cls, path: Path) -> "Account":
        """Load an account JSON file written by register-email."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Account file {path} is not valid JSON") from exc
        if not isinstance(data, dict) or not data.get("address") or not data.get("password"):
            raise ConfigError(f"Account file {path} must contain address and password")
        return cls(address=data["address"], password=data["password"], id=data.get("id"))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
