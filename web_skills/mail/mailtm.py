"""
Disposable mailbox operations against mail.tm.

Three independent operations share an Account stored as JSON:
- register_email: create an account and write register-email/<user>.json
- send_mail: send one message through the SMTP relay as that account
- check_mail: fetch the first page of the inbox into check-mail/<user>.json

Send and check expect an account file written by register_email; that
precondition is the caller's to enforce.
"""

from __future__ import annotations

from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid
import logging
from pathlib import Path
import secrets
import smtplib
import time
from typing import Any, Callable

import httpx

from ..config import AppConfig
from ..core.paths import resolve_output_path
from ..core.types import Account, RenderedArtifact
from ..errors import MissingPayloadError
from ..fetch import fetch
from ..output.renderer import render_json
from ..output.writer import write_artifact


logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Test Message"
DEFAULT_TEXT = "Hello from mail.tm API!"


@dataclass
class RegistrationResult:
    account: Account
    output_file: Path


@dataclass
class SendResult:
    info: dict[str, Any]
    output_file: Path


@dataclass
class MailboxResult:
    address: str
    messages: list[dict[str, Any]]
    output_file: Path


def _api_json(
    cfg: AppConfig,
    path: str,
    client: httpx.Client | None,
    *,
    method: str = "GET",
    json: Any = None,
    token: str | None = None,
) -> Any:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    result = fetch(
        f"{cfg.mail.api_url.rstrip('/')}{path}",
        redirect_budget=cfg.fetch.redirect_budget,
        method=method,
        headers=headers,
        json=json,
        timeout=cfg.fetch.timeout_seconds,
        deadline=cfg.fetch.deadline_seconds,
        client=client,
        trust_env=cfg.fetch.trust_env,
    )
    return result.json()


def _members(payload: Any) -> list[Any]:
    members = payload.get("hydra:member") if isinstance(payload, dict) else None
    return members if isinstance(members, list) else []


def register_email(cfg: AppConfig, *, client: httpx.Client | None = None) -> RegistrationResult:
    """Register a new mailbox on the first available domain.

    Raises:
        MissingPayloadError: No domain is offered
        HttpStatusError: The domain listing or registration was rejected
    """
    username = f"user{time.time_ns() // 1_000_000}"
    password = secrets.token_urlsafe(9) + "A!1"

    domains = _members(_api_json(cfg, "/domains?page=1", client))
    domain = domains[0].get("domain") if domains and isinstance(domains[0], dict) else None
    if not domain:
        raise MissingPayloadError("No domain available")

    address = f"{username}@{domain}"
    created = _api_json(
        cfg,
        "/accounts",
        client,
        method="POST",
        json={"address": address, "password": password},
    )
    account_id = created.get("id") if isinstance(created, dict) else None
    account = Account(address=address, password=password, id=account_id)

    output_file = resolve_output_path(
        username, Path(cfg.output.root_dir) / "register-email", suffix=".json"
    )
    write_artifact(RenderedArtifact(render_json(account.to_dict()), output_file))
    logger.info("Registered %s", address)
    return RegistrationResult(account=account, output_file=output_file)


def send_mail(
    account_path: str | Path,
    cfg: AppConfig,
    to: str | None = None,
    subject: str | None = None,
    text: str | None = None,
    *,
    smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
) -> SendResult:
    """Send one message through the mail.tm SMTP relay.

    Defaults send a test message to the account itself.
    """
    account = Account.from_file(Path(account_path))
    to_address = to or account.address
    message = EmailMessage()
    message["From"] = account.address
    message["To"] = to_address
    message["Subject"] = subject or DEFAULT_SUBJECT
    message["Message-ID"] = make_msgid(domain=account.address.split("@", 1)[-1])
    message.set_content(text or DEFAULT_TEXT)

    with smtp_factory(cfg.mail.smtp_host, cfg.mail.smtp_port, timeout=cfg.mail.smtp_timeout) as smtp:
        smtp.ehlo()
        if smtp.has_extn("starttls"):
            smtp.starttls()
            smtp.ehlo()
        smtp.login(account.address, account.password)
        refused = smtp.send_message(message)

    info = {
        "messageId": message["Message-ID"],
        "envelope": {"from": account.address, "to": [to_address]},
        "subject": message["Subject"],
        "accepted": [to_address] if to_address not in refused else [],
        "rejected": sorted(refused),
    }
    output_file = resolve_output_path(
        f"{account.username}-{time.time_ns() // 1_000_000}",
        Path(cfg.output.root_dir) / "send-mail",
        suffix=".json",
    )
    write_artifact(RenderedArtifact(render_json(info), output_file))
    logger.info("Sent %s to %s", info["messageId"], to_address)
    return SendResult(info=info, output_file=output_file)


def check_mail(
    account_path: str | Path,
    cfg: AppConfig,
    output_path: str | Path | None = None,
    *,
    client: httpx.Client | None = None,
) -> MailboxResult:
    """Fetch the first inbox page of an account.

    Raises:
        MissingPayloadError: The token endpoint returned no token
        HttpStatusError: Authentication or the message listing was rejected
    """
    account = Account.from_file(Path(account_path))
    output_file = resolve_output_path(
        account.username,
        Path(cfg.output.root_dir) / "check-mail",
        output_path,
        ".json",
    )

    token_payload = _api_json(
        cfg,
        "/token",
        client,
        method="POST",
        json={"address": account.address, "password": account.password},
    )
    token = token_payload.get("token") if isinstance(token_payload, dict) else None
    if not token:
        raise MissingPayloadError("Token response did not include a token")

    messages = _members(_api_json(cfg, "/messages?page=1", client, token=token))
    write_artifact(
        RenderedArtifact(render_json({"address": account.address, "messages": messages}), output_file)
    )
    logger.info("Fetched %d message(s) for %s", len(messages), account.address)
    return MailboxResult(address=account.address, messages=messages, output_file=output_file)
