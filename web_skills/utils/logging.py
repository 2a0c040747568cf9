from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from rich.console import Console
from rich.logging import RichHandler

from ..config import LoggingConfig


LOGGER_NAME = "web_skills"
_SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "x-api-key"}


def setup_logging(cfg: LoggingConfig, output_root: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_string(cfg.level))
    logger.handlers = []
    logger.propagate = False

    if cfg.console:
        console_handler = RichHandler(
            console=Console(stderr=True), rich_tracebacks=True, show_time=False, show_level=True
        )
        console_handler.setLevel(_level_from_string(cfg.level))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    if cfg.file and output_root is not None:
        file_path = output_root / cfg.filename
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setLevel(_level_from_string(cfg.level))
        file_handler.setFormatter(_build_file_formatter(cfg.format))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def log_event(logger: logging.Logger | None, message: str, **fields: Any) -> None:
    if logger is None:
        return
    logger.info(message, extra=fields)


def mask_secret(value: str, keep_chars: int = 5) -> str:
    """Mask a secret, keeping the first and last few characters.

    A "Bearer " prefix is preserved so the header shape stays readable.

    Examples:
        >>> mask_secret("Bearer sk-abcdefghijklmnop")
        'Bearer sk-ab...lmnop'
    """
    prefix = ""
    if value.startswith("Bearer "):
        prefix, value = "Bearer ", value[len("Bearer "):]
    if len(value) <= keep_chars * 2:
        return prefix + value
    return f"{prefix}{value[:keep_chars]}...{value[-keep_chars:]}"


def mask_headers(headers: Mapping[str, str], keep_chars: int = 5) -> dict[str, str]:
    return {
        key: mask_secret(value, keep_chars) if key.lower() in _SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def truncate_text(text: str, max_chars: int = 20000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...(truncated)"


class JsonlFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extract_extras(record))
        return json.dumps(payload, ensure_ascii=True, default=str)


_RESERVED = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message"}


def _extract_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RESERVED}


def _build_file_formatter(fmt: str) -> logging.Formatter:
    if fmt == "jsonl":
        return JsonlFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(message)s")


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
