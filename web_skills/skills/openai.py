"""OpenAI answer skills: web-search Chat Completions and the Responses API."""

from __future__ import annotations

from abc import abstractmethod
import logging
from typing import Any

import httpx

from ..config import AppConfig, get_openai_api_key
from ..core.types import AcquisitionRequest, FetchResult, TransportConfig
from ..errors import ConfigError, HttpError
from ..extract import ChatCompletionAnswer, ResponsesAnswer
from ..llm.tracing import record_span_error, set_span_output, start_span
from ..utils.logging import mask_headers, truncate_text
from .base import Skill


logger = logging.getLogger(__name__)


class _OpenAISkill(Skill):
    lowercase_slug = True
    endpoint = ""

    def _headers(self) -> dict[str, str]:
        api_key = get_openai_api_key(self.cfg.openai)
        if not api_key:
            raise ConfigError(f"Please set your {self.cfg.openai.api_key_env} in your environment")
        return {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

    def _url(self) -> str:
        return f"{self.cfg.openai.base_url.rstrip('/')}/{self.endpoint}"

    @abstractmethod
    def payload(self, target: str) -> dict[str, Any]:
        """JSON body sent to the endpoint."""
        raise NotImplementedError

    def transport(self, target: str) -> TransportConfig:
        return TransportConfig(
            url=self._url(),
            method="POST",
            headers=self._headers(),
            json=self.payload(target),
        )

    def fetch(self, request: AcquisitionRequest, client: httpx.Client | None = None) -> FetchResult:
        transport = request.transport
        keep = self.cfg.logging.mask_chars
        logger.debug("Request URL: %s", transport.url)
        logger.debug("Request headers: %s", mask_headers(transport.headers, keep))
        logger.debug("Request payload: %s", transport.json)

        model = (transport.json or {}).get("model")
        with start_span(
            f"openai.{self.endpoint.replace('/', '_')}",
            input_value=request.target,
            attributes={"llm.model": model, "llm.provider": "openai", "skill": self.name},
        ) as span:
            try:
                result = super().fetch(request, client)
            except HttpError as exc:
                record_span_error(span, exc)
                if exc.body:
                    logger.debug("Response body: %s", exc.body)
                raise
            logger.debug("Response status: %s", result.status_code)
            logger.debug("Response headers: %s", mask_headers(result.headers, keep))
            logger.debug("Response body: %s", truncate_text(result.text(), 4000))
            set_span_output(span, result.text())
        return result


class OpenAISearch(_OpenAISkill):
    """Web search through Chat Completions with ``web_search_options``."""

    name = "search-openai"
    output_dir = "search-openai"
    endpoint = "chat/completions"

    def title(self, target: str) -> str:
        return f'Search results for "{target}"'

    def payload(self, target: str) -> dict[str, Any]:
        openai_cfg = self.cfg.openai
        return {
            "model": openai_cfg.search_model,
            "messages": [
                {"role": "system", "content": openai_cfg.system_prompt},
                {"role": "user", "content": target},
            ],
            "web_search_options": {
                "user_location": {
                    "type": "approximate",
                    "approximate": dict(openai_cfg.user_location),
                }
            },
        }

    @property
    def strategy(self) -> ChatCompletionAnswer:
        return ChatCompletionAnswer()


class OpenAIResponses(_OpenAISkill):
    """Single turn of the Responses API, optionally continuing a prior response."""

    name = "response-openai"
    output_dir = "responses-openai"
    endpoint = "responses"

    def __init__(self, cfg: AppConfig, previous_response_id: str | None = None):
        super().__init__(cfg)
        self.previous_response_id = previous_response_id

    def title(self, target: str) -> str:
        return f'Response for "{target}"'

    def payload(self, target: str) -> dict[str, Any]:
        body: dict[str, Any] = {"model": self.cfg.openai.responses_model, "input": target}
        if self.previous_response_id:
            body["previous_response_id"] = self.previous_response_id
        return body

    @property
    def strategy(self) -> ResponsesAnswer:
        return ResponsesAnswer()
