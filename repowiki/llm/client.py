"""Client for OpenAI-compatible chat-completion endpoints."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http.client import HTTPException
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import LLMConfig
from ..errors import CompletionError
from ..logging import get_logger
from ..models import CompletionResult
from ..prompting.constants import SYSTEM_PROMPT

COMPLETIONS_PATH = "/v1/chat/completions"


@dataclass(frozen=True)
class CompletionRequest:
    """A single chat-completion call."""

    model: str
    system: str
    prompt: str
    temperature: float
    max_tokens: int
    request_timeout: Optional[float]

    def to_payload(self) -> dict[str, object]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.system},
                {"role": "user", "content": self.prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


class CompletionClient:
    """Sends the assembled context to the completion endpoint once."""

    def __init__(self, config: LLMConfig | None = None, *, system: str = SYSTEM_PROMPT) -> None:
        self.config = config or LLMConfig()
        self.system = system
        self.endpoint = f"{self.config.base_url.rstrip('/')}{COMPLETIONS_PATH}"
        self.logger = get_logger("llm.client")

    def build_request(self, prompt: str) -> CompletionRequest:
        return CompletionRequest(
            model=self.config.model,
            system=self.system,
            prompt=prompt,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            request_timeout=self.config.request_timeout,
        )

    def generate_structured_docs(self, payload: str) -> CompletionResult:
        """Return the raw completion text, or the failure that prevented it."""
        request = self.build_request(payload)
        self.logger.info("Requesting documentation from %s (%s)", self.endpoint, request.model)
        try:
            content = self._send(request)
        except CompletionError as exc:
            self.logger.error("Completion request failed: %s", exc)
            return CompletionResult(error=exc)
        return CompletionResult(content=content)

    def _send(self, request: CompletionRequest) -> str:
        data = json.dumps(request.to_payload()).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        http_request = Request(self.endpoint, data=data, headers=headers, method="POST")

        try:
            with urlopen(http_request, timeout=request.request_timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace") if exc.fp is not None else ""
            raise CompletionError(
                f"Completion endpoint returned {exc.code}: {body}",
                kind=CompletionError.STATUS,
                status=exc.code,
                body=body,
            ) from exc
        except URLError as exc:
            raise CompletionError(
                f"Completion endpoint unreachable: {exc.reason}",
                kind=CompletionError.NETWORK,
            ) from exc
        except (OSError, HTTPException) as exc:
            raise CompletionError(
                f"Completion request failed: {exc}",
                kind=CompletionError.NETWORK,
            ) from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (ValueError, RecursionError) as exc:
            raise CompletionError(
                "Completion endpoint returned a body that is not JSON",
                kind=CompletionError.EMPTY,
            ) from exc

        content = self._extract_content(payload)
        if not content:
            raise CompletionError("AI returned empty content", kind=CompletionError.EMPTY)
        return content

    @staticmethod
    def _extract_content(payload: object) -> str:
        if not isinstance(payload, dict):
            return ""
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        return ""


__all__ = ["COMPLETIONS_PATH", "CompletionClient", "CompletionRequest"]
