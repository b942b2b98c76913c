"""Tests for the completion client."""

from __future__ import annotations

import io
import json
from http.client import IncompleteRead
from urllib.error import HTTPError, URLError

import pytest

from repowiki.config import LLMConfig
from repowiki.errors import CompletionError
from repowiki.llm.client import CompletionClient
from repowiki.prompting.constants import SYSTEM_PROMPT


class FakeResponse:
    def __init__(self, payload):
        self._payload = payload

    def read(self):
        if isinstance(self._payload, bytes):
            return self._payload
        return json.dumps(self._payload).encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def _config(**overrides) -> LLMConfig:
    values = {
        "base_url": "http://llm.internal:8317/",
        "model": "test-model",
        "api_key": "secret-key",
        "temperature": 0.3,
        "max_tokens": 8192,
        "request_timeout": 25.0,
    }
    values.update(overrides)
    return LLMConfig(**values)


def test_client_posts_chat_completion_payload(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["method"] = request.get_method()
        captured["headers"] = {k.lower(): v for k, v in request.header_items()}
        captured["payload"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        return FakeResponse({"choices": [{"message": {"content": '{"overview": "x"}'}}]})

    monkeypatch.setattr("repowiki.llm.client.urlopen", fake_urlopen)

    result = CompletionClient(_config()).generate_structured_docs("REPOSITORY: a/b")

    assert result.ok
    assert result.content == '{"overview": "x"}'
    assert captured["url"] == "http://llm.internal:8317/v1/chat/completions"
    assert captured["method"] == "POST"
    assert captured["headers"]["content-type"] == "application/json"
    assert captured["headers"]["authorization"] == "Bearer secret-key"
    payload = captured["payload"]
    assert payload["model"] == "test-model"
    assert payload["messages"] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "REPOSITORY: a/b"},
    ]
    assert payload["temperature"] == 0.3
    assert payload["max_tokens"] == 8192
    assert captured["timeout"] == 25.0


def test_client_returns_raw_text_unmodified(monkeypatch) -> None:
    text = "  Here is the JSON:\n```json\n{}\n```\n"
    monkeypatch.setattr(
        "repowiki.llm.client.urlopen",
        lambda request, timeout=None: FakeResponse({"choices": [{"message": {"content": text}}]}),
    )

    result = CompletionClient(_config()).generate_structured_docs("ctx")

    assert result.unwrap() == text


def test_client_omits_authorization_without_key(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["headers"] = {k.lower() for k, _ in request.header_items()}
        return FakeResponse({"choices": [{"message": {"content": "ok"}}]})

    monkeypatch.setattr("repowiki.llm.client.urlopen", fake_urlopen)

    CompletionClient(_config(api_key=None)).generate_structured_docs("ctx")

    assert "authorization" not in captured["headers"]


def test_client_reports_http_status_with_body(monkeypatch) -> None:
    calls = []

    def fake_urlopen(request, timeout=None):
        calls.append(request)
        raise HTTPError(
            request.full_url,
            502,
            "Bad Gateway",
            hdrs=None,
            fp=io.BytesIO(b'{"error": "upstream down"}'),
        )

    monkeypatch.setattr("repowiki.llm.client.urlopen", fake_urlopen)

    result = CompletionClient(_config()).generate_structured_docs("ctx")

    assert not result.ok
    assert len(calls) == 1
    error = result.error
    assert error.kind == CompletionError.STATUS
    assert error.status == 502
    assert error.body == '{"error": "upstream down"}'
    assert "502" in str(error)
    with pytest.raises(CompletionError):
        result.unwrap()


def test_client_reports_network_failure(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise URLError("connection refused")

    monkeypatch.setattr("repowiki.llm.client.urlopen", fake_urlopen)

    result = CompletionClient(_config()).generate_structured_docs("ctx")

    assert result.error.kind == CompletionError.NETWORK
    assert "connection refused" in str(result.error)


@pytest.mark.parametrize(
    "payload",
    [
        {"choices": [{"message": {"content": ""}}]},
        {"choices": [{"message": {}}]},
        {"choices": []},
        {"id": "cmpl-1"},
        b"<html>not json</html>",
    ],
)
def test_client_reports_empty_content(monkeypatch, payload) -> None:
    monkeypatch.setattr(
        "repowiki.llm.client.urlopen",
        lambda request, timeout=None: FakeResponse(payload),
    )

    result = CompletionClient(_config()).generate_structured_docs("ctx")

    assert not result.ok
    assert result.error.kind == CompletionError.EMPTY


def test_client_reports_truncated_body_as_network_failure(monkeypatch) -> None:
    class TruncatedResponse(FakeResponse):
        def read(self):
            raise IncompleteRead(b"partial", 10)

    monkeypatch.setattr(
        "repowiki.llm.client.urlopen",
        lambda request, timeout=None: TruncatedResponse({}),
    )

    result = CompletionClient(_config()).generate_structured_docs("ctx")

    assert not result.ok
    assert result.error.kind == CompletionError.NETWORK
    assert str(result.error).startswith("Completion request failed")
