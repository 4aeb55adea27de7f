from __future__ import annotations

import json

import httpx
import pytest

from fillergym.error_codes import ErrorCode
from fillergym.exceptions import DecodeError, NetworkError
from fillergym.providers.llm.base import Message
from fillergym.providers.llm.openai_compat import OpenAICompatProvider

_MESSAGES = [Message(role="system", content="rules"), Message(role="user", content="えー、今日は")]


def _completion(content: str) -> dict:
    return {
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


def _provider(handler, **kwargs) -> OpenAICompatProvider:  # noqa: ANN001
    provider = OpenAICompatProvider(api_key="sk-test", model="gpt-test", base_url="https://llm.test/v1/", **kwargs)
    provider._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return provider


@pytest.mark.asyncio
async def test_complete_json_posts_chat_request_and_parses_object() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_completion('```json\n{"total_filler_count": 1}\n```'))

    provider = _provider(handler)
    out = await provider.complete_json(_MESSAGES, temperature=0.1)
    await provider.close()

    assert out == {"total_filler_count": 1}
    request = seen[0]
    assert str(request.url) == "https://llm.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    body = json.loads(request.content)
    assert body["model"] == "gpt-test"
    assert body["temperature"] == 0.1
    assert body["response_format"] == {"type": "json_object"}
    assert body["messages"][1] == {"role": "user", "content": "えー、今日は"}


@pytest.mark.asyncio
async def test_client_error_status_is_network_error_without_retry() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(401, json={"error": {"message": "bad key"}})

    provider = _provider(handler, max_attempts=3)
    with pytest.raises(NetworkError) as exc_info:
        await provider.complete_json(_MESSAGES)
    assert "HTTP 401" in str(exc_info.value)
    assert calls == 1


@pytest.mark.asyncio
async def test_server_error_is_not_retried_by_default() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(503)

    provider = _provider(handler)
    with pytest.raises(NetworkError):
        await provider.complete_json(_MESSAGES)
    assert calls == 1


@pytest.mark.asyncio
async def test_server_error_is_retried_when_enabled() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            return httpx.Response(500)
        return httpx.Response(200, json=_completion('{"ok": true}'))

    provider = _provider(handler, max_attempts=2)
    assert await provider.complete_json(_MESSAGES) == {"ok": True}
    assert calls == 2


@pytest.mark.asyncio
async def test_timeout_maps_to_timeout_code() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    provider = _provider(handler)
    with pytest.raises(NetworkError) as exc_info:
        await provider.complete_json(_MESSAGES)
    assert exc_info.value.error_code == ErrorCode.TIMEOUT


@pytest.mark.asyncio
async def test_transport_failure_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    provider = _provider(handler)
    with pytest.raises(NetworkError) as exc_info:
        await provider.complete_json(_MESSAGES)
    assert exc_info.value.error_code == ErrorCode.NETWORK_FAILED


@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        _completion("not json at all"),
        _completion("[1, 2, 3]"),
        {"unexpected": "shape"},
    ],
)
@pytest.mark.asyncio
async def test_malformed_completion_is_decode_error(body: dict) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    provider = _provider(handler)
    with pytest.raises(DecodeError):
        await provider.complete_json(_MESSAGES)


def test_has_credentials_reflects_api_key() -> None:
    assert OpenAICompatProvider(api_key="k").has_credentials
    assert not OpenAICompatProvider(api_key="  ").has_credentials
    assert OpenAICompatProvider(api_key="k").base_url == "https://api.openai.com/v1"
