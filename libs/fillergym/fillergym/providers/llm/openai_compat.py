"""OpenAI-compatible chat-completions provider."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

import httpx

from fillergym.config import DEFAULT_OPENAI_BASE_URL
from fillergym.error_codes import ErrorCode
from fillergym.exceptions import DecodeError, NetworkError
from fillergym.providers.llm._retry import RetryableLLMError, retrying
from fillergym.providers.llm.base import LLMProvider, LLMUsage, Message
from fillergym.utils.llm_json import parse_llm_json

logger = logging.getLogger(__name__)


def _format_http_error(response: httpx.Response) -> str:
    status = response.status_code
    reason = response.reason_phrase
    detail = ""
    try:
        detail = response.text.strip()
    except UnicodeDecodeError:
        detail = repr(response.content)
    if detail:
        if len(detail) > 2000:
            detail = detail[:2000] + "…"
        return f"HTTP {status} {reason}: {detail}"
    return f"HTTP {status} {reason}"


def _parse_usage(body: object) -> LLMUsage | None:
    if not isinstance(body, dict):
        return None
    usage = body.get("usage")
    if not isinstance(usage, dict):
        return None
    prompt = usage.get("prompt_tokens")
    completion = usage.get("completion_tokens")
    total = usage.get("total_tokens")
    if not any(isinstance(x, int) for x in (prompt, completion, total)):
        return None
    return LLMUsage(
        prompt_tokens=int(prompt) if isinstance(prompt, int) else None,
        completion_tokens=int(completion) if isinstance(completion, int) else None,
        total_tokens=int(total) if isinstance(total, int) else None,
    )


def _message_content(body: object) -> str:
    if not isinstance(body, dict):
        raise ValueError("response body is not a JSON object")
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ValueError("response has no choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        raise ValueError("response message has no content")
    return content


class OpenAICompatProvider(LLMProvider):
    """OpenAI-compatible API provider (works with OpenAI, vLLM, etc.)."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        provider: str = "openai",
        *,
        timeout: float = 60.0,
        max_attempts: int = 1,
    ) -> None:
        self.provider = provider
        resolved = str(base_url or "").strip()
        self.base_url = (resolved or DEFAULT_OPENAI_BASE_URL).rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = float(timeout)
        self.max_attempts = max(1, int(max_attempts))
        self._client: httpx.AsyncClient | None = None

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def _post_once(self, payload: dict[str, Any]) -> httpx.Response:
        client = await self._get_client()
        try:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers=self._headers(),
                json=payload,
            )
        except httpx.TimeoutException as exc:
            logger.warning("llm request timeout: %s", exc)
            raise RetryableLLMError(
                self.provider, f"request timed out: {exc}", error_code=ErrorCode.TIMEOUT
            ) from exc
        except httpx.TransportError as exc:
            logger.warning("llm request failed: %s", exc)
            raise RetryableLLMError(self.provider, str(exc)) from exc

        if response.status_code >= 400:
            message = _format_http_error(response)
            if response.status_code == 429 or response.status_code >= 500:
                raise RetryableLLMError(
                    self.provider, message, rate_limited=response.status_code == 429
                )
            raise NetworkError(self.provider, message)
        return response

    async def complete_json(
        self,
        messages: list[Message],
        temperature: float = 0.3,
    ) -> dict[str, Any]:
        """Request a JSON object completion and return it parsed."""
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "response_format": {"type": "json_object"},
        }

        started = time.perf_counter()
        response: httpx.Response | None = None
        async for attempt in retrying(
            self.max_attempts, logger, provider=self.provider, model=self.model
        ):
            with attempt:
                response = await self._post_once(payload)
        assert response is not None
        latency_ms = int((time.perf_counter() - started) * 1000)

        try:
            body = response.json()
            content = _message_content(body)
            data = parse_llm_json(content)
        except (json.JSONDecodeError, ValueError) as exc:
            raise DecodeError(self.provider, f"malformed completion: {exc}") from exc

        usage = _parse_usage(body)
        logger.info(
            "llm call (provider=%s, model=%s, latency_ms=%s, prompt_tokens=%s, completion_tokens=%s, total_tokens=%s)",
            self.provider,
            self.model,
            latency_ms,
            getattr(usage, "prompt_tokens", None),
            getattr(usage, "completion_tokens", None),
            getattr(usage, "total_tokens", None),
        )
        return data

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "OpenAICompatProvider":
        await self._get_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object | None,
    ) -> None:
        await self.close()
