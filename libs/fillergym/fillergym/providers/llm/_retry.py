"""Opt-in retry policy for LLM providers.

Providers run a single attempt unless configured with ``max_attempts > 1``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from fillergym.error_codes import ErrorCode
from fillergym.exceptions import NetworkError

_WAIT_NORMAL = wait_exponential(min=1, max=10)
_WAIT_RATE_LIMIT = wait_exponential(min=2, max=30)


class RetryableLLMError(NetworkError):
    """Transient LLM failure (timeout, transport, 429, 5xx)."""

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        rate_limited: bool = False,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        super().__init__(provider, message, error_code=error_code)
        self.rate_limited = bool(rate_limited)


def wait_retry(state: RetryCallState) -> float:
    exc = state.outcome.exception() if state.outcome else None
    if isinstance(exc, RetryableLLMError) and exc.rate_limited:
        return _WAIT_RATE_LIMIT(state)
    return _WAIT_NORMAL(state)


def log_retry(logger: logging.Logger, *, provider: str, model: str) -> Callable[[RetryCallState], None]:
    def _log(state: RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        wait_s = state.next_action.sleep if state.next_action else None
        logger.warning(
            "llm retrying (provider=%s, model=%s, attempt=%s, wait_s=%s, error=%s)",
            provider,
            model,
            state.attempt_number,
            wait_s,
            exc,
        )

    return _log


def retrying(max_attempts: int, logger: logging.Logger, *, provider: str, model: str) -> AsyncRetrying:
    return AsyncRetrying(
        retry=retry_if_exception_type(RetryableLLMError),
        stop=stop_after_attempt(max(1, int(max_attempts))),
        wait=wait_retry,
        before_sleep=log_retry(logger, provider=provider, model=model),
        reraise=True,
    )
