from __future__ import annotations

import asyncio
from typing import Any

import pytest

from fillergym.analysis.dispatcher import ClassificationDispatcher
from fillergym.exceptions import ConfigurationError, DecodeError, NetworkError
from fillergym.models.lexicon import FillerLexicon
from fillergym.models.transcript import Segment
from fillergym.providers.llm.base import LLMProvider, Message


def _payload(word: str = "えー", count: int = 1) -> dict[str, Any]:
    return {
        "total_filler_count": count,
        "filler_rate_per_minute": 1.0,
        "speaking_speed": 300.0,
        "filler_words": [
            {"word": word, "count": count, "positions": [0], "confidence": 0.9, "contexts": ["x"]}
        ],
        "improvement_suggestions": [f"fewer {word}"],
    }


class _FakeLLM(LLMProvider):
    provider = "fake"
    model = "fake-model"

    def __init__(self, handler, *, api_key: str = "test-key") -> None:  # noqa: ANN001
        self.api_key = api_key
        self.handler = handler
        self.calls: list[list[Message]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def complete_json(self, messages: list[Message], temperature: float = 0.3) -> dict[str, Any]:
        self.calls.append(list(messages))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            return await self.handler(messages[-1].content)
        finally:
            self.in_flight -= 1


def _segments(*texts: str) -> list[Segment]:
    return [Segment(index=i, text=t, start_offset_seconds=i * 300.0) for i, t in enumerate(texts)]


@pytest.mark.asyncio
async def test_results_follow_segment_index_order() -> None:
    delays = {"seg0": 0.05, "seg1": 0.0, "seg2": 0.02}

    async def handler(text: str) -> dict[str, Any]:
        await asyncio.sleep(delays[text])
        return _payload(word=text)

    llm = _FakeLLM(handler)
    dispatcher = ClassificationDispatcher(llm)
    out = await dispatcher.classify(_segments("seg0", "seg1", "seg2"), FillerLexicon.build("ja"), "ja")

    assert [r.segment_index for r in out] == [0, 1, 2]
    assert [r.segment_start_offset_seconds for r in out] == [0.0, 300.0, 600.0]
    assert [r.classified[0].word for r in out] == ["seg0", "seg1", "seg2"]


@pytest.mark.asyncio
async def test_request_carries_instructions_and_segment_text() -> None:
    async def handler(text: str) -> dict[str, Any]:
        return _payload()

    llm = _FakeLLM(handler)
    lexicon = FillerLexicon.build("ja", custom_words=["ようするに"])
    await ClassificationDispatcher(llm).classify(_segments("本文"), lexicon, "ja")

    assert len(llm.calls) == 1
    system, user = llm.calls[0]
    assert system.role == "system"
    assert "ようするに" in system.content
    assert "total_filler_count" in system.content
    assert user.role == "user"
    assert user.content == "本文"


@pytest.mark.asyncio
async def test_one_failure_aborts_the_batch_and_cancels_pending_calls() -> None:
    cancelled: list[str] = []

    async def handler(text: str) -> dict[str, Any]:
        if text == "bad":
            await asyncio.sleep(0.01)
            raise NetworkError("fake", "HTTP 503 Service Unavailable")
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(text)
            raise
        return _payload()

    llm = _FakeLLM(handler)
    dispatcher = ClassificationDispatcher(llm)
    with pytest.raises(NetworkError):
        await dispatcher.classify(_segments("ok1", "bad", "ok2"), FillerLexicon.build("ja"), "ja")
    assert sorted(cancelled) == ["ok1", "ok2"]


@pytest.mark.asyncio
async def test_successful_results_are_discarded_when_a_later_call_fails() -> None:
    async def handler(text: str) -> dict[str, Any]:
        if text == "bad":
            await asyncio.sleep(0.02)
            return {"filler_words": "not-a-list"}
        return _payload()

    dispatcher = ClassificationDispatcher(_FakeLLM(handler))
    with pytest.raises(DecodeError):
        await dispatcher.classify(_segments("ok", "ok", "bad"), FillerLexicon.build("ja"), "ja")


@pytest.mark.asyncio
async def test_missing_credentials_fail_before_dispatch() -> None:
    async def handler(text: str) -> dict[str, Any]:
        return _payload()

    llm = _FakeLLM(handler, api_key="")
    dispatcher = ClassificationDispatcher(llm)
    with pytest.raises(ConfigurationError):
        await dispatcher.classify(_segments("a", "b"), FillerLexicon.build("ja"), "ja")
    assert llm.calls == []


@pytest.mark.asyncio
async def test_concurrency_is_capped() -> None:
    async def handler(text: str) -> dict[str, Any]:
        await asyncio.sleep(0.01)
        return _payload()

    llm = _FakeLLM(handler)
    dispatcher = ClassificationDispatcher(llm, max_concurrent=2)
    out = await dispatcher.classify(_segments(*[f"s{i}" for i in range(6)]), FillerLexicon.build("ja"), "ja")
    assert len(out) == 6
    assert llm.max_in_flight == 2


@pytest.mark.asyncio
async def test_progress_reporter_sees_every_completion() -> None:
    seen: list[tuple[int, int]] = []

    class _Reporter:
        async def report(self, done: int, total: int, message: str) -> None:  # noqa: ARG002
            seen.append((done, total))

    async def handler(text: str) -> dict[str, Any]:
        return _payload()

    dispatcher = ClassificationDispatcher(_FakeLLM(handler))
    await dispatcher.classify(
        _segments("a", "b", "c"), FillerLexicon.build("ja"), "ja", progress_reporter=_Reporter()
    )
    assert seen == [(1, 3), (2, 3), (3, 3)]


@pytest.mark.asyncio
async def test_no_segments_returns_empty() -> None:
    async def handler(text: str) -> dict[str, Any]:  # pragma: no cover
        raise AssertionError("should not be called")

    assert await ClassificationDispatcher(_FakeLLM(handler)).classify([], FillerLexicon.build("ja"), "ja") == []
