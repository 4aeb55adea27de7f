"""Concurrent fan-out of segments to the classification service."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from fillergym.analysis.prompts import build_instructions
from fillergym.exceptions import ConfigurationError
from fillergym.models.analysis import SegmentResult
from fillergym.models.lexicon import FillerLexicon
from fillergym.models.transcript import Segment
from fillergym.pipeline.context import ProgressReporter
from fillergym.providers.llm import LLMProvider, Message

logger = logging.getLogger(__name__)


class ClassificationDispatcher:
    """Sends every segment to the classifier at once and joins all-or-nothing.

    A failure of any single call cancels the calls still in flight and is
    re-raised unchanged; partial results are discarded. Nothing is retried here.
    """

    def __init__(
        self,
        llm: LLMProvider,
        *,
        max_concurrent: int = 12,
        temperature: float = 0.3,
        max_contexts: int = 3,
    ) -> None:
        self.llm = llm
        self.max_concurrent = max(1, int(max_concurrent))
        self.temperature = float(temperature)
        self.max_contexts = int(max_contexts)

    def ensure_configured(self) -> None:
        if not self.llm.has_credentials:
            raise ConfigurationError(
                f"classification provider {self.llm.provider!r} has no api_key; set LLM_API_KEY"
            )

    async def classify(
        self,
        segments: Sequence[Segment],
        lexicon: FillerLexicon,
        language: str,
        *,
        progress_reporter: ProgressReporter | None = None,
    ) -> list[SegmentResult]:
        """Classify all segments; results are returned in segment index order."""
        self.ensure_configured()
        ordered = sorted(segments, key=lambda s: int(s.index))
        if not ordered:
            return []

        instructions = build_instructions(language, lexicon)
        semaphore = asyncio.Semaphore(self.max_concurrent)
        total = len(ordered)
        started_at = time.monotonic()

        async def _classify_one(segment: Segment) -> SegmentResult:
            messages = [
                Message(role="system", content=instructions),
                Message(role="user", content=segment.text),
            ]
            async with semaphore:
                payload = await self.llm.complete_json(messages, temperature=self.temperature)
            return SegmentResult.from_payload(
                payload,
                segment.start_offset_seconds,
                segment_index=segment.index,
                max_contexts=self.max_contexts,
                provider=self.llm.provider,
            )

        logger.info(
            "classification start (segments=%d, language=%s, terms=%d, max_concurrent=%d)",
            total,
            language,
            len(lexicon),
            self.max_concurrent,
        )
        tasks = [
            asyncio.create_task(_classify_one(seg), name=f"classify-segment-{seg.index}")
            for seg in ordered
        ]
        by_index: dict[int, SegmentResult] = {}
        try:
            for fut in asyncio.as_completed(tasks):
                result = await fut
                by_index[result.segment_index] = result
                if progress_reporter is not None:
                    await progress_reporter.report(
                        len(by_index), total, f"classified {len(by_index)}/{total} segments"
                    )
        except BaseException as exc:
            pending = [t for t in tasks if not t.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.warning(
                "classification aborted (segments=%d, succeeded=%d, cancelled=%d, error=%s)",
                total,
                len(by_index),
                len(pending),
                exc,
            )
            raise

        logger.info(
            "classification done (segments=%d, elapsed_ms=%d)",
            total,
            int((time.monotonic() - started_at) * 1000),
        )
        return [by_index[int(seg.index)] for seg in ordered]
