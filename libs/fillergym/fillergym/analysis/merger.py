"""Reconcile per-segment classification results into one report."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from fillergym.models.analysis import AggregateReport, ClassifiedFillerWord, SegmentResult
from fillergym.models.transcript import Transcript

logger = logging.getLogger(__name__)


@dataclass
class _Accumulator:
    word: str
    count: int = 0
    confidence: float = 0.0
    positions: list[int] = field(default_factory=list)
    contexts: list[str] = field(default_factory=list)


def global_position_shift(segment_start_offset_seconds: float, chars_per_minute: int) -> int:
    """Character shift for a segment, derived from its assumed start time.

    This is the speech-rate estimate, not a ground-truth text offset: for
    segments whose cut was snapped to punctuation the shift drifts by the
    number of characters the snap moved.
    """
    return int(round(float(segment_start_offset_seconds) * int(chars_per_minute) / 60.0))


def _rates(transcript: Transcript, total: int) -> tuple[float, float]:
    minutes = transcript.estimated_duration_minutes
    if minutes <= 0:
        return 0.0, float(transcript.chars_per_minute)
    return total / minutes, transcript.character_count / minutes


def _select_suggestions(results: Sequence[SegmentResult], limit: int) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for result in results:
        for suggestion in result.suggestions:
            text = str(suggestion).strip()
            if text:
                seen.setdefault(text, None)
    return tuple(sorted(list(seen)[: max(0, limit)]))


def merge_segment_results(
    results: Sequence[SegmentResult],
    transcript: Transcript,
    *,
    max_contexts: int = 3,
    max_suggestions: int = 5,
    min_confidence: float = 0.0,
) -> AggregateReport:
    """Merge segment results against the original transcript.

    Counts sum and confidences take the maximum per lowercase word. Positions
    are shifted to transcript-global estimates and concatenated. Contexts are
    concatenated and cut to ``max_contexts``. Rates are recomputed from the
    whole transcript's duration estimate. With a single segment the filler
    entries pass through unchanged.
    """
    ordered = sorted(results, key=lambda r: (float(r.segment_start_offset_seconds), int(r.segment_index)))
    total = sum(int(r.total_count) for r in ordered)
    rate, speed = _rates(transcript, total)

    if len(ordered) == 1:
        words = [w for w in ordered[0].classified if w.confidence >= min_confidence]
    else:
        merged: dict[str, _Accumulator] = {}
        for result in ordered:
            shift = global_position_shift(result.segment_start_offset_seconds, transcript.chars_per_minute)
            for item in result.classified:
                key = item.word.lower()
                acc = merged.get(key)
                if acc is None:
                    acc = _Accumulator(word=item.word, confidence=float(item.confidence))
                    merged[key] = acc
                acc.count += int(item.count)
                acc.confidence = max(acc.confidence, float(item.confidence))
                acc.positions.extend(int(p) + shift for p in item.positions)
                acc.contexts.extend(item.contexts)

        words = [
            ClassifiedFillerWord(
                word=acc.word,
                count=acc.count,
                positions=tuple(acc.positions),
                confidence=acc.confidence,
                contexts=tuple(acc.contexts[:max_contexts]),
            )
            for acc in merged.values()
            if acc.confidence >= min_confidence
        ]

    words.sort(key=lambda w: w.count, reverse=True)

    report = AggregateReport(
        total_filler_count=total,
        filler_rate_per_minute=rate,
        speaking_speed=speed,
        filler_words=tuple(words),
        suggestions=_select_suggestions(ordered, max_suggestions),
    )
    logger.info(
        "merge done (segments=%d, total_filler_count=%d, distinct_words=%d, rate_per_min=%.2f)",
        len(ordered),
        report.total_filler_count,
        len(report.filler_words),
        report.filler_rate_per_minute,
    )
    return report
