"""Transcript segmentation for long recordings."""

from __future__ import annotations

import logging

from fillergym.config import DEFAULT_CLAUSE_ENDINGS, DEFAULT_SENTENCE_ENDINGS, AnalysisConfig
from fillergym.models.transcript import Segment, Transcript

logger = logging.getLogger(__name__)


def _find_cut(window: str, sentence_endings: str, clause_endings: str) -> int | None:
    """Return the cut offset (exclusive) inside ``window``, or None."""
    for marks in (sentence_endings, clause_endings):
        if not marks:
            continue
        best = max(window.rfind(ch) for ch in marks)
        if best >= 0:
            return best + 1
    return None


def split_transcript(
    text: str,
    minutes_per_segment: int,
    *,
    chars_per_minute: int = 350,
    sentence_endings: str = DEFAULT_SENTENCE_ENDINGS,
    clause_endings: str = DEFAULT_CLAUSE_ENDINGS,
) -> list[Segment]:
    """Split ``text`` into ordered segments of roughly ``minutes_per_segment``.

    Every window except the last is cut just after the last sentence-ending mark
    it contains, falling back to the last clause mark, then to the raw window
    boundary. Concatenating the segment texts reproduces ``text`` exactly.

    ``start_offset_seconds`` is ``index * minutes_per_segment * 60``: an estimate,
    not a timestamp from the audio.
    """
    chars_per_segment = max(1, int(chars_per_minute) * int(minutes_per_segment))
    segments: list[Segment] = []
    n = len(text)
    start = 0
    index = 0

    while start < n:
        end = min(start + chars_per_segment, n)
        if end < n:
            cut = _find_cut(text[start:end], sentence_endings, clause_endings)
            if cut is not None:
                end = start + cut
        segments.append(
            Segment(
                index=index,
                text=text[start:end],
                start_offset_seconds=float(index * minutes_per_segment * 60),
            )
        )
        start = end
        index += 1

    return segments


def plan_segments(transcript: Transcript, config: AnalysisConfig) -> list[Segment]:
    """Single segment at offset 0 for short transcripts, otherwise split."""
    minutes = transcript.estimated_duration_minutes
    if minutes <= float(config.single_pass_max_minutes):
        return [Segment(index=0, text=transcript.text, start_offset_seconds=0.0)]

    segments = split_transcript(
        transcript.text,
        int(config.segment_minutes),
        chars_per_minute=int(transcript.chars_per_minute),
        sentence_endings=config.sentence_endings,
        clause_endings=config.clause_endings,
    )
    logger.info(
        "segment plan (chars=%d, estimated_minutes=%.1f, segments=%d)",
        transcript.character_count,
        minutes,
        len(segments),
    )
    for seg in segments:
        logger.debug(
            "segment (index=%d, chars=%d, start_s=%.1f)",
            seg.index,
            len(seg.text),
            seg.start_offset_seconds,
        )
    return segments


def needs_segmentation(transcript: Transcript, config: AnalysisConfig) -> bool:
    return transcript.estimated_duration_minutes > float(config.single_pass_max_minutes)
