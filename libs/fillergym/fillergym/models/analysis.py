"""Filler analysis results and their JSON wire format."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fillergym.exceptions import DecodeError


class FillerWordPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    word: str
    count: int = Field(ge=0)
    positions: list[int] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)
    contexts: list[str] | None = None


class FillerAnalysisPayload(BaseModel):
    """JSON object exchanged with the classification service."""

    model_config = ConfigDict(extra="ignore")

    total_filler_count: int = Field(ge=0)
    filler_rate_per_minute: float
    speaking_speed: float
    filler_words: list[FillerWordPayload]
    improvement_suggestions: list[str]


@dataclass(frozen=True)
class CandidateMatch:
    """Local prefilter hit list for one lexicon term."""

    word: str
    positions: tuple[int, ...]
    contexts: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.positions)


@dataclass(frozen=True)
class ClassifiedFillerWord:
    word: str
    count: int
    positions: tuple[int, ...] = ()
    confidence: float = 1.0
    contexts: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        return {
            "word": self.word,
            "count": int(self.count),
            "positions": [int(p) for p in self.positions],
            "confidence": float(self.confidence),
            "contexts": list(self.contexts),
        }

    @classmethod
    def from_model(cls, item: FillerWordPayload, *, max_contexts: int = 3) -> "ClassifiedFillerWord":
        return cls(
            word=item.word,
            count=int(item.count),
            positions=tuple(int(p) for p in item.positions),
            confidence=float(item.confidence),
            contexts=tuple(item.contexts or ())[:max_contexts],
        )


@dataclass(frozen=True)
class SegmentResult:
    """Classification output for one segment, tagged with its time offset."""

    segment_start_offset_seconds: float
    classified: tuple[ClassifiedFillerWord, ...] = ()
    suggestions: tuple[str, ...] = ()
    total_count: int = 0
    segment_index: int = 0

    @classmethod
    def from_payload(
        cls,
        payload: object,
        segment_start_offset_seconds: float,
        *,
        segment_index: int = 0,
        max_contexts: int = 3,
        provider: str = "classifier",
    ) -> "SegmentResult":
        """Validate a classification response; raises DecodeError on mismatch."""
        try:
            model = FillerAnalysisPayload.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(
                provider,
                f"segment {segment_index}: response does not match the analysis schema: {exc}",
            ) from exc
        return cls(
            segment_start_offset_seconds=float(segment_start_offset_seconds),
            classified=tuple(
                ClassifiedFillerWord.from_model(w, max_contexts=max_contexts) for w in model.filler_words
            ),
            suggestions=tuple(model.improvement_suggestions),
            total_count=int(model.total_filler_count),
            segment_index=int(segment_index),
        )


@dataclass(frozen=True)
class AggregateReport:
    """Final analysis of one recording."""

    total_filler_count: int
    filler_rate_per_minute: float
    speaking_speed: float
    filler_words: tuple[ClassifiedFillerWord, ...] = field(default_factory=tuple)
    suggestions: tuple[str, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict[str, Any]:
        return {
            "total_filler_count": int(self.total_filler_count),
            "filler_rate_per_minute": float(self.filler_rate_per_minute),
            "speaking_speed": float(self.speaking_speed),
            "filler_words": [w.to_payload() for w in self.filler_words],
            "improvement_suggestions": list(self.suggestions),
        }

    @classmethod
    def from_payload(cls, payload: object) -> "AggregateReport":
        try:
            model = FillerAnalysisPayload.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError("report", f"invalid report payload: {exc}") from exc
        return cls(
            total_filler_count=int(model.total_filler_count),
            filler_rate_per_minute=float(model.filler_rate_per_minute),
            speaking_speed=float(model.speaking_speed),
            filler_words=tuple(
                ClassifiedFillerWord.from_model(w, max_contexts=len(w.contexts or ()))
                for w in model.filler_words
            ),
            suggestions=tuple(model.improvement_suggestions),
        )
