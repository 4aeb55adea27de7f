"""Analysis run state machine values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AnalysisState(str, Enum):
    IDLE = "idle"
    TRANSCRIBING = "transcribing"
    SEGMENTING = "segmenting"
    CLASSIFYING = "classifying"
    MERGING = "merging"
    COMPLETE = "complete"
    FAILED = "failed"


STATE_PROGRESS: dict[AnalysisState, float] = {
    AnalysisState.IDLE: 0.0,
    AnalysisState.TRANSCRIBING: 0.2,
    AnalysisState.SEGMENTING: 0.4,
    AnalysisState.CLASSIFYING: 0.6,
    AnalysisState.MERGING: 0.8,
    AnalysisState.COMPLETE: 1.0,
}

STATE_LABELS: dict[AnalysisState, str] = {
    AnalysisState.IDLE: "",
    AnalysisState.TRANSCRIBING: "Transcribing audio...",
    AnalysisState.SEGMENTING: "Splitting transcript into segments...",
    AnalysisState.CLASSIFYING: "Detecting filler words...",
    AnalysisState.MERGING: "Merging results...",
    AnalysisState.COMPLETE: "Analysis complete",
    AnalysisState.FAILED: "Analysis failed",
}


@dataclass(frozen=True)
class ProgressEvent:
    step: str
    progress: float
    state: AnalysisState
