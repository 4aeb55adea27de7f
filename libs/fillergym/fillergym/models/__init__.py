"""Core data models for FillerGym."""

from fillergym.models.analysis import (
    AggregateReport,
    CandidateMatch,
    ClassifiedFillerWord,
    SegmentResult,
)
from fillergym.models.lexicon import FillerLexicon, default_filler_words, parse_custom_words
from fillergym.models.run import AnalysisState, ProgressEvent
from fillergym.models.transcript import Segment, Transcript, read_transcript_file

__all__ = [
    "AggregateReport",
    "AnalysisState",
    "CandidateMatch",
    "ClassifiedFillerWord",
    "FillerLexicon",
    "ProgressEvent",
    "Segment",
    "SegmentResult",
    "Transcript",
    "default_filler_words",
    "read_transcript_file",
    "parse_custom_words",
]
