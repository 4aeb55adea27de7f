"""Transcript analysis: prefilter, segmentation, dispatch and merge."""

from fillergym.analysis.dispatcher import ClassificationDispatcher
from fillergym.analysis.merger import merge_segment_results
from fillergym.analysis.prefilter import scan
from fillergym.analysis.segmenter import plan_segments, split_transcript

__all__ = [
    "ClassificationDispatcher",
    "merge_segment_results",
    "plan_segments",
    "scan",
    "split_transcript",
]
