"""Pipeline orchestration.

``fillergym.analysis`` imports ``fillergym.pipeline.context`` for the progress
protocol, so the orchestrator is loaded lazily here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fillergym.pipeline.context import ProgressHook, ProgressReporter

if TYPE_CHECKING:
    from fillergym.pipeline.orchestrator import AnalysisOrchestrator

__all__ = ["AnalysisOrchestrator", "ProgressHook", "ProgressReporter"]


def __getattr__(name: str) -> Any:
    if name == "AnalysisOrchestrator":
        from fillergym.pipeline.orchestrator import AnalysisOrchestrator

        return AnalysisOrchestrator
    raise AttributeError(name)
