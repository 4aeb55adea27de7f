"""Analysis orchestrator: transcription through merge and persistence handoff."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fillergym.analysis.dispatcher import ClassificationDispatcher
from fillergym.analysis.merger import merge_segment_results
from fillergym.analysis.prefilter import scan
from fillergym.analysis.segmenter import needs_segmentation, plan_segments
from fillergym.config import Settings
from fillergym.error_codes import ErrorCode
from fillergym.exceptions import (
    AnalysisCancelledError,
    FillerGymError,
    InputError,
    ProviderError,
    StageExecutionError,
)
from fillergym.models.analysis import AggregateReport, CandidateMatch
from fillergym.models.lexicon import FillerLexicon
from fillergym.models.run import STATE_LABELS, STATE_PROGRESS, AnalysisState, ProgressEvent
from fillergym.models.transcript import Segment, Transcript
from fillergym.pipeline.context import ProgressHook, ProgressReporter
from fillergym.providers.asr.base import TranscriptionProvider
from fillergym.storage.report_store import ReportSink

logger = logging.getLogger(__name__)


class _ClassificationProgressReporter(ProgressReporter):
    def __init__(self, orchestrator: "AnalysisOrchestrator") -> None:
        self._orchestrator = orchestrator

    async def report(self, done: int, total: int, message: str) -> None:
        if total <= 1:
            return
        label = STATE_LABELS[AnalysisState.CLASSIFYING]
        self._orchestrator.current_step = f"{label} ({done}/{total})"
        logger.debug("classification progress (run_id=%s, %s)", self._orchestrator.run_id, message)


class AnalysisOrchestrator:
    """Drives one analysis run at a time through the state machine.

    Idle -> Transcribing -> (Segmenting) -> Classifying -> Merging -> Complete,
    or Failed from any non-terminal state. Nothing is retried; a failed run has
    to be started again by the caller.
    """

    def __init__(
        self,
        settings: Settings,
        transcriber: TranscriptionProvider | None,
        dispatcher: ClassificationDispatcher,
        lexicon: FillerLexicon,
        *,
        sink: ReportSink | None = None,
        on_progress: ProgressHook | None = None,
        language: str | None = None,
    ) -> None:
        self.settings = settings
        self.transcriber = transcriber
        self.dispatcher = dispatcher
        self.lexicon = lexicon
        self.sink = sink
        self.language = str(language or lexicon.language or settings.language)
        self._on_progress = on_progress

        self.state = AnalysisState.IDLE
        self.progress = 0.0
        self.current_step = ""
        self.error: BaseException | None = None
        self.report: AggregateReport | None = None
        self.candidates: list[CandidateMatch] = []
        self.run_id: str | None = None
        self.saved_path: str | None = None
        self._cancel_requested = False

    def cancel(self) -> None:
        """Request cancellation; honoured at the next state transition."""
        if self.state in {AnalysisState.COMPLETE, AnalysisState.FAILED}:
            return
        self._cancel_requested = True
        logger.info("orchestrator cancel requested (run_id=%s, state=%s)", self.run_id, self.state.value)

    async def run(self, audio_path: str) -> AggregateReport:
        """Transcribe an audio file and analyse the transcript."""

        async def _transcribe() -> str:
            if self.transcriber is None:
                raise InputError("no transcription provider configured for audio input")
            return await self.transcriber.transcribe(audio_path, self.language)

        return await self._execute(_transcribe)

    async def run_transcript(self, text: str) -> AggregateReport:
        """Analyse an existing transcript; the Transcribing step makes no call."""

        async def _transcribe() -> str:
            return text

        return await self._execute(_transcribe)

    async def _notify(self) -> None:
        if self._on_progress is not None:
            await self._on_progress(
                ProgressEvent(step=self.current_step, progress=self.progress, state=self.state)
            )

    def _raise_if_cancelled(self) -> None:
        if self._cancel_requested:
            raise AnalysisCancelledError(f"analysis cancelled during {self.state.value}")

    async def _advance(self, state: AnalysisState) -> None:
        self._raise_if_cancelled()
        self.state = state
        self.progress = max(self.progress, STATE_PROGRESS[state])
        self.current_step = STATE_LABELS[state]
        logger.info("state (run_id=%s, state=%s, progress=%.1f)", self.run_id, state.value, self.progress)
        await self._notify()

    @staticmethod
    def _infer_error_code(stage: AnalysisState, exc: BaseException) -> ErrorCode:
        if isinstance(exc, FillerGymError) and exc.error_code != ErrorCode.UNKNOWN:
            return exc.error_code
        if stage == AnalysisState.TRANSCRIBING:
            return ErrorCode.TRANSCRIPTION_FAILED
        return ErrorCode.UNKNOWN

    @staticmethod
    def _infer_error_message(exc: BaseException) -> str:
        if isinstance(exc, ProviderError):
            return f"{exc.provider}: {exc.message}"
        return str(exc) or type(exc).__name__

    async def _fail(self, stage: AnalysisState, exc: BaseException) -> StageExecutionError:
        self.error = exc
        self.report = None
        self.state = AnalysisState.FAILED
        message = self._infer_error_message(exc)
        self.current_step = f"{STATE_LABELS[AnalysisState.FAILED]}: {message}"
        await self._notify()
        return StageExecutionError(
            stage.value,
            message,
            run_id=self.run_id,
            error_code=self._infer_error_code(stage, exc),
        )

    def _reset(self) -> None:
        self.state = AnalysisState.IDLE
        self.progress = STATE_PROGRESS[AnalysisState.IDLE]
        self.current_step = STATE_LABELS[AnalysisState.IDLE]
        self.error = None
        self.report = None
        self.candidates = []
        self.saved_path = None
        self._cancel_requested = False
        self.run_id = uuid.uuid4().hex

    async def _execute(self, transcribe: Callable[[], Awaitable[str]]) -> AggregateReport:
        if self.state not in {AnalysisState.IDLE, AnalysisState.COMPLETE, AnalysisState.FAILED}:
            raise RuntimeError(f"analysis already running (run_id={self.run_id})")
        self._reset()
        cfg = self.settings.analysis
        started_at = time.monotonic()

        try:
            self.dispatcher.ensure_configured()

            await self._advance(AnalysisState.TRANSCRIBING)
            text = str(await transcribe() or "")
            if not text.strip():
                raise InputError("transcript is empty")
            transcript = Transcript(text=text, chars_per_minute=int(cfg.chars_per_minute))

            self.candidates = scan(transcript.text, self.lexicon, context_radius=int(cfg.context_radius))
            logger.info(
                "prefilter (run_id=%s, terms_matched=%d, candidates=%d)",
                self.run_id,
                len(self.candidates),
                sum(c.count for c in self.candidates),
            )

            if needs_segmentation(transcript, cfg):
                await self._advance(AnalysisState.SEGMENTING)
                segments = plan_segments(transcript, cfg)
            else:
                segments = [Segment(index=0, text=transcript.text, start_offset_seconds=0.0)]

            await self._advance(AnalysisState.CLASSIFYING)
            results = await self.dispatcher.classify(
                segments,
                self.lexicon,
                self.language,
                progress_reporter=_ClassificationProgressReporter(self),
            )

            await self._advance(AnalysisState.MERGING)
            report = merge_segment_results(
                results,
                transcript,
                max_contexts=int(cfg.max_contexts),
                max_suggestions=int(cfg.max_suggestions),
                min_confidence=float(cfg.min_confidence),
            )

            self._raise_if_cancelled()
            if self.sink is not None:
                self.saved_path = await self.sink.save(
                    self.run_id or "", transcript, report, language=self.language
                )
                logger.info("report saved (run_id=%s, path=%s)", self.run_id, self.saved_path)

            self.report = report
            self.state = AnalysisState.COMPLETE
            self.progress = STATE_PROGRESS[AnalysisState.COMPLETE]
            self.current_step = STATE_LABELS[AnalysisState.COMPLETE]
            await self._notify()
        except asyncio.CancelledError:
            stage = self.state
            await self._fail(stage, AnalysisCancelledError(f"analysis task cancelled during {stage.value}"))
            raise
        except Exception as exc:
            stage = self.state
            logger.exception(
                "analysis failed (run_id=%s, stage=%s, error=%s)", self.run_id, stage.value, exc
            )
            raise await self._fail(stage, exc) from exc

        logger.info(
            "analysis done (run_id=%s, segments=%d, total_filler_count=%d, elapsed_ms=%d)",
            self.run_id,
            len(segments),
            report.total_filler_count,
            int((time.monotonic() - started_at) * 1000),
        )
        return report
