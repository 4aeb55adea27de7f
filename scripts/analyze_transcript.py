from __future__ import annotations

import argparse
import asyncio
import json
import sys

from fillergym.analysis import ClassificationDispatcher
from fillergym.config import Settings
from fillergym.exceptions import FillerGymError
from fillergym.models.lexicon import FillerLexicon
from fillergym.models.run import ProgressEvent
from fillergym.models.transcript import read_transcript_file
from fillergym.pipeline import AnalysisOrchestrator
from fillergym.providers import get_llm_provider, get_transcription_provider
from fillergym.storage import LocalReportStore
from fillergym.utils import setup_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyse filler words in a transcript or audio file.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--transcript", default=None, help="Path to a UTF-8 transcript text file")
    source.add_argument("--audio", default=None, help="Path to an audio file to transcribe first")
    parser.add_argument("--language", default=None, help="Language code (defaults to LANGUAGE or ja)")
    parser.add_argument(
        "--custom-words",
        default=None,
        help='Comma separated extra terms; "DISABLED:<term>" drops a built-in term',
    )
    parser.add_argument("--save", action="store_true", help="Save the report under data_dir/analyses")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    return parser.parse_args()


async def _print_progress(event: ProgressEvent) -> None:
    print(f"[{event.progress * 100:3.0f}%] {event.state.value}: {event.step}", file=sys.stderr)


async def _run() -> int:
    args = _parse_args()
    settings = Settings()
    setup_logging(settings, level="DEBUG" if args.verbose else None)

    language = str(args.language or settings.language)
    raw_custom = args.custom_words if args.custom_words is not None else settings.lexicon.custom_words
    lexicon = FillerLexicon.from_setting(language, raw_custom)

    try:
        llm = get_llm_provider(settings.classifier_config())
        transcriber = get_transcription_provider(settings.transcription_config()) if args.audio else None
    except FillerGymError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    dispatcher = ClassificationDispatcher(
        llm,
        max_concurrent=settings.analysis.max_concurrent,
        temperature=settings.classifier.temperature,
        max_contexts=settings.analysis.max_contexts,
    )
    sink = LocalReportStore(settings.data_dir) if args.save else None
    orchestrator = AnalysisOrchestrator(
        settings,
        transcriber,
        dispatcher,
        lexicon,
        sink=sink,
        on_progress=_print_progress,
        language=language,
    )

    try:
        if args.audio:
            report = await orchestrator.run(str(args.audio))
        else:
            text = read_transcript_file(args.transcript)
            report = await orchestrator.run_transcript(text)
    except FillerGymError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        await llm.close()
        if transcriber is not None:
            await transcriber.close()

    for candidate in orchestrator.candidates:
        print(f"prefilter {candidate.word}: {candidate.count}", file=sys.stderr)
    if orchestrator.saved_path:
        print(f"saved={orchestrator.saved_path}", file=sys.stderr)
    print(json.dumps(report.to_payload(), ensure_ascii=False, indent=2))
    return 0


def main() -> None:
    raise SystemExit(asyncio.run(_run()))


if __name__ == "__main__":
    main()
