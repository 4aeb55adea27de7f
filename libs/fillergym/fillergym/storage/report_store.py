"""Report sink interface and local implementation."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fillergym.exceptions import PersistenceError
from fillergym.models.analysis import AggregateReport
from fillergym.models.transcript import Transcript


class ReportSink(ABC):
    @abstractmethod
    async def save(
        self,
        run_id: str,
        transcript: Transcript,
        report: AggregateReport,
        *,
        language: str = "ja",
    ) -> str:
        """Persist a finished report and return a path/url identifier."""


class LocalReportStore(ReportSink):
    """Local filesystem report store for development."""

    def __init__(self, base_dir: str) -> None:
        self.base_dir = Path(base_dir)

    def _path(self, run_id: str) -> Path:
        safe_id = str(run_id).strip().replace("/", "_")
        return self.base_dir / "analyses" / f"{safe_id}.json"

    async def save(
        self,
        run_id: str,
        transcript: Transcript,
        report: AggregateReport,
        *,
        language: str = "ja",
    ) -> str:
        record = {
            "run_id": run_id,
            "language": language,
            "created_at": datetime.now(tz=timezone.utc).isoformat(),
            "transcript": transcript.text,
            "report": report.to_payload(),
        }
        path = self._path(run_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(record, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"failed to write report {path}: {exc}") from exc
        return str(path)

    async def load(self, run_id: str) -> dict[str, Any]:
        """Load a saved analysis record."""
        path = self._path(run_id)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise PersistenceError(f"failed to read report {path}: {exc}") from exc
