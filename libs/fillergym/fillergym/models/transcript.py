"""Transcript and segment models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fillergym.exceptions import InputError

DEFAULT_CHARS_PER_MINUTE = 350


@dataclass(frozen=True)
class Transcript:
    """Immutable transcript text with a speech-rate based duration estimate."""

    text: str
    chars_per_minute: int = DEFAULT_CHARS_PER_MINUTE

    @property
    def character_count(self) -> int:
        return len(self.text)

    @property
    def estimated_duration_minutes(self) -> float:
        return self.character_count / float(self.chars_per_minute)


@dataclass(frozen=True)
class Segment:
    """A contiguous slice of a transcript, analysed on its own."""

    index: int
    text: str
    start_offset_seconds: float = 0.0


def read_transcript_file(path: str | Path) -> str:
    """Read a UTF-8 transcript file; unreadable files raise InputError."""
    p = Path(path)
    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InputError(f"unreadable transcript {p}: not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise InputError(f"unreadable transcript {p}: {exc}") from exc
