"""Transcription provider base class."""

from abc import ABC, abstractmethod


class TranscriptionProvider(ABC):
    """Abstract base class for speech-to-text providers."""

    @abstractmethod
    async def transcribe(self, audio_path: str, language: str | None = None) -> str:
        """Transcribe an audio file.

        Args:
            audio_path: Path to the audio file.
            language: Optional language hint.

        Returns:
            The transcript text.
        """
        ...

    async def close(self) -> None:  # pragma: no cover
        return None
