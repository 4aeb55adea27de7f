"""Speech-to-text providers."""

from fillergym.providers.asr.base import TranscriptionProvider

__all__ = ["TranscriptionProvider"]
