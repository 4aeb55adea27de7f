"""Provider factory and registry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fillergym.exceptions import ConfigurationError
from fillergym.providers.asr.base import TranscriptionProvider
from fillergym.providers.llm.base import LLMProvider


def get_llm_provider(config: Mapping[str, Any]) -> LLMProvider:
    """Get the classification LLM provider for a config dict."""
    provider_type = str(config.get("provider", "openai")).strip().lower()

    match provider_type:
        case "openai" | "openai_compat":
            from fillergym.providers.llm.openai_compat import OpenAICompatProvider

            return OpenAICompatProvider(
                api_key=str(config.get("api_key") or ""),
                model=str(config.get("model") or "gpt-4o-mini"),
                base_url=config.get("base_url"),
                provider=provider_type,
                timeout=float(config.get("timeout_s", 60.0)),
                max_attempts=int(config.get("max_attempts", 1)),
            )
        case _:
            raise ConfigurationError(f"Unknown LLM provider: {provider_type}")


def get_transcription_provider(config: Mapping[str, Any]) -> TranscriptionProvider:
    """Get the speech-to-text provider for a config dict."""
    provider_type = str(config.get("provider", "openai_whisper")).strip().lower()

    match provider_type:
        case "openai_whisper" | "whisper":
            from fillergym.providers.asr.openai_whisper import WhisperTranscriptionProvider

            api_key = str(config.get("api_key") or "").strip()
            if not api_key:
                raise ConfigurationError("Whisper transcription requires api_key (set ASR_API_KEY or LLM_API_KEY)")
            return WhisperTranscriptionProvider(
                api_key=api_key,
                model=str(config.get("model") or "whisper-1"),
                base_url=config.get("base_url"),
                timeout=float(config.get("timeout_s", 300.0)),
                max_file_bytes=int(config.get("max_file_bytes", 50 * 1024 * 1024)),
                supported_formats=tuple(config.get("supported_formats") or ()) or ("m4a", "wav", "mp3", "aac", "mp4"),
            )
        case _:
            raise ConfigurationError(f"Unknown transcription provider: {provider_type}")
