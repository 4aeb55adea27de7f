"""Whisper-compatible transcription provider."""

from __future__ import annotations

import logging
import mimetypes
import time
from collections.abc import Iterable
from pathlib import Path

import httpx

from fillergym.config import DEFAULT_OPENAI_BASE_URL
from fillergym.error_codes import ErrorCode
from fillergym.exceptions import DecodeError, InputError, NetworkError
from fillergym.providers.asr.base import TranscriptionProvider

logger = logging.getLogger(__name__)

DEFAULT_SUPPORTED_FORMATS = ("m4a", "wav", "mp3", "aac", "mp4")


def validate_audio_file(
    path: Path,
    *,
    supported_formats: Iterable[str] = DEFAULT_SUPPORTED_FORMATS,
    max_bytes: int = 50 * 1024 * 1024,
) -> int:
    """Check an audio file before upload and return its size in bytes."""
    if not path.is_file():
        raise InputError(f"audio file not found: {path}")
    formats = {str(f).lower().lstrip(".") for f in supported_formats}
    ext = path.suffix.lower().lstrip(".")
    if ext not in formats:
        raise InputError(
            f"unsupported audio format {ext!r} (supported: {', '.join(sorted(formats))})"
        )
    size = path.stat().st_size
    if size <= 0:
        raise InputError(f"audio file is empty: {path}")
    if size > max_bytes:
        raise InputError(f"audio file too large: {size} bytes (max {max_bytes})")
    return size


class WhisperTranscriptionProvider(TranscriptionProvider):
    """OpenAI `/audio/transcriptions` client."""

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-1",
        base_url: str | None = None,
        *,
        timeout: float = 300.0,
        max_file_bytes: int = 50 * 1024 * 1024,
        supported_formats: Iterable[str] = DEFAULT_SUPPORTED_FORMATS,
    ) -> None:
        self.provider = "openai_whisper"
        self.base_url = (str(base_url or "").strip() or DEFAULT_OPENAI_BASE_URL).rstrip("/")
        self.api_key = api_key
        self.model = model
        self.timeout = float(timeout)
        self.max_file_bytes = int(max_file_bytes)
        self.supported_formats = tuple(supported_formats)
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def transcribe(self, audio_path: str, language: str | None = None) -> str:
        path = Path(audio_path)
        size = validate_audio_file(
            path, supported_formats=self.supported_formats, max_bytes=self.max_file_bytes
        )
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {self.api_key}"}
        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"

        data = {"model": self.model, "response_format": "json"}
        if language:
            data["language"] = language

        started = time.perf_counter()
        with open(path, "rb") as f:
            files = {"file": (path.name, f, mime_type)}
            try:
                response = await client.post(
                    f"{self.base_url}/audio/transcriptions",
                    headers=headers,
                    files=files,
                    data=data,
                )
            except httpx.TimeoutException as exc:
                raise NetworkError(self.provider, f"request timed out: {exc}", error_code=ErrorCode.TIMEOUT) from exc
            except httpx.TransportError as exc:
                raise NetworkError(self.provider, str(exc), error_code=ErrorCode.TRANSCRIPTION_FAILED) from exc

        if response.status_code >= 400:
            raise NetworkError(
                self.provider,
                f"HTTP {response.status_code} {response.reason_phrase}",
                error_code=ErrorCode.TRANSCRIPTION_FAILED,
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise DecodeError(self.provider, f"malformed transcription response: {exc}") from exc
        text = body.get("text") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise DecodeError(self.provider, "transcription response has no text")

        logger.info(
            "asr call (provider=%s, model=%s, bytes=%d, latency_ms=%d, chars=%d)",
            self.provider,
            self.model,
            size,
            int((time.perf_counter() - started) * 1000),
            len(text),
        )
        return text.strip()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "WhisperTranscriptionProvider":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
