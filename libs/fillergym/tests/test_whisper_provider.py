from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from fillergym.error_codes import ErrorCode
from fillergym.exceptions import DecodeError, InputError, NetworkError
from fillergym.providers.asr.openai_whisper import WhisperTranscriptionProvider, validate_audio_file


def _audio(tmp_path: Path, name: str = "speech.m4a", data: bytes = b"\x00audio") -> Path:
    path = tmp_path / name
    path.write_bytes(data)
    return path


def _provider(handler) -> WhisperTranscriptionProvider:  # noqa: ANN001
    provider = WhisperTranscriptionProvider(api_key="sk-test", base_url="https://asr.test/v1")
    provider._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return provider


def test_validate_audio_file_rejects_bad_inputs(tmp_path: Path) -> None:
    with pytest.raises(InputError):
        validate_audio_file(tmp_path / "missing.m4a")
    with pytest.raises(InputError):
        validate_audio_file(_audio(tmp_path, "notes.txt"))
    with pytest.raises(InputError):
        validate_audio_file(_audio(tmp_path, "empty.wav", b""))
    with pytest.raises(InputError):
        validate_audio_file(_audio(tmp_path, "big.mp3", b"x" * 11), max_bytes=10)
    assert validate_audio_file(_audio(tmp_path, "ok.WAV")) == 6


@pytest.mark.asyncio
async def test_transcribe_posts_multipart_and_returns_text(tmp_path: Path) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"text": " えー、今日は。 "})

    provider = _provider(handler)
    text = await provider.transcribe(str(_audio(tmp_path)), "ja")

    assert text == "えー、今日は。"
    request = seen[0]
    assert str(request.url) == "https://asr.test/v1/audio/transcriptions"
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="language"' in request.content
    assert b"whisper-1" in request.content


@pytest.mark.asyncio
async def test_transcribe_maps_http_failure(tmp_path: Path) -> None:
    provider = _provider(lambda request: httpx.Response(500))
    with pytest.raises(NetworkError) as exc_info:
        await provider.transcribe(str(_audio(tmp_path)))
    assert exc_info.value.error_code == ErrorCode.TRANSCRIPTION_FAILED


@pytest.mark.asyncio
async def test_transcribe_rejects_body_without_text(tmp_path: Path) -> None:
    provider = _provider(lambda request: httpx.Response(200, json={"segments": []}))
    with pytest.raises(DecodeError):
        await provider.transcribe(str(_audio(tmp_path)))


@pytest.mark.asyncio
async def test_invalid_file_is_rejected_before_upload(tmp_path: Path) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"text": "x"})

    provider = _provider(handler)
    with pytest.raises(InputError):
        await provider.transcribe(str(tmp_path / "missing.m4a"))
    assert calls == []
