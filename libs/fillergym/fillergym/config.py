"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fillergym.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")

_REPO_ROOT = Path(__file__).resolve().parents[3]

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"

DEFAULT_SENTENCE_ENDINGS = "。！？.!?．｡"
DEFAULT_CLAUSE_ENDINGS = "、,，､"


def _resolve_repo_path(value: str) -> str:
    raw = str(value or "").strip()
    if not raw:
        return raw
    p = Path(raw)
    if p.is_absolute():
        return str(p)
    return str((_REPO_ROOT / p).resolve())


class ClassifierConfig(BaseSettings):
    """Semantic classification service (chat completions) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "openai"
    base_url: str | None = None
    api_key: str = ""
    model: str = "gpt-4o-mini"
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    timeout_s: float = Field(default=60.0, gt=0, description="Timeout for one classification call.")
    max_attempts: int = Field(
        default=1,
        ge=1,
        description="1 disables retries; higher values retry transport/5xx/429 failures.",
    )


class TranscriptionConfig(BaseSettings):
    """Speech-to-text provider configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ASR_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: str = "openai_whisper"
    base_url: str | None = None
    api_key: str = ""
    model: str = "whisper-1"
    timeout_s: float = Field(default=300.0, gt=0)
    max_file_bytes: int = Field(default=50 * 1024 * 1024, ge=1)
    supported_formats: tuple[str, ...] = ("m4a", "wav", "mp3", "aac", "mp4")


class AnalysisConfig(BaseSettings):
    """Segmentation, merge and prefilter tuning."""

    model_config = SettingsConfigDict(
        env_prefix="ANALYSIS_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    chars_per_minute: int = Field(default=350, ge=1, description="Assumed speech rate.")
    segment_minutes: int = Field(default=5, ge=1)
    single_pass_max_minutes: float = Field(default=5.0, gt=0)
    context_radius: int = Field(default=10, ge=0)
    max_contexts: int = Field(default=3, ge=0)
    max_suggestions: int = Field(default=5, ge=0)
    sentence_endings: str = DEFAULT_SENTENCE_ENDINGS
    clause_endings: str = DEFAULT_CLAUSE_ENDINGS
    min_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    max_concurrent: int = Field(default=12, ge=1)

    @model_validator(mode="after")
    def _validate_endings(self) -> "AnalysisConfig":
        if not self.sentence_endings and not self.clause_endings:
            raise ConfigurationError(
                "ANALYSIS_SENTENCE_ENDINGS and ANALYSIS_CLAUSE_ENDINGS cannot both be empty"
            )
        return self


class LexiconConfig(BaseSettings):
    """User-supplied filler terms."""

    model_config = SettingsConfigDict(
        env_prefix="LEXICON_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Comma separated; "DISABLED:<term>" turns off a built-in term.
    custom_words: str = ""


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)
    httpx_level: str = "WARNING"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    language: str = "ja"
    data_dir: str = "./data"
    log_dir: str = "./logs"

    classifier: ClassifierConfig = ClassifierConfig()
    transcription: TranscriptionConfig = TranscriptionConfig()
    analysis: AnalysisConfig = AnalysisConfig()
    lexicon: LexiconConfig = LexiconConfig()

    logging: LoggingSettings = LoggingSettings()

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        self.data_dir = _resolve_repo_path(self.data_dir)
        self.log_dir = _resolve_repo_path(self.log_dir)
        return self

    def classifier_config(self) -> dict[str, Any]:
        """Return the classifier config dict for the provider registry."""
        cfg = self.classifier.model_dump()
        provider = str(cfg.get("provider") or "").strip().lower()
        if provider not in {"openai", "openai_compat"}:
            raise ConfigurationError(f"Unknown classifier provider: {provider!r}")
        cfg["provider"] = provider
        cfg["base_url"] = str(cfg.get("base_url") or "").strip() or DEFAULT_OPENAI_BASE_URL
        return cfg

    def transcription_config(self) -> dict[str, Any]:
        """Return the transcription config dict for the provider registry.

        The transcription service shares the classifier credential and endpoint
        unless its own are configured.
        """
        cfg = self.transcription.model_dump()
        provider = str(cfg.get("provider") or "").strip().lower()
        if provider not in {"openai_whisper", "whisper"}:
            raise ConfigurationError(f"Unknown transcription provider: {provider!r}")
        cfg["provider"] = provider
        if not str(cfg.get("api_key") or "").strip():
            cfg["api_key"] = self.classifier.api_key
        base_url = str(cfg.get("base_url") or "").strip()
        cfg["base_url"] = base_url or str(self.classifier.base_url or "").strip() or DEFAULT_OPENAI_BASE_URL
        return cfg
