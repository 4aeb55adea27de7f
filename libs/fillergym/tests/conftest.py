from __future__ import annotations

import pytest

from fillergym.config import (
    AnalysisConfig,
    ClassifierConfig,
    LexiconConfig,
    LoggingSettings,
    Settings,
    TranscriptionConfig,
)


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        language="ja",
        data_dir=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
        classifier=ClassifierConfig(_env_file=None, api_key="test-key"),
        transcription=TranscriptionConfig(_env_file=None),
        analysis=AnalysisConfig(_env_file=None),
        lexicon=LexiconConfig(_env_file=None),
        logging=LoggingSettings(_env_file=None, console=False),
    )
