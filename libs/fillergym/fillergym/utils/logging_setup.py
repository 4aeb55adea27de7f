"""Logging initialization helpers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fillergym.config import LoggingSettings, Settings

_CONFIGURED_FLAG = "_fillergym_configured"


def _file_handler(cfg: LoggingSettings, log_dir: str) -> RotatingFileHandler:
    path = Path(str(cfg.file))
    if not path.is_absolute():
        path = Path(log_dir) / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(cfg.max_bytes),
        backupCount=int(cfg.backup_count),
        encoding="utf-8",
    )


def setup_logging(settings: Settings, *, level: str | None = None) -> logging.Logger:
    """Attach handlers to the ``fillergym`` logger and return it.

    ``level`` overrides ``LOG_LEVEL``. The httpx request log is held at
    ``LOG_HTTPX_LEVEL`` so per-call lines come from the providers only.
    Repeated calls only adjust the level.
    """
    cfg = settings.logging
    logger = logging.getLogger("fillergym")
    resolved = getattr(logging, str(level or cfg.level or "INFO").upper(), logging.INFO)

    if getattr(logger, _CONFIGURED_FLAG, False):
        logger.setLevel(resolved)
        return logger

    formatter = logging.Formatter(fmt=str(cfg.format), datefmt=str(cfg.datefmt))
    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(logging.StreamHandler())
    if cfg.file:
        handlers.append(_file_handler(cfg, settings.log_dir))
    for handler in handlers:
        handler.setFormatter(formatter)

    logger.handlers = handlers
    logger.setLevel(resolved)
    logger.propagate = False
    logging.getLogger("httpx").setLevel(
        getattr(logging, str(cfg.httpx_level or "WARNING").upper(), logging.WARNING)
    )
    setattr(logger, _CONFIGURED_FLAG, True)
    return logger
