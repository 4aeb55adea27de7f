"""Canonical error codes attached to failed analysis runs."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    INVALID_INPUT = "INVALID_INPUT"
    CONFIGURATION = "CONFIGURATION"

    NETWORK_FAILED = "NETWORK_FAILED"
    TIMEOUT = "TIMEOUT"
    DECODE_FAILED = "DECODE_FAILED"
    TRANSCRIPTION_FAILED = "TRANSCRIPTION_FAILED"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"

    CANCELLED = "CANCELLED"
