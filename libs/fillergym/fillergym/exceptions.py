"""FillerGym exception hierarchy."""

from __future__ import annotations

from fillergym.error_codes import ErrorCode


class FillerGymError(Exception):
    """Base error for FillerGym."""

    error_code: ErrorCode = ErrorCode.UNKNOWN


class InputError(FillerGymError):
    """Raised when the transcript or audio input is empty or unreadable."""

    error_code = ErrorCode.INVALID_INPUT


class ConfigurationError(FillerGymError):
    """Raised when configuration or credentials are missing or invalid."""

    error_code = ErrorCode.CONFIGURATION


class ProviderError(FillerGymError):
    """Raised when an external provider call fails."""

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        if error_code is not None:
            self.error_code = (
                error_code if isinstance(error_code, ErrorCode) else ErrorCode(error_code)
            )


class NetworkError(ProviderError):
    """Transport failure or non-success status from a remote service."""

    error_code = ErrorCode.NETWORK_FAILED


class DecodeError(ProviderError):
    """Response body does not match the expected shape."""

    error_code = ErrorCode.DECODE_FAILED


class PersistenceError(FillerGymError):
    """Raised when the report could not be handed to storage."""

    error_code = ErrorCode.PERSISTENCE_FAILED


class AnalysisCancelledError(FillerGymError):
    """Raised when a caller cancelled the run between state transitions."""

    error_code = ErrorCode.CANCELLED


class StageExecutionError(FillerGymError):
    """Raised by the orchestrator when a run fails at some stage."""

    def __init__(
        self,
        stage: str,
        message: str,
        *,
        run_id: str | None = None,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        prefix = f"{stage}"
        if run_id:
            prefix = f"{prefix} (run_id={run_id})"
        super().__init__(f"{prefix}: {message}")
        self.stage = stage
        self.run_id = run_id
        self.message = message
        if error_code is not None:
            self.error_code = (
                error_code if isinstance(error_code, ErrorCode) else ErrorCode(error_code)
            )
