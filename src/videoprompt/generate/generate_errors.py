"""Domain-specific exceptions for the generate pipeline."""

from __future__ import annotations

from .generate_models import FailureReason, InputRole


class GenerateError(Exception):
    """Base class for generate-related errors."""

    failure_reason = FailureReason.INTERNAL_ERROR

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InputValidationError(GenerateError):
    """Raised when a required input is missing or malformed."""

    failure_reason = FailureReason.INVALID_REQUEST


class PayloadTooLargeError(InputValidationError):
    """Raised when an uploaded video exceeds the configured cap."""

    failure_reason = FailureReason.PAYLOAD_TOO_LARGE


class ConfigurationError(GenerateError):
    """Raised when the service is missing required configuration."""

    failure_reason = FailureReason.CONFIGURATION_ERROR


class StorageError(GenerateError):
    """Raised when writing to temporary storage fails."""

    failure_reason = FailureReason.STORAGE_ERROR


class UploadError(GenerateError):
    """Raised when the remote file service rejects an upload."""

    failure_reason = FailureReason.UPLOAD_FAILED


class StatusQueryError(GenerateError):
    """Raised when a remote file status cannot be fetched."""

    failure_reason = FailureReason.UPLOAD_FAILED


class ProcessingFailedError(GenerateError):
    """Raised when the remote service marks a file as FAILED."""

    failure_reason = FailureReason.PROCESSING_FAILED

    def __init__(self, role: InputRole, *, details: str | None = None) -> None:
        super().__init__(
            f"Processing failed for {role.display_name} ({role.value} video)",
            details=details,
        )
        self.role = role


class GenerationTimeoutError(GenerateError):
    """Raised when polling or generation exceeds its time budget."""

    failure_reason = FailureReason.TIMEOUT


class GenerationError(GenerateError):
    """Raised when the generation call fails or returns no text."""

    failure_reason = FailureReason.GENERATION_FAILED
