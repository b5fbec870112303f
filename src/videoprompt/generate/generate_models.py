"""Data structures for the generate pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class InputRole(StrEnum):
    """Which of the two submitted videos a value belongs to."""

    STYLE = "style"
    TARGET = "target"

    @property
    def display_name(self) -> str:
        return "Style Reference" if self is InputRole.STYLE else "Target Output"


class FileState(StrEnum):
    """Processing states reported by the remote file service."""

    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: object) -> "FileState":
        try:
            return cls(str(raw or "").upper())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in (FileState.ACTIVE, FileState.FAILED)


class SubmissionMode(StrEnum):
    """How the caller hands the two videos over."""

    UPLOAD = "upload"
    URI = "uri"
    AUTO = "auto"

    def allows(self, mode: "SubmissionMode") -> bool:
        return self is SubmissionMode.AUTO or self is mode


class FailureReason(StrEnum):
    """Failure reasons reported in error responses."""

    INVALID_REQUEST = "invalid_request"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    CONFIGURATION_ERROR = "configuration_error"
    STORAGE_ERROR = "storage_error"
    UPLOAD_FAILED = "upload_failed"
    PROCESSING_FAILED = "processing_failed"
    TIMEOUT = "timeout"
    GENERATION_FAILED = "generation_failed"
    INTERNAL_ERROR = "internal_error"


@dataclass(slots=True)
class UploadedMedia:
    """A user-supplied video written to temporary storage."""

    role: InputRole
    filename: str
    mime_type: str
    size_bytes: int
    path: Path


@dataclass(slots=True)
class RemoteFileHandle:
    """Remote bookkeeping record for one uploaded video.

    ``confirmed`` is False only for handles built in degraded mode, when the
    status endpoint could not be queried and the caller's URI is trusted as is.
    """

    name: str
    uri: str
    mime_type: str
    state: FileState
    display_name: str | None = None
    confirmed: bool = True

    @property
    def is_ready(self) -> bool:
        return self.state is FileState.ACTIVE

    @property
    def is_referenceable(self) -> bool:
        return self.is_ready or not self.confirmed


@dataclass(slots=True)
class GenerationRequest:
    """One generation call: style handle, target handle and instruction."""

    model_id: str
    style: RemoteFileHandle
    target: RemoteFileHandle
    instruction: str

    @property
    def handles(self) -> tuple[RemoteFileHandle, RemoteFileHandle]:
        return (self.style, self.target)


@dataclass(slots=True)
class GenerationResult:
    """Generated prompt text."""

    text: str
    model_id: str


@dataclass(slots=True)
class ModelInfo:
    name: str
    display_name: str | None = None


@dataclass(slots=True, frozen=True)
class GenerationProfile:
    """Per-deployment generation parameters."""

    model_id: str
    instruction_template: str
    submission_mode: SubmissionMode = SubmissionMode.AUTO
