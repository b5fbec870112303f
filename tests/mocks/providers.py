"""Deterministic remote-service doubles for unit and API tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from videoprompt.generate.generate_errors import (
    GenerateError,
    StatusQueryError,
    UploadError,
)
from videoprompt.generate.generate_models import (
    FileState,
    GenerationRequest,
    ModelInfo,
    RemoteFileHandle,
)
from videoprompt.providers.providers_base import MediaProvider

FILE_URI_BASE = "https://generativelanguage.googleapis.com/v1beta"


@dataclass
class UploadCall:
    path: Path
    existed: bool
    mime_type: str
    display_name: str


@dataclass
class FakeMediaProvider(MediaProvider):
    """Scripted provider.

    ``states`` maps a file name to the sequence of states returned by
    successive ``get_file`` calls; the last state repeats forever.
    """

    states: dict[str, list[FileState]] = field(default_factory=dict)
    text: str = "The video starts with a cat in watercolor style."
    status_errors: set[str] = field(default_factory=set)
    upload_errors: set[str] = field(default_factory=set)
    generate_error: GenerateError | None = None
    uploads: list[UploadCall] = field(default_factory=list)
    status_calls: list[str] = field(default_factory=list)
    generate_calls: list[GenerationRequest] = field(default_factory=list)

    async def upload_file(
        self, path: Path, *, mime_type: str, display_name: str
    ) -> RemoteFileHandle:
        self.uploads.append(
            UploadCall(path=path, existed=path.exists(), mime_type=mime_type, display_name=display_name)
        )
        if display_name in self.upload_errors:
            raise UploadError(f"Gemini upload rejected for {display_name} (status=429)")
        name = "files/style" if display_name == "Style Reference" else "files/target"
        return RemoteFileHandle(
            name=name,
            uri=f"{FILE_URI_BASE}/{name}",
            mime_type=mime_type,
            state=FileState.PROCESSING,
            display_name=display_name,
        )

    async def get_file(self, name: str) -> RemoteFileHandle:
        self.status_calls.append(name)
        if name in self.status_errors:
            raise StatusQueryError(
                f"Gemini status query failed for {name} (status=403)",
                details="PERMISSION_DENIED",
            )
        sequence = self.states.get(name) or [FileState.ACTIVE]
        state = sequence.pop(0) if len(sequence) > 1 else sequence[0]
        return RemoteFileHandle(
            name=name,
            uri=f"{FILE_URI_BASE}/{name}",
            mime_type="video/mp4",
            state=state,
        )

    async def generate_content(self, request: GenerationRequest) -> str:
        self.generate_calls.append(request)
        if self.generate_error is not None:
            raise self.generate_error
        return self.text

    async def list_models(self) -> list[ModelInfo]:
        return [ModelInfo(name="models/gemini-2.5-flash", display_name="Gemini 2.5 Flash")]


@dataclass
class FakeClock:
    """Monotonic clock advanced only by ``sleep``."""

    now: float = 0.0
    sleeps: list[float] = field(default_factory=list)

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
