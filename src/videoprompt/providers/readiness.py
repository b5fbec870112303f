"""Readiness polling for remote files.

A freshly uploaded file starts in ``PROCESSING``; the remote service moves it
to ``ACTIVE`` or ``FAILED`` once its own validation finishes. Only ``ACTIVE``
files may be referenced in a generation call.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from ..generate.generate_errors import (
    GenerationTimeoutError,
    ProcessingFailedError,
    StatusQueryError,
    UploadError,
)
from ..generate.generate_models import FileState, InputRole, RemoteFileHandle
from .providers_base import MediaProvider

logger = logging.getLogger(__name__)

_FILE_NAME = re.compile(r"(files/[A-Za-z0-9_-]+)")


def file_name_from_uri(uri: str) -> str | None:
    """Extract ``files/<id>`` from a file URI or bare name."""
    match = _FILE_NAME.search(uri or "")
    return match.group(1) if match else None


@dataclass(slots=True)
class ReadinessPoller:
    """Poll file status until ACTIVE or FAILED."""

    provider: MediaProvider
    poll_interval_seconds: float = 2.0
    max_wait_seconds: float = 240.0
    default_mime_type: str = "video/mp4"
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    clock: Callable[[], float] = time.monotonic
    log: logging.Logger = field(default_factory=lambda: logger)

    async def wait_until_ready(
        self, handle: RemoteFileHandle, role: InputRole
    ) -> RemoteFileHandle:
        """Wait for a file uploaded by this process to become ACTIVE."""
        started = self.clock()
        try:
            current = await self.provider.get_file(handle.name)
        except StatusQueryError as exc:
            raise UploadError(
                f"Could not query processing state of {role.display_name}",
                details=exc.details or exc.message,
            ) from exc
        return await self._poll(current, role, started=started)

    async def resolve_reference(self, uri: str, role: InputRole) -> RemoteFileHandle:
        """Resolve a caller-supplied file URI into a referenceable handle.

        The caller uploaded the file directly, so this process may not be
        allowed to read its status. When the status query fails the caller's
        URI is trusted and an unconfirmed handle with the default MIME type is
        returned instead of failing the request.
        """
        started = self.clock()
        name = file_name_from_uri(uri)
        try:
            if name is None:
                raise StatusQueryError(f"Cannot derive a file name from '{uri}'")
            current = await self.provider.get_file(name)
        except StatusQueryError as exc:
            self.log.warning(
                "gemini.file.status_unconfirmed",
                extra={
                    "role": role.value,
                    "uri": uri,
                    "error": exc.message,
                    "details": exc.details,
                },
            )
            return RemoteFileHandle(
                name=name or uri,
                uri=uri,
                mime_type=self.default_mime_type,
                state=FileState.UNKNOWN,
                display_name=role.display_name,
                confirmed=False,
            )
        if not current.uri:
            current.uri = uri
        return await self._poll(current, role, started=started)

    async def _poll(
        self, current: RemoteFileHandle, role: InputRole, *, started: float
    ) -> RemoteFileHandle:
        attempt = 1
        self._log_state(current, role, attempt)
        while not current.state.is_terminal:
            elapsed = self.clock() - started
            if elapsed >= self.max_wait_seconds:
                self.log.warning(
                    "gemini.file.poll_timeout",
                    extra={"role": role.value, "file_name": current.name, "elapsed_seconds": elapsed},
                )
                raise GenerationTimeoutError(
                    f"{role.display_name} was not ready after {self.max_wait_seconds:g} seconds",
                    details=f"file={current.name} state={current.state.value}",
                )
            await self.sleep(min(self.poll_interval_seconds, self.max_wait_seconds - elapsed))
            try:
                current = await self.provider.get_file(current.name)
            except StatusQueryError as exc:
                raise UploadError(
                    f"Could not query processing state of {role.display_name}",
                    details=exc.details or exc.message,
                ) from exc
            attempt += 1
            self._log_state(current, role, attempt)

        if current.state is FileState.FAILED:
            raise ProcessingFailedError(role, details=f"file={current.name}")
        return current

    def _log_state(self, handle: RemoteFileHandle, role: InputRole, attempt: int) -> None:
        self.log.info(
            "gemini.file.polled",
            extra={
                "role": role.value,
                "file_name": handle.name,
                "state": handle.state.value,
                "attempt": attempt,
            },
        )
