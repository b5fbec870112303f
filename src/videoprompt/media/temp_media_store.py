"""Temporary media storage for uploaded videos."""

from __future__ import annotations

import logging
import re
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType

from starlette.datastructures import UploadFile

from ..generate.generate_errors import PayloadTooLargeError, StorageError
from ..generate.generate_models import InputRole, UploadedMedia

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB
_WHITESPACE = re.compile(r"\s")


@dataclass(slots=True)
class TempMediaStore:
    """Writes uploads to transient storage and removes them afterwards."""

    root: Path
    max_upload_bytes: int
    default_mime_type: str = "video/mp4"
    chunk_size: int = CHUNK_SIZE
    log: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def ensure_structure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def lease(self) -> "TempMediaLease":
        """Return a scope that removes every file persisted through it."""
        return TempMediaLease(store=self)

    async def persist_upload(self, upload: UploadFile, role: InputRole) -> UploadedMedia:
        """Copy upload contents to temp storage."""
        filename = upload.filename or f"{role.value}.bin"
        try:
            target = self.ensure_structure() / self._derive_filename(filename)
        except OSError as exc:
            raise StorageError(
                "Failed to prepare temporary storage", details=str(exc)
            ) from exc

        size = 0
        try:
            with target.open("wb") as sink:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_upload_bytes:
                        raise PayloadTooLargeError(
                            f"{role.display_name} exceeds {self.max_upload_bytes} bytes",
                            details=f"size_bytes>{self.max_upload_bytes}",
                        )
                    sink.write(chunk)
        except PayloadTooLargeError:
            self.log.warning(
                "media.temp.payload_too_large",
                extra={"role": role.value, "limit_bytes": self.max_upload_bytes},
            )
            self.remove(target)
            raise
        except OSError as exc:
            self.remove(target)
            raise StorageError(
                f"Failed to store {role.display_name} locally", details=str(exc)
            ) from exc
        except BaseException:
            self.remove(target)
            raise

        media = UploadedMedia(
            role=role,
            filename=filename,
            mime_type=self._resolve_mime(upload.content_type),
            size_bytes=size,
            path=target,
        )
        self.log.info(
            "media.temp.persisted",
            extra={
                "role": role.value,
                "original_name": filename,
                "size_mb": round(size / 1024 / 1024, 2),
                "mime_type": media.mime_type,
                "path": str(target),
            },
        )
        return media

    def remove(self, path: Path) -> None:
        """Delete ``path``; a missing file is not an error."""
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            self.log.warning(
                "media.temp.cleanup_failed",
                extra={"path": str(path), "error": str(exc)},
            )

    def _resolve_mime(self, content_type: str | None) -> str:
        if not content_type or content_type == "application/octet-stream":
            return self.default_mime_type
        return content_type

    @staticmethod
    def _derive_filename(filename: str) -> str:
        name = _WHITESPACE.sub("_", Path(filename).name) or "upload.bin"
        token = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
        return f"{token}-{name}"


@dataclass(slots=True)
class TempMediaLease:
    """Request-scoped set of temp files, removed on exit."""

    store: TempMediaStore
    media: list[UploadedMedia] = field(default_factory=list)

    async def __aenter__(self) -> "TempMediaLease":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()

    async def persist(self, upload: UploadFile, role: InputRole) -> UploadedMedia:
        media = await self.store.persist_upload(upload, role)
        self.media.append(media)
        return media

    def release(self) -> None:
        for item in self.media:
            self.store.remove(item.path)
        if self.media:
            self.store.log.info(
                "media.temp.cleaned",
                extra={"paths": [str(item.path) for item in self.media]},
            )
        self.media.clear()
