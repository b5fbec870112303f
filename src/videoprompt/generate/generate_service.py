"""Domain service orchestrating one generate request."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Awaitable, Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog
from starlette.datastructures import UploadFile

from ..media.temp_media_store import TempMediaStore
from ..providers.providers_base import MediaProvider
from ..providers.readiness import ReadinessPoller
from .generate_errors import ConfigurationError, GenerationError, GenerationTimeoutError
from .generate_models import (
    GenerationProfile,
    GenerationRequest,
    GenerationResult,
    InputRole,
    ModelInfo,
    RemoteFileHandle,
    SubmissionMode,
    UploadedMedia,
)
from .instructions import instruction_text

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class GenerateService:
    """Coordinates store → upload → poll → generate for one request."""

    profile: GenerationProfile
    temp_store: TempMediaStore
    api_key: str | None
    provider_factory: Callable[[str], MediaProvider]
    poll_interval_seconds: float = 2.0
    max_wait_seconds: float = 240.0
    request_timeout_seconds: float = 300.0
    default_mime_type: str = "video/mp4"
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    clock: Callable[[], float] = time.monotonic
    log: logging.Logger = field(default_factory=lambda: logger)

    def accepts(self, mode: SubmissionMode) -> bool:
        return self.profile.submission_mode.allows(mode)

    async def generate_from_uploads(
        self, style: UploadFile, target: UploadFile
    ) -> GenerationResult:
        """Run the full pipeline for two multipart uploads."""
        provider = self._provider()
        with structlog.contextvars.bound_contextvars(
            request_id=uuid.uuid4().hex, mode=SubmissionMode.UPLOAD.value
        ):
            self.log.info(
                "generate.request.start",
                extra={
                    "model": self.profile.model_id,
                    "style_name": style.filename,
                    "target_name": target.filename,
                },
            )
            return await self._bounded(self._run_uploads(provider, style, target))

    async def generate_from_uris(self, style_uri: str, target_uri: str) -> GenerationResult:
        """Run generation for files the client already uploaded itself."""
        provider = self._provider()
        with structlog.contextvars.bound_contextvars(
            request_id=uuid.uuid4().hex, mode=SubmissionMode.URI.value
        ):
            self.log.info(
                "generate.request.start",
                extra={
                    "model": self.profile.model_id,
                    "style_uri": style_uri,
                    "target_uri": target_uri,
                },
            )
            return await self._bounded(self._run_uris(provider, style_uri, target_uri))

    async def list_models(self) -> list[ModelInfo]:
        return await self._provider().list_models()

    async def _run_uploads(
        self, provider: MediaProvider, style: UploadFile, target: UploadFile
    ) -> GenerationResult:
        poller = self._poller(provider)
        async with self.temp_store.lease() as lease:
            style_media = await lease.persist(style, InputRole.STYLE)
            target_media = await lease.persist(target, InputRole.TARGET)

            style_handle, target_handle = await _gather_or_cancel(
                self._upload(provider, style_media),
                self._upload(provider, target_media),
            )
            style_ready, target_ready = await _gather_or_cancel(
                poller.wait_until_ready(style_handle, InputRole.STYLE),
                poller.wait_until_ready(target_handle, InputRole.TARGET),
            )
            self.log.info("generate.files.active")
            return await self._generate(provider, style_ready, target_ready)

    async def _run_uris(
        self, provider: MediaProvider, style_uri: str, target_uri: str
    ) -> GenerationResult:
        poller = self._poller(provider)
        style_handle, target_handle = await _gather_or_cancel(
            poller.resolve_reference(style_uri, InputRole.STYLE),
            poller.resolve_reference(target_uri, InputRole.TARGET),
        )
        return await self._generate(provider, style_handle, target_handle)

    async def _upload(self, provider: MediaProvider, media: UploadedMedia) -> RemoteFileHandle:
        return await provider.upload_file(
            media.path,
            mime_type=media.mime_type,
            display_name=media.role.display_name,
        )

    async def _generate(
        self,
        provider: MediaProvider,
        style: RemoteFileHandle,
        target: RemoteFileHandle,
    ) -> GenerationResult:
        for role, handle in ((InputRole.STYLE, style), (InputRole.TARGET, target)):
            if not handle.is_referenceable:
                raise GenerationError(
                    f"{role.display_name} is not ready for generation",
                    details=f"file={handle.name} state={handle.state.value}",
                )
        request = GenerationRequest(
            model_id=self.profile.model_id,
            style=style,
            target=target,
            instruction=instruction_text(self.profile.instruction_template),
        )
        text = await provider.generate_content(request)
        self.log.info(
            "generate.request.success",
            extra={"model": self.profile.model_id, "text_len": len(text)},
        )
        return GenerationResult(text=text, model_id=self.profile.model_id)

    async def _bounded(self, work: Coroutine[Any, Any, T]) -> T:
        try:
            return await asyncio.wait_for(work, timeout=self.request_timeout_seconds)
        except asyncio.TimeoutError as exc:
            self.log.warning(
                "generate.request.timeout",
                extra={"timeout_seconds": self.request_timeout_seconds},
            )
            raise GenerationTimeoutError(
                f"Request did not finish within {self.request_timeout_seconds:g} seconds"
            ) from exc

    def _provider(self) -> MediaProvider:
        api_key = (self.api_key or "").strip()
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set.")
        return self.provider_factory(api_key)

    def _poller(self, provider: MediaProvider) -> ReadinessPoller:
        return ReadinessPoller(
            provider=provider,
            poll_interval_seconds=self.poll_interval_seconds,
            max_wait_seconds=self.max_wait_seconds,
            default_mime_type=self.default_mime_type,
            sleep=self.sleep,
            clock=self.clock,
        )


async def _gather_or_cancel(*aws: Coroutine[Any, Any, T]) -> list[T]:
    """Await all coroutines; on the first failure cancel the rest."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
