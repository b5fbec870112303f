"""Gemini Files API and generateContent client."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

from ..generate.generate_errors import (
    GenerateError,
    GenerationError,
    StatusQueryError,
    StorageError,
    UploadError,
)
from ..generate.generate_models import (
    FileState,
    GenerationRequest,
    ModelInfo,
    RemoteFileHandle,
)
from .providers_base import MediaProvider

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GeminiFilesClient(MediaProvider):
    """Talk to the Gemini REST API with one short-lived client per call."""

    api_key: str
    api_url_base: str = "https://generativelanguage.googleapis.com"
    api_version: str = "v1beta"
    default_mime_type: str = "video/mp4"
    timeout_seconds: float = 120.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def upload_file(
        self, path: Path, *, mime_type: str, display_name: str
    ) -> RemoteFileHandle:
        try:
            payload = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise StorageError(
                f"Failed to read {display_name} from temporary storage", details=str(exc)
            ) from exc

        start_url = f"{self._root}/upload/{self.api_version}/files"
        start_headers = {
            **self._headers(),
            "X-Goog-Upload-Protocol": "resumable",
            "X-Goog-Upload-Command": "start",
            "X-Goog-Upload-Header-Content-Length": str(len(payload)),
            "X-Goog-Upload-Header-Content-Type": mime_type,
            "Content-Type": "application/json",
        }
        self.log.info(
            "gemini.upload.start",
            extra={"display_name": display_name, "mime_type": mime_type, "size_bytes": len(payload)},
        )
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                start = await client.post(
                    start_url,
                    headers=start_headers,
                    json={"file": {"display_name": display_name}},
                )
                if start.status_code != 200:
                    raise UploadError(
                        f"Gemini upload rejected for {display_name} (status={start.status_code})",
                        details=_extract_error(start),
                    )
                upload_url = start.headers.get("x-goog-upload-url")
                if not upload_url:
                    raise UploadError(
                        f"Gemini did not return an upload URL for {display_name}"
                    )
                response = await client.post(
                    upload_url,
                    headers={
                        "X-Goog-Upload-Offset": "0",
                        "X-Goog-Upload-Command": "upload, finalize",
                    },
                    content=payload,
                )
        except httpx.HTTPError as exc:
            raise UploadError(
                f"Gemini upload failed for {display_name}", details=repr(exc)
            ) from exc

        if response.status_code != 200:
            raise UploadError(
                f"Gemini upload rejected for {display_name} (status={response.status_code})",
                details=_extract_error(response),
            )
        body = _json_object(response)
        if body is None:
            raise UploadError(
                f"Gemini upload response for {display_name} is not a JSON object",
                details=response.text[:500],
            )
        file_data = body.get("file")
        handle = self._parse_file(file_data if isinstance(file_data, dict) else body)
        if handle is None:
            raise UploadError(
                f"Gemini upload response for {display_name} has no file name",
                details=str(body)[:500],
            )
        self.log.info(
            "gemini.upload.done",
            extra={"display_name": display_name, "file_name": handle.name, "uri": handle.uri, "state": handle.state.value},
        )
        return handle

    async def get_file(self, name: str) -> RemoteFileHandle:
        url = f"{self._root}/{self.api_version}/{name}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(url, headers=self._headers())
        except httpx.HTTPError as exc:
            raise StatusQueryError(
                f"Gemini status query failed for {name}", details=repr(exc)
            ) from exc
        if response.status_code != 200:
            raise StatusQueryError(
                f"Gemini status query failed for {name} (status={response.status_code})",
                details=_extract_error(response),
            )
        body = _json_object(response)
        if body is None:
            raise StatusQueryError(
                f"Gemini status response for {name} is not a JSON object",
                details=response.text[:500],
            )
        handle = self._parse_file(body)
        if handle is None:
            raise StatusQueryError(
                f"Gemini status response for {name} has no file name",
                details=str(body)[:500],
            )
        return handle

    async def generate_content(self, request: GenerationRequest) -> str:
        parts: list[dict[str, Any]] = [
            {"file_data": {"mime_type": handle.mime_type, "file_uri": handle.uri}}
            for handle in request.handles
        ]
        parts.append({"text": request.instruction})
        self.log.info(
            "gemini.generate.start",
            extra={
                "model": request.model_id,
                "file_uris": [handle.uri for handle in request.handles],
                "instruction_len": len(request.instruction),
            },
        )
        return await self._generate(request.model_id, parts)

    async def generate_text(self, model_id: str, prompt: str) -> str:
        """Text-only generation, used to check that a model id is callable."""
        return await self._generate(model_id, [{"text": prompt}])

    async def _generate(self, model_id: str, parts: list[dict[str, Any]]) -> str:
        url = f"{self._root}/{self.api_version}/{model_path(model_id)}:generateContent"
        body = {"contents": [{"role": "user", "parts": parts}]}
        headers = {**self._headers(), "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(url, headers=headers, json=body)
        except httpx.HTTPError as exc:
            raise GenerationError(
                "Gemini generateContent request failed", details=repr(exc)
            ) from exc

        if response.status_code != 200:
            error_detail = _extract_error(response)
            self.log.error(
                "gemini.generate.error",
                extra={"status_code": response.status_code, "error_detail": error_detail},
            )
            raise GenerationError(
                f"Gemini request failed (status={response.status_code})",
                details=error_detail,
            )

        data = _json_object(response)
        if data is None:
            raise GenerationError(
                "Gemini response is not a JSON object", details=response.text[:500]
            )
        text = _extract_text(data)
        if not text:
            reason = _finish_reason(data)
            raise GenerationError(
                "Gemini response does not contain text",
                details=f"finish_reason={reason}" if reason else str(data)[:500],
            )
        self.log.info(
            "gemini.generate.done",
            extra={"model": model_id, "text_len": len(text)},
        )
        return text

    async def list_models(self) -> list[ModelInfo]:
        url = f"{self._root}/{self.api_version}/models"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(url, headers=self._headers())
        except httpx.HTTPError as exc:
            raise GenerateError("Gemini model listing failed", details=repr(exc)) from exc
        if response.status_code != 200:
            raise GenerateError(
                f"Gemini model listing failed (status={response.status_code})",
                details=_extract_error(response),
            )
        data = _json_object(response)
        if data is None:
            raise GenerateError(
                "Gemini model listing is not a JSON object", details=response.text[:500]
            )
        return [
            ModelInfo(name=item["name"], display_name=item.get("displayName"))
            for item in data.get("models") or []
            if isinstance(item, dict) and item.get("name")
        ]

    @property
    def _root(self) -> str:
        return self.api_url_base.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key}

    def _parse_file(self, data: dict[str, Any]) -> RemoteFileHandle | None:
        name = data.get("name")
        if not name:
            return None
        return RemoteFileHandle(
            name=name,
            uri=data.get("uri") or "",
            mime_type=data.get("mimeType") or data.get("mime_type") or self.default_mime_type,
            state=FileState.parse(data.get("state")),
            display_name=data.get("displayName") or data.get("display_name"),
        )


def model_path(model_id: str) -> str:
    """Return ``models/<id>`` for a bare id or an already prefixed name."""
    return "models/" + model_id.strip().removeprefix("models/")


def _json_object(response: httpx.Response) -> dict[str, Any] | None:
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _extract_error(response: httpx.Response) -> str:
    data = _json_object(response)
    if data is None:
        return response.text
    error = data.get("error")
    if isinstance(error, dict):
        message = (error.get("message") or "").strip()
        status = (error.get("status") or "").strip()
        return " ".join(part for part in (status, message) if part)
    return str(data)


def _extract_text(data: dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()


def _finish_reason(data: dict[str, Any]) -> str | None:
    feedback = data.get("promptFeedback") or {}
    if feedback.get("blockReason"):
        return str(feedback["blockReason"])
    candidates = data.get("candidates") or []
    if not candidates:
        return None
    first = candidates[0] or {}
    return first.get("finishReason") or first.get("finish_reason")
