"""Dependency wiring helpers."""

from fastapi import FastAPI

from .config import AppConfig
from .generate.generate_api import router as generate_router
from .generate.generate_service import GenerateService
from .media.temp_media_store import TempMediaStore
from .providers.providers_base import MediaProvider
from .providers.providers_gemini import GeminiFilesClient


def build_provider_factory(config: AppConfig):
    """Return a callable building a Gemini client for a given API key."""

    def factory(api_key: str) -> MediaProvider:
        return GeminiFilesClient(
            api_key=api_key,
            api_url_base=config.api_base_url,
            api_version=config.api_version,
            default_mime_type=config.default_mime_type,
            timeout_seconds=config.http_timeout_seconds,
        )

    return factory


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Mount module routers and attach services."""
    temp_store = TempMediaStore(
        root=config.temp_dir,
        max_upload_bytes=config.max_upload_bytes,
        default_mime_type=config.default_mime_type,
        chunk_size=config.upload_chunk_bytes,
    )
    generate_service = GenerateService(
        profile=config.profile(),
        temp_store=temp_store,
        api_key=config.gemini_api_key,
        provider_factory=build_provider_factory(config),
        poll_interval_seconds=config.poll_interval_seconds,
        max_wait_seconds=config.max_wait_seconds,
        request_timeout_seconds=config.request_timeout_seconds,
        default_mime_type=config.default_mime_type,
    )

    app.state.config = config
    app.state.temp_store = temp_store
    app.state.generate_service = generate_service

    app.include_router(generate_router)
