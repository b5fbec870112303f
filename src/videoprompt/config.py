"""Application configuration.

Values come from ``VIDEOPROMPT_*`` environment variables (or a ``.env`` file);
the Gemini credential is read from ``GEMINI_API_KEY``.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .generate.generate_models import GenerationProfile, SubmissionMode
from .generate.instructions import InstructionTemplate


def _default_temp_dir() -> Path:
    return Path(tempfile.gettempdir()) / "videoprompt"


class AppConfig(BaseSettings):
    """Pydantic settings container for the service."""

    model_config = SettingsConfigDict(
        env_prefix="VIDEOPROMPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "VIDEOPROMPT_GEMINI_API_KEY"),
        description="Gemini API key; requests fail with a configuration error without it.",
    )
    api_base_url: str = Field(
        default="https://generativelanguage.googleapis.com",
        description="Root URL of the Gemini REST API.",
    )
    api_version: str = Field(default="v1beta", description="Gemini REST API version.")
    model_id: str = Field(
        default="gemini-2.5-flash",
        min_length=1,
        description="Model used for generateContent calls.",
    )
    instruction_template: InstructionTemplate = Field(
        default=InstructionTemplate.NARRATIVE,
        description="Instruction template sent with the two video references.",
    )
    submission_mode: SubmissionMode = Field(
        default=SubmissionMode.AUTO,
        description="Accepted submission modes: multipart upload, pre-uploaded URI or both.",
    )
    poll_interval_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Delay between file status queries.",
    )
    max_wait_seconds: float = Field(
        default=240.0,
        gt=0.0,
        description="Upper bound on time spent waiting for one file to become ACTIVE.",
    )
    request_timeout_seconds: float = Field(
        default=300.0,
        ge=60.0,
        le=600.0,
        description="Wall-clock budget for a whole generate request.",
    )
    http_timeout_seconds: float = Field(
        default=120.0,
        gt=0.0,
        description="Timeout applied to each outbound HTTP call.",
    )
    max_upload_bytes: int = Field(
        default=100 * 1024 * 1024,
        ge=1,
        description="Largest accepted video upload in bytes.",
    )
    upload_chunk_bytes: int = Field(
        default=1024 * 1024,
        ge=1024,
        description="Chunk size used when streaming uploads to temporary storage.",
    )
    temp_dir: Path = Field(
        default_factory=_default_temp_dir,
        description="Directory for request-scoped temporary video files.",
    )
    default_mime_type: str = Field(
        default="video/mp4",
        description="MIME type assumed when the client or remote service omits one.",
    )
    log_level: str = Field(default="INFO", description="Root logging level.")

    @property
    def has_api_key(self) -> bool:
        return bool((self.gemini_api_key or "").strip())

    def profile(self) -> GenerationProfile:
        return GenerationProfile(
            model_id=self.model_id,
            instruction_template=self.instruction_template.value,
            submission_mode=self.submission_mode,
        )


def load_config() -> AppConfig:
    """Load configuration from the environment."""
    return AppConfig()


__all__ = ["AppConfig", "load_config"]
