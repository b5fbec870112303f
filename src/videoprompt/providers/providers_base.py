"""Abstract interface of the remote multimodal service."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..generate.generate_models import GenerationRequest, ModelInfo, RemoteFileHandle


class MediaProvider(ABC):
    """File ingestion, file status and content generation endpoints."""

    @abstractmethod
    async def upload_file(
        self, path: Path, *, mime_type: str, display_name: str
    ) -> RemoteFileHandle:
        """Upload a local blob and return the remote handle."""

    @abstractmethod
    async def get_file(self, name: str) -> RemoteFileHandle:
        """Fetch the current state of a remote file."""

    @abstractmethod
    async def generate_content(self, request: GenerationRequest) -> str:
        """Run one generation call and return its text."""

    @abstractmethod
    async def list_models(self) -> list[ModelInfo]:
        """Return models available to the configured credential."""
