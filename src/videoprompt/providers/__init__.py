"""Remote multimodal service clients."""

from .providers_base import MediaProvider
from .providers_gemini import GeminiFilesClient
from .readiness import ReadinessPoller

__all__ = ["GeminiFilesClient", "MediaProvider", "ReadinessPoller"]
