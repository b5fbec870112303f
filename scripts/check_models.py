"""
Quick manual check of which Gemini models the configured key can use.

How to run (from the project root):
    export GEMINI_API_KEY=...
    python scripts/check_models.py

What it does:
    1) Reads the key and API settings the same way the service does (AppConfig).
    2) Lists models on the configured API version and on v1alpha.
    3) Prints one line per model, or the error returned by the API.
"""

from __future__ import annotations

import asyncio
import sys

from videoprompt.config import load_config
from videoprompt.generate.generate_errors import GenerateError
from videoprompt.providers.providers_gemini import GeminiFilesClient


async def list_for_version(api_key: str, base_url: str, version: str) -> bool:
    client = GeminiFilesClient(api_key=api_key, api_url_base=base_url, api_version=version)
    try:
        models = await client.list_models()
    except GenerateError as exc:
        print(f"[error] {version}: {exc.message} {exc.details or ''}".rstrip())
        return False
    if not models:
        print(f"[info] {version}: no models returned")
        return True
    print(f"[info] available models ({version}):")
    for model in models:
        print(f"- {model.name} ({model.display_name or '-'})")
    return True


async def main() -> int:
    config = load_config()
    if not config.has_api_key:
        print("[error] GEMINI_API_KEY is not set")
        return 1
    ok = True
    for version in dict.fromkeys((config.api_version, "v1alpha")):
        ok = await list_for_version(config.gemini_api_key or "", config.api_base_url, version) and ok
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
