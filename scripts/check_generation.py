"""
Quick manual check that the configured model id can generate text.

How to run (from the project root):
    export GEMINI_API_KEY=...
    python scripts/check_generation.py [model-id]

What it does:
    1) Sends a short text-only prompt on the configured API version.
    2) Repeats it on v1alpha.
    3) Repeats it with the id written as ``models/<id>``.
    Each step prints the reply or the error returned by the API.
"""

from __future__ import annotations

import asyncio
import sys

from videoprompt.config import load_config
from videoprompt.generate.generate_errors import GenerateError
from videoprompt.providers.providers_gemini import GeminiFilesClient

PROMPT = "Hello, world!"


async def try_generate(client: GeminiFilesClient, model_id: str, label: str) -> bool:
    print(f"[info] {label}: {client.api_version} {model_id}")
    try:
        text = await client.generate_text(model_id, PROMPT)
    except GenerateError as exc:
        print(f"[error] {label}: {exc.message} {exc.details or ''}".rstrip())
        return False
    print(f"[ok] {label}: {text[:200]}")
    return True


async def main() -> int:
    config = load_config()
    if not config.has_api_key:
        print("[error] GEMINI_API_KEY is not set")
        return 1
    model_id = sys.argv[1] if len(sys.argv) > 1 else config.model_id
    bare_id = model_id.removeprefix("models/")

    def client(version: str) -> GeminiFilesClient:
        return GeminiFilesClient(
            api_key=config.gemini_api_key or "",
            api_url_base=config.api_base_url,
            api_version=version,
            timeout_seconds=config.http_timeout_seconds,
        )

    results = [
        await try_generate(client(config.api_version), bare_id, "configured version"),
        await try_generate(client("v1alpha"), bare_id, "v1alpha"),
        await try_generate(client(config.api_version), f"models/{bare_id}", "models/ prefix"),
    ]
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
