"""FastAPI application entry point."""

import os

import uvicorn
from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import include_routers
from .logging import configure_logging


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    cfg = config or load_config()
    configure_logging(cfg.log_level)
    app = FastAPI(title="videoprompt")
    include_routers(app, cfg)
    return app


def run() -> None:
    """Serve the app with uvicorn (``videoprompt`` console script)."""
    uvicorn.run(
        "videoprompt.main:create_app",
        factory=True,
        host=os.getenv("VIDEOPROMPT_HOST", "127.0.0.1"),
        port=int(os.getenv("VIDEOPROMPT_PORT", "8000")),
        log_config=None,
    )


app = create_app()
