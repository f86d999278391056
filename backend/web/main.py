"""fsgate Web Backend - FastAPI Application."""

from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.web.core.lifespan import lifespan
from backend.web.routers import events, status
from config.loader import load_settings


def create_app() -> FastAPI:
    app = FastAPI(title="fsgate", lifespan=lifespan)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(events.router)
    app.include_router(status.router)
    return app


app = create_app()


def main() -> None:
    # Host and port follow the same precedence as every other setting
    settings = load_settings(workspace_root=Path.cwd())
    # Package-qualified target keeps module launch (`python -m backend.web.main`) import-safe.
    uvicorn.run("backend.web.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
