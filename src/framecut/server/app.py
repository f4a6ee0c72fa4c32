"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers.export import router as export_router
from .routers.frames import router as frames_router
from .routers.upload import router as upload_router
from .workspace import ensure_workspace_layout


def create_app() -> FastAPI:
    """Create the FastAPI app instance."""

    ensure_workspace_layout()
    app = FastAPI(title="framecut server", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=False,
    )

    app.include_router(upload_router)
    app.include_router(frames_router)
    app.include_router(export_router)
    return app


app = create_app()
