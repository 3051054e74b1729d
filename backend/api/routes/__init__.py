"""API route modules."""

from fastapi import FastAPI

from . import decompose, settings, tasks, tree
from ..state import init_api_state


def register_routes(app: FastAPI, sio, repository):
    """Register all API routers. Call after app, sio and repository are created."""
    init_api_state(sio, repository)

    app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(tree.router, prefix="/api/tree", tags=["tree"])
    app.include_router(decompose.router, prefix="/api/decompose", tags=["decompose"])
    app.include_router(settings.router, prefix="/api/settings", tags=["settings"])
