"""
Roadmapper Backend - FastAPI + Socket.io entry point.
Serves the task store, fractal tree layout and decomposition suggestions.

Run: uvicorn main:asgi_app --app-dir backend
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from api import register_routes
from db import TaskRepository

# Socket.io
sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins="*")

# Single repository instance, handed to the API layer by reference
repository = TaskRepository()


def _on_tasks_changed(tasks):
    """Push the full task list to connected clients after every store change."""
    try:
        asyncio.get_running_loop().create_task(sio.emit("tasks-update", {"tasks": tasks}))
    except RuntimeError:
        logger.debug("No running loop; skipping tasks-update emit")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await repository.initialize()
    repository.subscribe(_on_tasks_changed)
    logger.info("Task store ready at {} ({} tasks)", repository.db_dir, len(repository.list()))
    yield
    repository.unsubscribe(_on_tasks_changed)


app = FastAPI(title="Roadmapper Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_routes(app, sio, repository)

# Frontend static files
FRONTEND_DIR = Path(__file__).parent.parent / "frontend"

# Static file serving - MUST come after all API routes
if FRONTEND_DIR.exists():
    app.mount("/", StaticFiles(directory=str(FRONTEND_DIR), html=True), name="static")


# Socket.io events
@sio.event
async def connect(sid, environ, auth):
    logger.info("Client connected: {}", sid)
    await sio.emit("tasks-update", {"tasks": repository.list()}, to=sid)


@sio.event
def disconnect(sid):
    logger.info("Client disconnected: {}", sid)


# ASGI app for uvicorn (Socket.io + FastAPI)
asgi_app = socketio.ASGIApp(sio, app)
