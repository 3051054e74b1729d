"""Tree API - fractal layout and visual properties for a task subtree."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from layout import create_tree, serialize_tree, visualize_tree
from shared.settings import resolve_engine_settings

from .. import state as api_state

router = APIRouter()


@router.get("/{task_id}")
async def get_tree(task_id: str):
    repo = api_state.repository
    snapshot = repo.get_tree(task_id)
    if snapshot is None:
        return JSONResponse(status_code=404, content={"error": f"Task not found: {task_id}"})
    try:
        settings = resolve_engine_settings(await repo.get_settings())
    except ValidationError as e:
        logger.warning("Invalid engine settings: {}", e)
        return JSONResponse(status_code=500, content={"error": "Invalid engine settings"})
    root = create_tree(snapshot, max_depth=settings.max_depth, min_size=settings.min_size)
    return {
        "tree": serialize_tree(root),
        "visual": visualize_tree(root, max_depth=settings.max_depth, min_size=settings.min_size),
    }
