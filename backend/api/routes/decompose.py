"""Decompose API - suggest subtask stubs for a task, optionally committing them."""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from loguru import logger

from db import TaskValidationError
from planner import analyze_complexity, classify_strategy, identify_patterns, suggest_decomposition

from .. import state as api_state

router = APIRouter()


@router.post("/{task_id}")
async def decompose_task(task_id: str, commit: bool = Query(False)):
    repo = api_state.repository
    snapshot = repo.get_tree(task_id)
    if snapshot is None:
        return JSONResponse(status_code=404, content={"error": f"Task not found: {task_id}"})

    patterns = identify_patterns(snapshot)
    subtasks = suggest_decomposition(snapshot, existing_ids=(t["id"] for t in repo.list()))
    if commit:
        try:
            subtasks = await repo.add_many(subtasks)
        except TaskValidationError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})
        except Exception as e:
            logger.exception("Error committing subtasks for {}", task_id)
            return JSONResponse(status_code=500, content={"error": str(e) or "Failed to commit subtasks"})

    return {
        "strategy": classify_strategy(patterns),
        "patterns": patterns,
        "complexity": analyze_complexity(snapshot),
        "subtasks": subtasks,
        "committed": commit,
    }
