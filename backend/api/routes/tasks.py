"""Task API - list, get, create, update, delete, children, import/export."""

import orjson
from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse, Response
from loguru import logger

from db import TaskNotFoundError, TaskValidationError
from shared.utils import new_task_id

from ..schemas import TaskCreateRequest, TaskUpdateRequest
from .. import state as api_state

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("")
async def list_tasks():
    return {"tasks": api_state.repository.list()}


@router.delete("")
async def clear_tasks():
    try:
        await api_state.repository.clear()
        return {"success": True}
    except Exception as e:
        logger.exception("Error clearing tasks")
        return _error(500, str(e) or "Failed to clear tasks")


@router.get("/export")
async def export_tasks():
    return Response(content=api_state.repository.export_tasks(), media_type="application/json")


@router.post("/import")
async def import_tasks(body: list = Body(...)):
    try:
        tasks = await api_state.repository.import_tasks(orjson.dumps(body))
        return {"success": True, "count": len(tasks)}
    except TaskValidationError as e:
        return _error(400, str(e))
    except Exception as e:
        logger.exception("Error importing tasks")
        return _error(500, str(e) or "Failed to import tasks")


@router.post("")
async def create_task(body: TaskCreateRequest):
    repo = api_state.repository
    task = body.model_dump(by_alias=True, exclude_none=True)
    task["id"] = task.get("id") or new_task_id(t["id"] for t in repo.list())
    if repo.get(task["id"]) is not None:
        return _error(409, f"Task already exists: {task['id']}")
    try:
        stored = await repo.add(task)
        return {"task": stored}
    except TaskValidationError as e:
        return _error(400, str(e))
    except Exception as e:
        logger.exception("Error adding task")
        return _error(500, str(e) or "Failed to add task")


@router.get("/{task_id}")
async def get_task(task_id: str):
    task = api_state.repository.get(task_id)
    if task is None:
        return _error(404, f"Task not found: {task_id}")
    return {"task": task}


@router.get("/{task_id}/children")
async def get_children(task_id: str):
    repo = api_state.repository
    if repo.get(task_id) is None:
        return _error(404, f"Task not found: {task_id}")
    return {"tasks": repo.list_children(task_id)}


@router.put("/{task_id}")
async def update_task(task_id: str, body: TaskUpdateRequest):
    updates = body.model_dump(by_alias=True, exclude_unset=True)
    try:
        task = await api_state.repository.update(task_id, updates)
        return {"task": task}
    except TaskNotFoundError as e:
        return _error(404, str(e))
    except TaskValidationError as e:
        return _error(400, str(e))
    except Exception as e:
        logger.exception("Error updating task {}", task_id)
        return _error(500, str(e) or "Failed to update task")


@router.delete("/{task_id}")
async def delete_task(task_id: str):
    try:
        removed = await api_state.repository.delete(task_id)
        return {"success": True, "removed": removed}
    except TaskNotFoundError as e:
        return _error(404, str(e))
    except Exception as e:
        logger.exception("Error deleting task {}", task_id)
        return _error(500, str(e) or "Failed to delete task")
