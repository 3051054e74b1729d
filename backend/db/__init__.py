"""
Database Module
File-based task store: {db_dir}/tasks.json holds a flat list of task dicts linked by parentId,
{db_dir}/settings.json holds engine settings.
Uses orjson for JSON, aiofiles for IO, json_repair as fallback for corrupted files.

TaskRepository is an explicit object passed to whoever needs it (API layer, tests);
there is no module-level task map.
"""

import asyncio
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import aiofiles
import json_repair
import orjson
from loguru import logger

from shared.graph import cycle_task_ids, get_descendant_ids, has_parent_cycle, nest_tasks, would_create_cycle
from shared.utils import TASK_STATUSES, now_iso

DB_DIR = Path(os.environ.get("ROADMAPPER_DB_DIR") or Path(__file__).parent)
TASKS_FILE = "tasks.json"
SETTINGS_FILE = "settings.json"
REQUIRED_FIELDS = ("id", "title", "status")

DEFAULT_TASKS = [
    {
        "id": "demo-1",
        "title": "Welcome to FocusAR",
        "description": "This is a demo task to help you get started with FocusAR Roadmapper. Try adding your own tasks!",
        "status": "Not Started",
    }
]

Listener = Callable[[List[Dict[str, Any]]], Any]


class TaskValidationError(ValueError):
    """Task data failed store validation."""


class TaskNotFoundError(KeyError):
    """No task with the requested id."""

    def __str__(self) -> str:
        return f"Task not found: {self.args[0]}" if self.args else "Task not found"


async def _read_json(file_path: Path) -> Any:
    """Read JSON with json_repair fallback. Missing file -> None."""
    try:
        async with aiofiles.open(file_path, "rb") as f:
            raw = await f.read()
    except FileNotFoundError:
        return None
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        logger.warning("Invalid JSON in {}: {}", file_path, e)
        try:
            return json_repair.loads(raw.decode("utf-8", errors="replace"))
        except Exception as repair_err:
            logger.warning("Could not repair {}: {}", file_path, repair_err)
            return None


async def _write_json(file_path: Path, data: Any) -> None:
    """Atomic write: write to .tmp then rename to avoid partial/corrupt files."""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
    content = orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")
    async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
        await f.write(content)
    tmp_path.replace(file_path)


class TaskRepository:
    """Durable task collection with get/list/upsert/delete/subscribe."""

    def __init__(self, db_dir: Union[str, Path, None] = None):
        self.db_dir = Path(db_dir) if db_dir is not None else DB_DIR
        self._tasks: Dict[str, Dict[str, Any]] = {}
        self._listeners: List[Listener] = []
        self._lock = asyncio.Lock()

    @property
    def tasks_path(self) -> Path:
        return self.db_dir / TASKS_FILE

    @property
    def settings_path(self) -> Path:
        return self.db_dir / SETTINGS_FILE

    # ---------------------------------------------------------------------
    # Loading / saving
    # ---------------------------------------------------------------------

    async def load(self) -> List[Dict[str, Any]]:
        data = await _read_json(self.tasks_path)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("Ignoring non-list task data in {}", self.tasks_path)
            data = []
        tasks = [t for t in data if isinstance(t, dict) and t.get("id")]
        looped = cycle_task_ids(tasks)
        for t in tasks:
            if t["id"] in looped:
                logger.warning("Detaching task {} from looped parent {}", t["id"], t["parentId"])
                t.pop("parentId")
        self._tasks = {t["id"]: t for t in tasks}
        return self.list()

    async def initialize(self) -> None:
        """Load from disk; seed the demo task if the store is empty."""
        tasks = await self.load()
        if not tasks:
            logger.info("Task store empty, seeding default tasks")
            await self.import_tasks(orjson.dumps(DEFAULT_TASKS).decode("utf-8"))

    async def _save(self) -> None:
        await _write_json(self.tasks_path, self.list())
        self._notify()

    # ---------------------------------------------------------------------
    # Queries
    # ---------------------------------------------------------------------

    def get(self, task_id: str) -> Optional[Dict[str, Any]]:
        return self._tasks.get(task_id)

    def list(self) -> List[Dict[str, Any]]:
        return list(self._tasks.values())

    def list_children(self, parent_id: str) -> List[Dict[str, Any]]:
        return [t for t in self._tasks.values() if t.get("parentId") == parent_id]

    def get_tree(self, task_id: str) -> Optional[Dict[str, Any]]:
        """Nested snapshot (task with recursive subtasks) for layout and analysis."""
        return nest_tasks(self.list(), task_id)

    # ---------------------------------------------------------------------
    # Validation
    # ---------------------------------------------------------------------

    def validate(self, task: Dict[str, Any], known_ids: Optional[set] = None) -> None:
        """
        Raise TaskValidationError unless task has the required fields, a valid status
        and a known parent that is not itself. Fields must be present; an empty title
        is allowed, an empty id is not.

        With known_ids (batch validation) the parent only has to be among those ids;
        callers check cycles across the batch themselves.
        """
        if not isinstance(task, dict):
            raise TaskValidationError("Task must be an object")
        missing = [f for f in REQUIRED_FIELDS if f not in task]
        if missing:
            raise TaskValidationError(f"Missing required fields: {', '.join(missing)}")
        if not task["id"] or not isinstance(task["id"], str):
            raise TaskValidationError("Task id must be a non-empty string")
        if not isinstance(task["title"], str):
            raise TaskValidationError("Task title must be a string")
        if task["status"] not in TASK_STATUSES:
            raise TaskValidationError(f"Invalid status: {task['status']}")
        parent_id = task.get("parentId")
        if parent_id:
            ids = known_ids if known_ids is not None else set(self._tasks)
            if parent_id not in ids:
                raise TaskValidationError(f"Unknown parent task: {parent_id}")
            if parent_id == task["id"]:
                raise TaskValidationError(f"Task {parent_id} cannot be its own parent")
            if known_ids is None and would_create_cycle(self.list(), task["id"], parent_id):
                raise TaskValidationError(f"Parent {parent_id} would create a cycle")

    # ---------------------------------------------------------------------
    # Mutations
    # ---------------------------------------------------------------------

    async def add(self, task: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            self.validate(task)
            stored = {k: v for k, v in task.items() if k != "subtasks"}
            stored["created"] = now_iso()
            self._tasks[stored["id"]] = stored
            await self._save()
            return stored

    async def update(self, task_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            current = self._tasks.get(task_id)
            if current is None:
                raise TaskNotFoundError(task_id)
            merged = {**current, **{k: v for k, v in updates.items() if k not in ("id", "subtasks")}}
            self.validate(merged)
            self._tasks[task_id] = merged
            await self._save()
            return merged

    async def upsert(self, task: Dict[str, Any]) -> Dict[str, Any]:
        if task.get("id") in self._tasks:
            return await self.update(task["id"], task)
        return await self.add(task)

    async def add_many(self, tasks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Add new tasks in one save. Parents may be earlier entries of the batch;
        an id already stored or repeated in the batch is rejected.
        """
        async with self._lock:
            known = set(self._tasks)
            stored = []
            for task in tasks:
                self.validate(task, known)
                if task["id"] in known:
                    raise TaskValidationError(f"Task already exists: {task['id']}")
                known.add(task["id"])
                stored.append({**{k: v for k, v in task.items() if k != "subtasks"}, "created": task.get("created") or now_iso()})
            for t in stored:
                self._tasks[t["id"]] = t
            await self._save()
            return stored

    async def delete(self, task_id: str) -> List[str]:
        """Delete task and all of its descendants. Returns removed ids."""
        async with self._lock:
            if task_id not in self._tasks:
                raise TaskNotFoundError(task_id)
            removed = get_descendant_ids(self.list(), task_id) + [task_id]
            for tid in removed:
                self._tasks.pop(tid, None)
            await self._save()
            return removed

    async def clear(self) -> None:
        async with self._lock:
            self._tasks.clear()
            await self._save()

    # ---------------------------------------------------------------------
    # Import / export
    # ---------------------------------------------------------------------

    def export_tasks(self) -> str:
        return orjson.dumps(self.list(), option=orjson.OPT_INDENT_2).decode("utf-8")

    async def import_tasks(self, data: Union[str, bytes]) -> List[Dict[str, Any]]:
        """Replace the whole store with data. Nothing changes unless every task validates."""
        try:
            tasks = orjson.loads(data)
        except orjson.JSONDecodeError as e:
            raise TaskValidationError(f"Invalid task JSON: {e}") from e
        if not isinstance(tasks, list):
            raise TaskValidationError("Imported data must be a list of tasks")
        ids = {t.get("id") for t in tasks if isinstance(t, dict)}
        for t in tasks:
            self.validate(t, ids)
        if len(ids) != len(tasks):
            raise TaskValidationError("Imported tasks contain duplicate ids")
        if has_parent_cycle(tasks):
            raise TaskValidationError("Imported tasks contain a parent cycle")
        async with self._lock:
            self._tasks = {t["id"]: {**t, "created": t.get("created") or now_iso()} for t in tasks}
            await self._save()
        return self.list()

    # ---------------------------------------------------------------------
    # Listeners
    # ---------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        tasks = self.list()
        for listener in list(self._listeners):
            try:
                listener(tasks)
            except Exception:
                logger.exception("Task listener failed")

    # ---------------------------------------------------------------------
    # Settings
    # ---------------------------------------------------------------------

    async def get_settings(self) -> dict:
        data = await _read_json(self.settings_path)
        return data if isinstance(data, dict) else {}

    async def save_settings(self, settings: dict) -> dict:
        await _write_json(self.settings_path, settings or {})
        return {"success": True}
