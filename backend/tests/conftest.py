"""Shared fixtures and task factories."""

import pytest

from db import TaskRepository


def make_task(task_id, title=None, description=None, status="Not Started", subtasks=None, **extra):
    task = {"id": task_id, "title": title or f"Task {task_id}", "status": status}
    if description is not None:
        task["description"] = description
    if subtasks is not None:
        task["subtasks"] = subtasks
    task.update(extra)
    return task


def make_chain(length, prefix="n"):
    """Nested task chain: each task has exactly one subtask, `length` tasks total."""
    node = make_task(f"{prefix}{length - 1}")
    for i in range(length - 2, -1, -1):
        node = make_task(f"{prefix}{i}", subtasks=[node])
    return node


@pytest.fixture
def repo(tmp_path):
    return TaskRepository(tmp_path)
