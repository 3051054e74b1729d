"""Shared utilities."""

import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

TASK_STATUSES = ("Not Started", "In Progress", "Completed", "Blocked")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_task_id(taken: Optional[Iterable[str]] = None) -> str:
    """Random UUID string not present in taken."""
    taken = set(taken or ())
    while True:
        tid = str(uuid.uuid4())
        if tid not in taken:
            return tid
