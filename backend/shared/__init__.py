"""Shared utilities for layout, planner, db and api."""

from .graph import build_hierarchy_graph, build_layout_graph, nest_tasks
from .utils import TASK_STATUSES, new_task_id, now_iso

__all__ = ["TASK_STATUSES", "build_hierarchy_graph", "build_layout_graph", "nest_tasks", "new_task_id", "now_iso"]
