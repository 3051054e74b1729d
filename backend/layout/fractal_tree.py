"""
Fractal tree layout for a nested task hierarchy.

Two passes:
  1. build: attach one LayoutNode per subtask (source order), scoring each node
  2. relayout: single top-down traversal placing children on a ring below the parent

Ring rule: n children are evenly spaced (2π/n) on a horizontal circle of radius
max(0.5, n * 0.2), one RING_DROP below the parent. Positions are a pure function
of task data, depth and the configured constants.
"""

import math
from typing import Any, Dict, List, Optional

from loguru import logger

from .constants import (
    COMPLEXITY_MAX,
    COMPLEXITY_MIN,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIN_SIZE,
    RING_DROP,
    RING_MIN_RADIUS,
    RING_RADIUS_STEP,
    ROOT_ANCHOR,
    SIZE_DEPTH_DECAY,
)


class LayoutNode:
    """Ephemeral tree node pairing a source task with depth, complexity, position and size."""

    __slots__ = ("task", "depth", "children", "complexity", "position", "size")

    def __init__(self, task: Dict[str, Any], depth: int = 0, min_size: float = DEFAULT_MIN_SIZE):
        self.task = task
        self.depth = depth
        self.children: List["LayoutNode"] = []
        self.complexity = score_complexity(task)
        self.position = {"x": 0.0, "y": 0.0, "z": 0.0}
        self.size = compute_size(depth, self.complexity, min_size)

    @property
    def task_id(self) -> Optional[str]:
        return self.task.get("id")

    def add_child(self, child: "LayoutNode") -> None:
        add_child(self, child)

    def iter_nodes(self):
        """Depth-first pre-order over this subtree."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def __repr__(self) -> str:
        return f"LayoutNode(id={self.task_id!r}, depth={self.depth}, children={len(self.children)})"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def score_complexity(task: Dict[str, Any]) -> float:
    """Per-node score: 1 + description length/100 (max 5) + immediate subtask count, in [1, 10]."""
    score = 1.0
    description = task.get("description")
    if description:
        score += min(5.0, len(description) / 100)
    subtasks = task.get("subtasks")
    if subtasks:
        score += len(subtasks)
    return _clamp(score, COMPLEXITY_MIN, COMPLEXITY_MAX)


def compute_size(depth: int, complexity: float, min_size: float = DEFAULT_MIN_SIZE) -> float:
    return max(min_size, SIZE_DEPTH_DECAY ** depth * (0.5 + complexity / 20))


def add_child(node: LayoutNode, child: LayoutNode) -> None:
    """Attach only. Positions are assigned by relayout once the tree is complete."""
    node.children.append(child)


def ring_radius(count: int) -> float:
    return max(RING_MIN_RADIUS, count * RING_RADIUS_STEP)


def relayout(node: LayoutNode) -> None:
    """Place children of node on a ring below it, then cascade to every descendant."""
    stack = [node]
    while stack:
        current = stack.pop()
        n = len(current.children)
        if n == 0:
            continue
        angle_step = 2 * math.pi / n
        radius = ring_radius(n)
        origin = current.position
        for idx, child in enumerate(current.children):
            angle = idx * angle_step
            child.position = {
                "x": origin["x"] + math.cos(angle) * radius,
                "y": origin["y"] - RING_DROP,
                "z": origin["z"] + math.sin(angle) * radius,
            }
        stack.extend(reversed(current.children))


def _build_node(
    task: Dict[str, Any],
    depth: int,
    max_depth: int,
    min_size: float,
) -> LayoutNode:
    node = LayoutNode(task, depth, min_size)
    subtasks = task.get("subtasks") or []
    if depth < max_depth and subtasks:
        for subtask in subtasks:
            add_child(node, _build_node(subtask, depth + 1, max_depth, min_size))
    return node


def build_tree(
    task: Dict[str, Any],
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
    min_size: float = DEFAULT_MIN_SIZE,
) -> LayoutNode:
    """
    Build the LayoutNode subtree for task at depth. Subtasks below max_depth are
    not descended into. Descendants are laid out relative to the returned node.
    """
    node = _build_node(task, depth, max_depth, min_size)
    relayout(node)
    return node


def create_tree(
    task: Dict[str, Any],
    max_depth: int = DEFAULT_MAX_DEPTH,
    min_size: float = DEFAULT_MIN_SIZE,
) -> LayoutNode:
    """Entry point: build from depth 0, anchor the root, lay out the whole tree once."""
    root = _build_node(task, 0, max_depth, min_size)
    root.position = dict(ROOT_ANCHOR)
    relayout(root)
    logger.debug(
        "Built fractal tree for task {}: {} nodes (max_depth={})",
        root.task_id, sum(1 for _ in root.iter_nodes()), max_depth,
    )
    return root


def serialize_tree(node: LayoutNode) -> Dict[str, Any]:
    """JSON-ready nested dict of the layout tree (source task fields minus subtasks)."""
    task = {k: v for k, v in node.task.items() if k != "subtasks"}
    return {
        "id": node.task_id,
        "task": task,
        "depth": node.depth,
        "complexity": node.complexity,
        "size": node.size,
        "position": dict(node.position),
        "children": [serialize_tree(c) for c in node.children],
    }
