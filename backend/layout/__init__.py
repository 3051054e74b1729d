"""Layout module - fractal 3D layout and visual properties for task trees."""

from .fractal_tree import (
    LayoutNode,
    add_child,
    build_tree,
    create_tree,
    relayout,
    score_complexity,
    serialize_tree,
)
from .visual import (
    collect_connections,
    connection_strength,
    node_color,
    node_size,
    visualize,
    visualize_tree,
)

__all__ = [
    "LayoutNode",
    "add_child",
    "build_tree",
    "collect_connections",
    "connection_strength",
    "create_tree",
    "node_color",
    "node_size",
    "relayout",
    "score_complexity",
    "serialize_tree",
    "visualize",
    "visualize_tree",
]
