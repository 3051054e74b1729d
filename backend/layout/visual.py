"""
Visual properties derived from a laid-out fractal tree: size, color, connections.
All functions are pure; nothing here mutates a LayoutNode.
"""

from typing import Any, Dict, List

from shared.graph import build_layout_graph

from .constants import (
    CONNECTION_MAX_STRENGTH,
    CONNECTION_MIN_STRENGTH,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MIN_SIZE,
    DEFAULT_STATUS,
    STATUS_COLORS,
)
from .fractal_tree import LayoutNode, compute_size


def node_size(node: LayoutNode, min_size: float = DEFAULT_MIN_SIZE) -> float:
    return compute_size(node.depth, node.complexity, min_size)


def node_color(node: LayoutNode) -> Dict[str, float]:
    """Status base color scaled by 0.5 + complexity/20, each channel capped at 255."""
    status = node.task.get("status") or DEFAULT_STATUS
    base = STATUS_COLORS.get(status, STATUS_COLORS[DEFAULT_STATUS])
    intensity = 0.5 + node.complexity / 20
    return {channel: min(255, value * intensity) for channel, value in base.items()}


def connection_strength(
    parent: LayoutNode,
    child: LayoutNode,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> float:
    depth_factor = 1 - child.depth / max_depth
    complexity_factor = (parent.complexity + child.complexity) / 20
    return max(CONNECTION_MIN_STRENGTH, min(CONNECTION_MAX_STRENGTH, depth_factor * complexity_factor))


def collect_connections(node: LayoutNode, max_depth: int = DEFAULT_MAX_DEPTH) -> List[Dict[str, Any]]:
    """
    One connection per parent->child edge in the subtree, depth-first:
    each edge is emitted before the edges below that child.
    """
    connections: List[Dict[str, Any]] = []
    for child in node.children:
        connections.append({
            "from": dict(node.position),
            "to": dict(child.position),
            "strength": connection_strength(node, child, max_depth),
        })
        connections.extend(collect_connections(child, max_depth))
    return connections


def visualize(
    node: LayoutNode,
    max_depth: int = DEFAULT_MAX_DEPTH,
    min_size: float = DEFAULT_MIN_SIZE,
) -> Dict[str, Any]:
    """
    Visual bundle for one node. connections covers the whole subtree rooted at
    node, so calling this for every node of a tree repeats edges; use
    visualize_tree to render a full tree.
    """
    return {
        "size": node_size(node, min_size),
        "color": node_color(node),
        "position": dict(node.position),
        "connections": collect_connections(node, max_depth),
    }


def visualize_tree(
    root: LayoutNode,
    max_depth: int = DEFAULT_MAX_DEPTH,
    min_size: float = DEFAULT_MIN_SIZE,
) -> Dict[str, Any]:
    """
    Whole-tree visualization with each distinct parent->child pair emitted once.
    Returns {nodes: {key: {taskId, size, color, position, depth, complexity}}, edges: [...]}.
    Keys are task ids; a repeated id at a different position gets a "#n" suffix.
    """
    G = build_layout_graph(root)
    nodes_out: Dict[str, Dict[str, Any]] = {}
    for nid, data in G.nodes(data=True):
        node = data["node"]
        nodes_out[nid] = {
            "taskId": node.task_id,
            "size": node_size(node, min_size),
            "color": node_color(node),
            "position": dict(node.position),
            "depth": node.depth,
            "complexity": node.complexity,
        }

    edges_out = []
    for src, dst in G.edges():
        parent = G.nodes[src]["node"]
        child = G.nodes[dst]["node"]
        edges_out.append({
            "from": dict(parent.position),
            "to": dict(child.position),
            "fromId": src,
            "toId": dst,
            "strength": connection_strength(parent, child, max_depth),
        })

    return {"nodes": nodes_out, "edges": edges_out}
