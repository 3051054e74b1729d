"""
Graph utilities for the task hierarchy (parentId links) and the layout tree.
Shared by the task store (validation, cascade delete, nesting) and layout (edge dedup).
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import networkx as nx

if TYPE_CHECKING:
    from layout.fractal_tree import LayoutNode


def build_hierarchy_graph(tasks: List[Dict[str, Any]]) -> nx.DiGraph:
    """
    Build parent -> child graph from flat tasks. Edges to unknown parents are skipped;
    a task naming itself as parent becomes a self-loop.
    """
    ids = {t["id"] for t in (tasks or []) if t.get("id")}
    G = nx.DiGraph()
    for t in tasks or []:
        tid = t.get("id")
        if not tid:
            continue
        G.add_node(tid)
        parent = t.get("parentId")
        if parent and parent in ids:
            G.add_edge(parent, tid)
    return G


def has_parent_cycle(tasks: List[Dict[str, Any]]) -> bool:
    """True if the parentId links among tasks form a loop."""
    return not nx.is_directed_acyclic_graph(build_hierarchy_graph(tasks))


def cycle_task_ids(tasks: List[Dict[str, Any]]) -> set:
    """Ids of every task whose parentId chain loops back on itself, self-parented tasks included."""
    G = build_hierarchy_graph(tasks)
    looped = set(nx.nodes_with_selfloops(G))
    for component in nx.strongly_connected_components(G):
        if len(component) > 1:
            looped.update(component)
    return looped


def get_descendant_ids(tasks: List[Dict[str, Any]], task_id: str) -> List[str]:
    """All task ids below task_id in the hierarchy (not including task_id)."""
    G = build_hierarchy_graph(tasks)
    if task_id not in G:
        return []
    return list(nx.descendants(G, task_id))


def would_create_cycle(tasks: List[Dict[str, Any]], task_id: str, parent_id: Optional[str]) -> bool:
    """True if making parent_id the parent of task_id closes a loop."""
    if not parent_id:
        return False
    if parent_id == task_id:
        return True
    return parent_id in get_descendant_ids(tasks, task_id)


def nest_tasks(tasks: List[Dict[str, Any]], root_id: str) -> Optional[Dict[str, Any]]:
    """
    Nested snapshot of the subtree at root_id: each task copy gets a `subtasks`
    list built from parentId links, children in store order. Returns None if
    root_id is unknown.
    """
    by_id = {t["id"]: t for t in tasks or [] if t.get("id")}
    if root_id not in by_id:
        return None
    G = build_hierarchy_graph(tasks)

    def _nest(tid: str, seen: set) -> Dict[str, Any]:
        seen.add(tid)
        node = {**by_id[tid]}
        node["subtasks"] = [_nest(c, seen) for c in G.successors(tid) if c not in seen]
        return node

    return _nest(root_id, set())


def build_layout_graph(root: "LayoutNode") -> nx.DiGraph:
    """
    Parent -> child graph of a layout tree; node attribute `node` holds the LayoutNode.

    The first LayoutNode seen for a task id is keyed by that id. Another LayoutNode
    with the same id reuses the key only when it sits at the same position;
    otherwise it is keyed "<id>#2", "<id>#3", ... so every edge keeps the
    geometry of the nodes it joins. Repeated parent/child key pairs collapse
    to a single edge.
    """
    G = nx.DiGraph()
    keys: Dict[int, str] = {}
    counter = 0

    def _key(node: "LayoutNode") -> str:
        nonlocal counter
        k = keys.get(id(node))
        if k is not None:
            return k
        tid = node.task_id
        if tid is None:
            counter += 1
            base = f"__n{counter}"
        else:
            base = str(tid)
        k, n = base, 1
        while k in G and G.nodes[k]["node"].position != node.position:
            n += 1
            k = f"{base}#{n}"
        if k not in G:
            G.add_node(k, node=node)
        keys[id(node)] = k
        return k

    stack = [root]
    _key(root)
    while stack:
        current = stack.pop()
        src = keys[id(current)]
        for child in current.children:
            G.add_edge(src, _key(child))
        stack.extend(reversed(current.children))
    return G
