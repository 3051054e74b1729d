"""
Decomposition advisor - suggests subtask stubs for a task that has none yet.

Strategy resolution (first match wins):
  core-components   -> four fixed phases weighted 0.2 / 0.4 / 0.2 / 0.2
  feature-breakdown -> one stub per feature phrase found in the description
  default           -> clamp(2, 5, ceil(complexity / 2)) equal "Phase N" stubs

The optimization tag is reported by identify_patterns but has no strategy of its
own; it resolves to default.

Stubs are returned, never persisted. The caller decides whether to commit them.
"""

import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from layout.constants import COMPLEXITY_MAX, COMPLEXITY_MIN
from shared.utils import new_task_id, now_iso

from .text_analysis import (
    PATTERN_CORE_COMPONENTS,
    PATTERN_FEATURE_BREAKDOWN,
    extract_features,
    match_patterns,
    text_complexity,
)

STRATEGY_CORE_COMPONENTS = PATTERN_CORE_COMPONENTS
STRATEGY_FEATURE_BREAKDOWN = PATTERN_FEATURE_BREAKDOWN
STRATEGY_DEFAULT = "default"

# Strategies in precedence order
_STRATEGY_PRECEDENCE = (STRATEGY_CORE_COMPONENTS, STRATEGY_FEATURE_BREAKDOWN)

CORE_COMPONENT_PHASES: Tuple[Tuple[str, float], ...] = (
    ("Research & Planning", 0.2),
    ("Core Implementation", 0.4),
    ("Testing & Validation", 0.2),
    ("Documentation", 0.2),
)

MIN_DEFAULT_SUBTASKS = 2
MAX_DEFAULT_SUBTASKS = 5


def analyze_complexity(task: Dict[str, Any]) -> float:
    """
    Recursive score used for decomposition weighting:
    1 + text complexity + subtask count + half of each subtask's own score
    + half the dependency count, in [1, 10].
    """
    score = 1.0
    description = task.get("description")
    if description:
        score += text_complexity(description)
    subtasks = task.get("subtasks")
    if subtasks:
        score += len(subtasks)
        score += sum(analyze_complexity(sub) * 0.5 for sub in subtasks)
    dependencies = task.get("dependencies")
    if dependencies:
        score += len(dependencies) * 0.5
    return max(COMPLEXITY_MIN, min(COMPLEXITY_MAX, score))


def identify_patterns(task: Dict[str, Any]) -> List[str]:
    return match_patterns(task.get("description"))


def classify_strategy(patterns: Iterable[str]) -> str:
    found = set(patterns)
    for strategy in _STRATEGY_PRECEDENCE:
        if strategy in found:
            return strategy
    return STRATEGY_DEFAULT


def default_subtask_count(complexity: float) -> int:
    return max(MIN_DEFAULT_SUBTASKS, min(MAX_DEFAULT_SUBTASKS, math.ceil(complexity / 2)))


def plan_subtasks(task: Dict[str, Any], strategy: str, complexity: float) -> List[Tuple[str, float]]:
    """(title, weight) pairs for the resolved strategy."""
    if strategy == STRATEGY_CORE_COMPONENTS:
        return list(CORE_COMPONENT_PHASES)
    if strategy == STRATEGY_FEATURE_BREAKDOWN:
        features = extract_features(task.get("description"))
        return [(feature, 1.0 / len(features)) for feature in features]
    count = default_subtask_count(complexity)
    return [(f"Phase {i + 1}", 1.0 / count) for i in range(count)]


def create_subtask(
    parent: Dict[str, Any],
    title: str,
    weight: float,
    parent_complexity: float,
    taken_ids: Optional[set] = None,
) -> Dict[str, Any]:
    tid = new_task_id(taken_ids)
    if taken_ids is not None:
        taken_ids.add(tid)
    return {
        "id": tid,
        "title": title,
        "description": f"Part of: {parent.get('title', '')}",
        "status": "Not Started",
        "parentId": parent.get("id"),
        "complexity": parent_complexity * weight,
        "created": now_iso(),
    }


def suggest_decomposition(
    task: Dict[str, Any],
    existing_ids: Optional[Iterable[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Suggested subtask stubs for task, in order. Stub complexities are the parent's
    complexity times each stub's weight, so they sum to the parent's complexity.
    The parent's own `complexity` field is used when present, otherwise the
    analyzed score. existing_ids are avoided when minting stub ids.
    """
    complexity = analyze_complexity(task)
    patterns = identify_patterns(task)
    strategy = classify_strategy(patterns)
    parent_complexity = task.get("complexity")
    if not isinstance(parent_complexity, (int, float)) or isinstance(parent_complexity, bool):
        parent_complexity = complexity

    taken = set(existing_ids or ())
    if task.get("id"):
        taken.add(task["id"])
    stubs = [
        create_subtask(task, title, weight, parent_complexity, taken)
        for title, weight in plan_subtasks(task, strategy, complexity)
    ]
    logger.debug(
        "Decomposition for task {}: strategy={} patterns={} complexity={:.2f} -> {} stubs",
        task.get("id"), strategy, patterns, complexity, len(stubs),
    )
    return stubs
