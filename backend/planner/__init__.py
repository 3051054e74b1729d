"""Planner module - heuristic task decomposition suggestions."""

from .decomposition import (
    STRATEGY_CORE_COMPONENTS,
    STRATEGY_DEFAULT,
    STRATEGY_FEATURE_BREAKDOWN,
    analyze_complexity,
    classify_strategy,
    identify_patterns,
    suggest_decomposition,
)
from .text_analysis import extract_features, text_complexity

__all__ = [
    "STRATEGY_CORE_COMPONENTS",
    "STRATEGY_DEFAULT",
    "STRATEGY_FEATURE_BREAKDOWN",
    "analyze_complexity",
    "classify_strategy",
    "extract_features",
    "identify_patterns",
    "suggest_decomposition",
    "text_complexity",
]
