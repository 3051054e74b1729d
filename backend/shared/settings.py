"""
Engine settings: layout constants -> settings.json -> ROADMAPPER_* env overrides.
"""

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from layout.constants import DEFAULT_MAX_DEPTH, DEFAULT_MIN_SIZE


def _float_env(name: str) -> Optional[float]:
    v = os.environ.get(name)
    return float(v) if v is not None else None


def _int_env(name: str) -> Optional[int]:
    v = os.environ.get(name)
    return int(v) if v is not None else None


class EngineSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, alias="maxDepth")
    min_size: float = Field(default=DEFAULT_MIN_SIZE, gt=0, alias="minSize")


def resolve_engine_settings(raw: Optional[Dict[str, Any]] = None) -> EngineSettings:
    """Resolve effective layout settings from raw settings.json contents and environment."""
    raw = raw or {}
    values: Dict[str, Any] = {}
    for key in ("maxDepth", "minSize"):
        if raw.get(key) is not None:
            values[key] = raw[key]
    env_depth = _int_env("ROADMAPPER_MAX_DEPTH")
    if env_depth is not None:
        values["maxDepth"] = env_depth
    env_size = _float_env("ROADMAPPER_MIN_SIZE")
    if env_size is not None:
        values["minSize"] = env_size
    return EngineSettings(**values)
