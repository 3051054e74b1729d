"""
Layout constants for the fractal task tree.
Shared by tree construction, visual derivation and the API defaults.
"""

# Tree construction stops descending below this depth
DEFAULT_MAX_DEPTH = 5

# Floor for rendered node size
DEFAULT_MIN_SIZE = 0.1

# Root node is anchored here by create_tree
ROOT_ANCHOR = {"x": 0.0, "y": 2.0, "z": 0.0}

# Children sit on a horizontal ring one step below their parent
RING_MIN_RADIUS = 0.5
RING_RADIUS_STEP = 0.2
RING_DROP = 0.5

# Size decays geometrically per level
SIZE_DEPTH_DECAY = 0.8

COMPLEXITY_MIN = 1.0
COMPLEXITY_MAX = 10.0

CONNECTION_MIN_STRENGTH = 0.2
CONNECTION_MAX_STRENGTH = 1.0

DEFAULT_STATUS = "Not Started"

STATUS_COLORS = {
    "Not Started": {"r": 128, "g": 128, "b": 128},
    "In Progress": {"r": 79, "g": 70, "b": 229},
    "Completed": {"r": 34, "g": 197, "b": 94},
    "Blocked": {"r": 239, "g": 68, "b": 68},
}
