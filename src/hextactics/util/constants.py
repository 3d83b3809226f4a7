"""Engine constants — tolerances and tunable defaults.

All magic numbers of the tactical query engine, centralized here.
``EngineConfig`` uses these as its field defaults.
"""

import math

# -- Coordinates ---------------------------------------------------------

CUBE_EPSILON: float = 1e-9
"""Tolerance for the cube invariant x + y + z = 0."""

HEX_SIZE: float = 1.0
"""Hex radius (center to corner) in world units for pixel conversion."""

SQRT3: float = math.sqrt(3.0)

# -- Line of sight -------------------------------------------------------

SOFT_COVER_K: float = 0.7
"""Exponential decay factor turning a soft-cover sum into a penalty."""

MAX_SOFT_COVER: float = 3.0
"""Cap on the accumulated soft-cover sum along one ray."""

# -- Pathfinding ---------------------------------------------------------

HEURISTIC_SCALE: float = 1.0
"""1 = classic A*, 0 = Dijkstra, >1 = greedier search."""

MIN_STEP_COST: float = 1.0
"""Lower bound on a single step's cost, keeps the heuristic admissible."""

MIN_STEP_COST_FLOOR: float = 1e-9
"""Smallest accepted min_step_cost."""

TIE_BREAK_EPSILON: float = 1e-3
"""Priority nudge preferring more direct candidates among equal costs."""

ZOC_PENALTY: float = 0.0
"""Extra cost for entering a zone-of-control hex."""

# -- Search bounds -------------------------------------------------------

MOVEMENT_NODE_LIMIT: int = 10_000
"""Default cap on recorded nodes for a movement field."""

PATH_NODE_LIMIT: int = 20_000
"""Default cap on expanded nodes for an A* search."""
