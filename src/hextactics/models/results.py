"""Result values returned by the tactical queries.

Every value here is built fresh per call and never mutated by the engine
after it is returned.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from hextactics.models.hex import Axial


class StepKind(Enum):
    """Role of a hex along a traced ray."""

    START = "start"
    MID = "mid"
    TARGET = "target"


class BlockedBy(Enum):
    """First cause that blocked a ray."""

    NONE = "none"
    TILE = "tile"
    EDGE = "edge"
    ELEVATION = "elevation"


class PathFailure(Enum):
    """Why a path search came back empty."""

    NO_PATH = "no-path"
    NODE_LIMIT = "node-limit"
    BLOCKED = "blocked"


# -- Line of sight -------------------------------------------------------

@dataclass(frozen=True)
class RayStep:
    """One hex along a traced line.

    Attributes:
        hex: Coordinate of this step.
        index: Position along the inclusive line (0 = start).
        kind: START, MID or TARGET.
        elevation: Terrain height reading, None when unknown or not sampled.
        soft_cover: Clamped cover contribution (MID steps only, else 0).
        blocked_tile: The hex itself is opaque.
        blocked_edge: The edge entering this hex is opaque.
        blocked_elevation: The terrain rises above the sight line here.
    """

    hex: Axial
    index: int
    kind: StepKind
    elevation: Optional[float] = None
    soft_cover: float = 0.0
    blocked_tile: bool = False
    blocked_edge: bool = False
    blocked_elevation: bool = False

    @property
    def blocked(self) -> bool:
        return self.blocked_tile or self.blocked_edge or self.blocked_elevation


@dataclass(frozen=True)
class RayTrace:
    """Outcome of tracing a ray between two hexes."""

    steps: tuple[RayStep, ...]
    clear: bool
    blocked_by: BlockedBy = BlockedBy.NONE
    cover_sum: float = 0.0
    cover_penalty: float = 0.0

    @property
    def mid_steps(self) -> list[RayStep]:
        return [s for s in self.steps if s.kind is StepKind.MID]


@dataclass(frozen=True)
class CoverResult:
    """Compact cover/LOS read for combat resolution."""

    clear: bool
    penalty: float
    sum: float
    blocked_by: BlockedBy = BlockedBy.NONE
    steps: Optional[tuple[RayStep, ...]] = None


# -- Movement ------------------------------------------------------------

@dataclass(frozen=True)
class MoveNode:
    """A hex recorded by the movement search.

    Attributes:
        pos: Hex coordinate.
        cost: Total movement spent to reach it.
        parent: Previous hex on the cheapest known route (None for the origin).
        sealed: Entered a zone of control; never expanded further.
    """

    pos: Axial
    cost: float
    parent: Optional[Axial] = None
    sealed: bool = False


@dataclass(frozen=True)
class MovementField:
    """All hexes reachable from an origin within a movement budget.

    Attributes:
        origin: Start hex (always present at cost 0).
        budget: Movement budget the field was computed for.
        nodes: Recorded hexes keyed by coordinate (read-only view).
        truncated: The node limit stopped the search early.
    """

    origin: Axial
    budget: float
    nodes: Mapping[Axial, MoveNode] = field(default_factory=dict)
    truncated: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    @property
    def costs(self) -> dict[Axial, float]:
        return {pos: node.cost for pos, node in self.nodes.items()}

    @property
    def reachable(self) -> set[Axial]:
        return set(self.nodes)

    def cost_to(self, target: Axial) -> float:
        """Cost of reaching target, ``math.inf`` when unreachable."""
        node = self.nodes.get(target)
        return node.cost if node is not None else math.inf

    def __contains__(self, target: object) -> bool:
        return target in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)


# -- Pathfinding ---------------------------------------------------------

@dataclass(frozen=True)
class PathResult:
    """Outcome of a path search.

    Attributes:
        path: Hexes from start to goal inclusive; empty on failure.
        cost: Total path cost; ``math.inf`` on failure.
        success: True when a goal was reached.
        visited: Number of node records pushed to the open set.
        expanded: Number of nodes popped and expanded.
        reason: Failure cause, None on success.
        goal: The goal actually reached (useful for multi-goal searches).
    """

    path: tuple[Axial, ...] = ()
    cost: float = math.inf
    success: bool = False
    visited: int = 0
    expanded: int = 0
    reason: Optional[PathFailure] = None
    goal: Optional[Axial] = None

    @classmethod
    def failure(cls, reason: PathFailure, visited: int = 0, expanded: int = 0) -> PathResult:
        return cls(visited=visited, expanded=expanded, reason=reason)

    @property
    def steps(self) -> int:
        """Number of hex steps along the path (len - 1)."""
        return max(0, len(self.path) - 1)
