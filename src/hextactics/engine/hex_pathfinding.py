"""Hex pathfinding — A* over cost-weighted hex boards.

Shares the blocking model of the movement field (enter costs, edge
blockers, occupancy, zones of control) and adds:
- heuristic tuning: ``heuristic_scale`` times hex distance times
  ``min_step_cost`` (keeps the estimate admissible with fractional costs)
- a tie-break nudge (``tie_break_epsilon``) so that among equal-cost
  candidates the one further along from the start is expanded first
- multi-goal search that stops at the first goal popped
- a hard expansion cap that turns into a failed result, never an exception

Paths step strictly between adjacent hexes; no smoothing is applied.

This module also keeps the plain path helpers (validation, distance,
sub-paths) used on precomputed routes.
"""

from __future__ import annotations

import heapq
import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from hextactics.models.board import EdgePredicate, HexPredicate, MoveCostFn
from hextactics.models.hex import Axial
from hextactics.models.results import PathFailure, PathResult
from hextactics.util.constants import (
    HEURISTIC_SCALE,
    MIN_STEP_COST,
    MIN_STEP_COST_FLOOR,
    TIE_BREAK_EPSILON,
    ZOC_PENALTY,
)
from hextactics.util.hex_math import hex_distance, hex_neighbors

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AStarOptions:
    """Search tuning and blocking rules for A*.

    Attributes:
        heuristic_scale: 1 = classic A*, 0 = Dijkstra, >1 = greedier.
        min_step_cost: Lower bound on a step's cost used by the heuristic.
        tie_break_epsilon: Priority nudge toward more direct candidates.
            Keep it well below the smallest cost difference on the board.
            Closed hexes are never reopened, so costs that differ by less
            than epsilon may give a path up to epsilon per step too dear;
            use 0 there.
        allow_occupied_goal: Let the path end on an occupied goal hex.
        edge_blocker: Transition between two hexes is forbidden.
        is_occupied: Hex is occupied and may not be entered.
        zoc_hexes: Zone-of-control hexes.
        zoc_penalty: Extra cost for entering a ZoC hex.
        stop_on_zoc_enter: Entering a ZoC hex ends movement there.
        node_limit: Maximum number of expansions; None = unbounded.
    """

    heuristic_scale: float = HEURISTIC_SCALE
    min_step_cost: float = MIN_STEP_COST
    tie_break_epsilon: float = TIE_BREAK_EPSILON
    allow_occupied_goal: bool = False
    edge_blocker: Optional[EdgePredicate] = None
    is_occupied: Optional[HexPredicate] = None
    zoc_hexes: frozenset[Axial] = field(default_factory=frozenset)
    zoc_penalty: float = ZOC_PENALTY
    stop_on_zoc_enter: bool = False
    node_limit: Optional[int] = None


def _search(
    start: Axial,
    goals: frozenset[Axial],
    heuristic: Callable[[Axial], float],
    cost_fn: MoveCostFn,
    opts: AStarOptions,
) -> PathResult:
    """A* core shared by the single- and multi-goal searches."""
    if start in goals:
        return PathResult(path=(start,), cost=0.0, success=True, visited=1, goal=start)

    scale = opts.heuristic_scale * max(MIN_STEP_COST_FLOOR, opts.min_step_cost)
    eps = opts.tie_break_epsilon

    def estimate(h: Axial) -> float:
        return heuristic(h) * scale

    g_costs: dict[Axial, float] = {start: 0.0}
    parents: dict[Axial, Axial] = {}
    sealed: set[Axial] = set()
    closed: set[Axial] = set()

    counter = 0
    h0 = estimate(start)
    open_set: list[tuple[float, float, int, Axial]] = [(h0, h0, counter, start)]
    visited = 1
    expanded = 0

    while open_set:
        _, _, _, current = heapq.heappop(open_set)
        if current in closed:
            continue

        if opts.node_limit is not None and expanded >= opts.node_limit:
            log.debug("A* from %r hit node limit %d", start, opts.node_limit)
            return PathResult.failure(PathFailure.NODE_LIMIT, visited, expanded)

        closed.add(current)
        expanded += 1

        if current in goals:
            path = _reconstruct_path(parents, start, current)
            return PathResult(
                path=tuple(path),
                cost=g_costs[current],
                success=True,
                visited=visited,
                expanded=expanded,
                goal=current,
            )

        if current in sealed:
            continue

        g_current = g_costs[current]
        for nb in hex_neighbors(current):
            if nb in closed:
                continue
            if opts.edge_blocker is not None and opts.edge_blocker(current, nb):
                continue
            if opts.is_occupied is not None and opts.is_occupied(nb):
                if not (opts.allow_occupied_goal and nb in goals):
                    continue

            step_cost = cost_fn(nb)
            if not math.isfinite(step_cost) or step_cost < 0:
                continue

            in_zoc = nb in opts.zoc_hexes
            tentative_g = g_current + step_cost + (opts.zoc_penalty if in_zoc else 0.0)

            if nb in g_costs and tentative_g >= g_costs[nb]:
                continue

            g_costs[nb] = tentative_g
            parents[nb] = current
            if in_zoc and opts.stop_on_zoc_enter:
                sealed.add(nb)

            h = estimate(nb)
            priority = tentative_g + h - eps * hex_distance(start, nb)
            counter += 1
            heapq.heappush(open_set, (priority, h, counter, nb))
            visited += 1

    return PathResult.failure(PathFailure.NO_PATH, visited, expanded)


def a_star(
    start: Axial,
    goal: Axial,
    cost_fn: MoveCostFn,
    opts: Optional[AStarOptions] = None,
) -> PathResult:
    """Find the cheapest path from `start` to `goal`.

    Args:
        start: Starting hex.
        goal: Target hex.
        cost_fn: Cost to enter a hex (non-finite or negative = impassable).
        opts: Search tuning and blocking rules.

    Returns:
        PathResult; ``success`` is False with an empty path when no route
        exists or the node limit was reached.
    """
    opts = opts or AStarOptions()
    return _search(start, frozenset((goal,)), lambda h: hex_distance(h, goal), cost_fn, opts)


def a_star_to_any(
    start: Axial,
    goals: Iterable[Axial],
    cost_fn: MoveCostFn,
    opts: Optional[AStarOptions] = None,
) -> PathResult:
    """Find the cheapest path from `start` to the nearest of several goals.

    The heuristic is the distance to the closest goal; the search stops on
    the first goal popped, which ``PathResult.goal`` reports.
    """
    opts = opts or AStarOptions()
    goal_set = frozenset(goals)
    if not goal_set:
        return PathResult.failure(PathFailure.BLOCKED)
    goal_list = list(goal_set)

    def nearest(h: Axial) -> float:
        return min(hex_distance(h, g) for g in goal_list)

    return _search(start, goal_set, nearest, cost_fn, opts)


def a_star_uniform(
    start: Axial,
    goal: Axial,
    is_passable: HexPredicate,
    opts: Optional[AStarOptions] = None,
) -> PathResult:
    """A* where every passable hex costs 1."""
    return a_star(start, goal, lambda h: 1.0 if is_passable(h) else math.inf, opts)


def _reconstruct_path(parents: dict[Axial, Axial], start: Axial, goal: Axial) -> list[Axial]:
    path = [goal]
    current = goal
    while current != start:
        current = parents[current]
        path.append(current)
    path.reverse()
    return path


# -- Path helpers --------------------------------------------------------

def validate_path(path: list[Axial]) -> bool:
    """Check that each consecutive pair in the path are hex neighbors.

    Args:
        path: Ordered list of hex coordinates.

    Returns:
        True if the path is valid (all steps are between neighbors).
    """
    if len(path) < 2:
        return True
    return all(hex_distance(path[i], path[i + 1]) == 1 for i in range(len(path) - 1))


def path_cost(path: list[Axial], cost_fn: MoveCostFn) -> float:
    """Total enter cost of walking `path` (the start hex is free)."""
    return sum(cost_fn(h) for h in path[1:])


def path_distance(path: list[Axial]) -> int:
    """Return the number of steps in a path (len - 1)."""
    return max(0, len(path) - 1)


def sub_path_from(path: list[Axial], start_index: int) -> list[Axial]:
    """Extract a sub-path starting from a given index.

    Args:
        path: The full path.
        start_index: Index to start from (clamped to valid range).

    Returns:
        Sub-path from start_index to the end.
    """
    start_index = max(0, min(start_index, len(path) - 1))
    return path[start_index:]


def next_step(result: PathResult) -> Optional[Axial]:
    """First hex to move into, or None when already there or no path."""
    if len(result.path) < 2:
        return None
    return result.path[1]
