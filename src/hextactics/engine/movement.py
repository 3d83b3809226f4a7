"""Movement range — cost-weighted reachability under a movement budget.

Uniform-cost (Dijkstra) expansion from the origin:
- ``cost_fn`` returns the cost to ENTER a hex (non-finite = impassable)
- ``edge_blocker`` forbids specific transitions (walls, cliffs, doors)
- ``is_occupied`` blocks entry into occupied hexes
- ``zoc_hexes`` with ``stop_on_zoc_enter`` let a unit enter a zone-of-control
  hex but not move on from it this turn

The search is bounded by ``node_limit``; hitting it returns the partial
field with ``truncated`` set instead of raising.

Also provides path reconstruction and the range predicates used for
move-then-attack previews.
"""

from __future__ import annotations

import heapq
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from hextactics.models.board import EdgePredicate, HexPredicate, MoveCostFn
from hextactics.models.hex import Axial
from hextactics.models.results import MovementField, MoveNode
from hextactics.util.hex_math import hex_distance, hex_neighbors

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovementOptions:
    """Blocking rules for a movement search.

    Attributes:
        edge_blocker: Transition between two hexes is forbidden.
        is_occupied: Hex is occupied and may not be entered.
        zoc_hexes: Zone-of-control hexes.
        stop_on_zoc_enter: Entering a ZoC hex ends movement there.
        node_limit: Maximum number of recorded hexes; None = unbounded.
    """

    edge_blocker: Optional[EdgePredicate] = None
    is_occupied: Optional[HexPredicate] = None
    zoc_hexes: frozenset[Axial] = field(default_factory=frozenset)
    stop_on_zoc_enter: bool = False
    node_limit: Optional[int] = None


@dataclass(frozen=True)
class RangeSpec:
    """Inclusive [min_range, max_range] band of hex distances."""

    max_range: int
    min_range: int = 0


def _usable_cost(step_cost: float) -> bool:
    return math.isfinite(step_cost) and step_cost >= 0


def compute_movement_field(
    origin: Axial,
    budget: float,
    cost_fn: MoveCostFn,
    opts: Optional[MovementOptions] = None,
) -> MovementField:
    """Compute every hex reachable from `origin` within `budget`.

    Args:
        origin: Start hex, recorded at cost 0.
        budget: Movement points available.
        cost_fn: Cost to enter a hex.
        opts: Blocking rules.

    Returns:
        MovementField with the cheapest known cost and parent per hex.
    """
    opts = opts or MovementOptions()
    nodes: dict[Axial, MoveNode] = {}
    nodes[origin] = MoveNode(pos=origin, cost=0.0)

    limit = opts.node_limit
    zoc = opts.zoc_hexes
    truncated = False
    counter = 0
    open_set: list[tuple[float, int, Axial]] = [(0.0, counter, origin)]

    while open_set:
        cost, _, pos = heapq.heappop(open_set)
        node = nodes[pos]
        if cost > node.cost or node.sealed:
            continue

        for nb in hex_neighbors(pos):
            if nb == origin:
                continue
            if opts.is_occupied is not None and opts.is_occupied(nb):
                continue
            if opts.edge_blocker is not None and opts.edge_blocker(pos, nb):
                continue

            step_cost = cost_fn(nb)
            if not _usable_cost(step_cost):
                continue

            new_cost = node.cost + step_cost
            if new_cost > budget:
                continue

            prev = nodes.get(nb)
            if prev is not None and new_cost >= prev.cost:
                continue
            if prev is None and limit is not None and len(nodes) >= limit:
                truncated = True
                continue

            sealed = opts.stop_on_zoc_enter and nb in zoc
            nodes[nb] = MoveNode(pos=nb, cost=new_cost, parent=pos, sealed=sealed)
            counter += 1
            heapq.heappush(open_set, (new_cost, counter, nb))

    if truncated:
        log.debug("Movement field from %r hit node limit %s (%d nodes)", origin, limit, len(nodes))
    return MovementField(origin=origin, budget=budget, nodes=nodes, truncated=truncated)


def uniform_movement(
    origin: Axial,
    budget: float,
    is_passable: HexPredicate,
    opts: Optional[MovementOptions] = None,
) -> MovementField:
    """Movement field where every passable hex costs 1."""
    return compute_movement_field(
        origin, budget, lambda h: 1.0 if is_passable(h) else math.inf, opts,
    )


def reconstruct_path(move_field: MovementField, target: Axial) -> Optional[list[Axial]]:
    """Cheapest route from the field's origin to `target`, or None if unreachable."""
    node = move_field.nodes.get(target)
    if node is None:
        return None
    path = [node.pos]
    while node.parent is not None:
        node = move_field.nodes[node.parent]
        path.append(node.pos)
    path.reverse()
    return path


def reachable_keys(move_field: MovementField) -> set[Axial]:
    return move_field.reachable


def zoc_from_sources(sources: Iterable[Axial]) -> frozenset[Axial]:
    """Hexes adjacent to ZoC-exerting units (e.g. enemies).

    The units' own hexes are not included; they are normally occupied.
    """
    src = set(sources)
    return frozenset(nb for s in src for nb in hex_neighbors(s) if nb not in src)


# -- Range predicates ----------------------------------------------------

def in_hex_range(a: Axial, b: Axial, spec: RangeSpec) -> bool:
    """True if `b` lies within [min_range, max_range] hexes of `a`."""
    d = hex_distance(a, b)
    return spec.min_range <= d <= spec.max_range


def filter_by_range(center: Axial, hexes: Iterable[Axial], spec: RangeSpec) -> list[Axial]:
    return [h for h in hexes if in_hex_range(center, h, spec)]


def attack_from_positions(move_field: MovementField) -> set[Axial]:
    """Hexes a unit could launch an attack from after moving this turn."""
    return set(move_field.nodes)


def collect_targets_from_positions(
    from_positions: Iterable[Axial],
    potential_targets: Iterable[Axial],
    attack_range: RangeSpec,
    has_line_of_sight: Optional[EdgePredicate] = None,
) -> list[Axial]:
    """Targets attackable from at least one of the given positions.

    Args:
        from_positions: Candidate attack-from hexes.
        potential_targets: Hexes holding possible targets.
        attack_range: Distance band of the attack.
        has_line_of_sight: Optional (from, to) sight test.
    """
    origins = list(from_positions)
    targets: list[Axial] = []
    for t in potential_targets:
        for f in origins:
            if not in_hex_range(f, t, attack_range):
                continue
            if has_line_of_sight is not None and not has_line_of_sight(f, t):
                continue
            targets.append(t)
            break
    return targets
