"""Board-capability contract.

The engine never owns board state.  Callers describe their board through a
:class:`Board` of query callbacks; every missing callback falls back to the
neutral answer (cost 1, nothing blocks, no cover, unknown elevation).

:class:`TileBoard` is a concrete in-memory board built from a tile table,
handy for tests, tools and the YAML board loader.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Optional

from hextactics.models.hex import Axial

MoveCostFn = Callable[[Axial], float]
HexPredicate = Callable[[Axial], bool]
EdgePredicate = Callable[[Axial, Axial], bool]
SoftCoverFn = Callable[[Axial], Optional[float]]
ElevationFn = Callable[[Axial], Optional[float]]


@dataclass
class Board:
    """Query callbacks describing a board.

    Attributes:
        move_cost: Cost to enter a hex; non-finite means impassable.
        passable: Overrides move_cost with impassable when it returns False.
        occupied: Hex currently holds a unit.
        edge_blocker: Movement across the edge between two hexes is blocked.
        blocks_sight: Hex is opaque.
        blocks_sight_edge: Sight across the edge between two hexes is blocked.
        soft_cover: Cover contribution of a hex in [0, 1].
        elevation: Terrain height of a hex, None when unknown.
        zoc: Hexes that halt or penalize movement when entered.
    """

    move_cost: Optional[MoveCostFn] = None
    passable: Optional[HexPredicate] = None
    occupied: Optional[HexPredicate] = None
    edge_blocker: Optional[EdgePredicate] = None
    blocks_sight: Optional[HexPredicate] = None
    blocks_sight_edge: Optional[EdgePredicate] = None
    soft_cover: Optional[SoftCoverFn] = None
    elevation: Optional[ElevationFn] = None
    zoc: frozenset[Axial] = field(default_factory=frozenset)

    def enter_cost(self, h: Axial) -> float:
        """Effective cost to enter `h`, folding in the passability override."""
        if self.passable is not None and not self.passable(h):
            return math.inf
        if self.move_cost is None:
            return 1.0
        return self.move_cost(h)


@dataclass
class Tile:
    """Static terrain of one hex.

    Attributes:
        cost: Movement cost to enter.
        blocked: Impassable terrain.
        blocks_sight: Opaque terrain (walls, cliffs).
        cover: Soft cover in [0, 1].
        elevation: Terrain height, None when unknown.
    """

    cost: float = 1.0
    blocked: bool = False
    blocks_sight: bool = False
    cover: float = 0.0
    elevation: Optional[float] = None


@dataclass
class TileBoard:
    """A bounded board backed by a tile table.

    Hexes missing from ``tiles`` are off-board: impassable and opaque.

    Attributes:
        tiles: Terrain per hex.
        walls: Blocked edges, stored in both directions.
        units: Hexes currently occupied.
        zoc: Zone-of-control hexes.
    """

    tiles: dict[Axial, Tile] = field(default_factory=dict)
    walls: set[tuple[Axial, Axial]] = field(default_factory=set)
    units: set[Axial] = field(default_factory=set)
    zoc: set[Axial] = field(default_factory=set)

    # -- Mutation (caller side) ------------------------------------------

    def add_wall(self, a: Axial, b: Axial) -> None:
        self.walls.add((a, b))
        self.walls.add((b, a))

    # -- Queries ---------------------------------------------------------

    def move_cost(self, h: Axial) -> float:
        tile = self.tiles.get(h)
        if tile is None or tile.blocked:
            return math.inf
        return tile.cost

    def is_occupied(self, h: Axial) -> bool:
        return h in self.units

    def is_wall(self, a: Axial, b: Axial) -> bool:
        return (a, b) in self.walls

    def blocks_sight(self, h: Axial) -> bool:
        tile = self.tiles.get(h)
        return tile is None or tile.blocks_sight

    def soft_cover(self, h: Axial) -> float:
        tile = self.tiles.get(h)
        return tile.cover if tile is not None else 0.0

    def elevation(self, h: Axial) -> Optional[float]:
        tile = self.tiles.get(h)
        return tile.elevation if tile is not None else None

    def as_board(self) -> Board:
        """Snapshot this table into the capability contract."""
        return Board(
            move_cost=self.move_cost,
            occupied=self.is_occupied,
            edge_blocker=self.is_wall,
            blocks_sight=self.blocks_sight,
            blocks_sight_edge=self.is_wall,
            soft_cover=self.soft_cover,
            elevation=self.elevation,
            zoc=frozenset(self.zoc),
        )
