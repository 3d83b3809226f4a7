"""Tactics service — the single entry point collaborators talk to.

Turns an :class:`EngineConfig` plus a per-call :class:`Board` into the
option bundles of the individual engines and runs the query:

- movement previews (reachable hexes and their costs)
- paths to one goal or to the nearest of several
- line of sight, cover and full ray traces
- visibility fields
- area-of-effect masks, optionally clipped at blockers and LOS-filtered

The service holds no board state; it is safe to share one instance.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

from hextactics.engine.aoe import (
    aoe_bolt,
    aoe_circle,
    aoe_cone,
    aoe_donut,
    aoe_line,
    clip_line_by_blockers,
    filter_by_los,
)
from hextactics.engine.hex_pathfinding import AStarOptions, a_star, a_star_to_any
from hextactics.engine.line_of_sight import (
    LOSOptions,
    cover_between,
    has_line_of_sight,
    trace_ray,
    visible_within_radius,
)
from hextactics.engine.movement import MovementOptions, compute_movement_field
from hextactics.loaders.engine_config_loader import EngineConfig
from hextactics.models.board import Board
from hextactics.models.hex import Axial, HexDomainError
from hextactics.models.results import CoverResult, MovementField, PathResult, RayTrace
from hextactics.models.shapes import (
    BoltShape,
    CircleShape,
    ConeShape,
    DonutShape,
    LineShape,
    ShapeSpec,
    parse_shape,
)

log = logging.getLogger(__name__)


class TacticsService:
    """Board queries driven by one engine configuration."""

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = (config or EngineConfig()).validate()

    # -- Option builders -------------------------------------------------

    def los_options(self, board: Board, see_opaque_target: Optional[bool] = None) -> LOSOptions:
        cfg = self.config
        return LOSOptions(
            blocks_at=board.blocks_sight,
            blocks_edge=board.blocks_sight_edge,
            soft_cover_at=board.soft_cover,
            elevation_at=board.elevation,
            see_opaque_target=(
                cfg.see_opaque_target if see_opaque_target is None else see_opaque_target
            ),
            soft_cover_k=cfg.soft_cover_k,
            max_soft_cover=cfg.max_soft_cover,
        )

    def movement_options(self, board: Board) -> MovementOptions:
        cfg = self.config
        return MovementOptions(
            edge_blocker=board.edge_blocker,
            is_occupied=board.occupied,
            zoc_hexes=frozenset(board.zoc),
            stop_on_zoc_enter=cfg.stop_on_zoc_enter,
            node_limit=cfg.movement_node_limit,
        )

    def path_options(self, board: Board, allow_occupied_goal: Optional[bool] = None) -> AStarOptions:
        cfg = self.config
        return AStarOptions(
            heuristic_scale=cfg.heuristic_scale,
            min_step_cost=cfg.min_step_cost,
            tie_break_epsilon=cfg.tie_break_epsilon,
            allow_occupied_goal=(
                cfg.allow_occupied_goal if allow_occupied_goal is None else allow_occupied_goal
            ),
            edge_blocker=board.edge_blocker,
            is_occupied=board.occupied,
            zoc_hexes=frozenset(board.zoc),
            zoc_penalty=cfg.zoc_penalty,
            stop_on_zoc_enter=cfg.stop_on_zoc_enter,
            node_limit=cfg.path_node_limit,
        )

    # -- Movement --------------------------------------------------------

    def movement_preview(self, origin: Axial, budget: float, board: Board) -> MovementField:
        """Every hex reachable from `origin` within `budget` movement points."""
        return compute_movement_field(origin, budget, board.enter_cost, self.movement_options(board))

    def path_to_goal(
        self,
        start: Axial,
        goal: Axial,
        board: Board,
        allow_occupied_goal: Optional[bool] = None,
    ) -> PathResult:
        """Cheapest path from `start` to `goal`.

        Args:
            allow_occupied_goal: Overrides the configured value for this call,
                e.g. to path up to an enemy for a melee attack.
        """
        opts = self.path_options(board, allow_occupied_goal)
        result = a_star(start, goal, board.enter_cost, opts)
        log.debug("Path %r -> %r: success=%s cost=%s expanded=%d",
                  start, goal, result.success, result.cost, result.expanded)
        return result

    def path_to_nearest(self, start: Axial, goals: Iterable[Axial], board: Board) -> PathResult:
        """Cheapest path from `start` to whichever goal is reached first."""
        return a_star_to_any(start, goals, board.enter_cost, self.path_options(board))

    # -- Sight -----------------------------------------------------------

    def line_of_sight(self, a: Axial, b: Axial, board: Board) -> bool:
        return has_line_of_sight(a, b, self.los_options(board))

    def cover_between(
        self,
        a: Axial,
        b: Axial,
        board: Board,
        include_steps: bool = False,
    ) -> CoverResult:
        return cover_between(a, b, self.los_options(board), include_steps=include_steps)

    def trace(self, a: Axial, b: Axial, board: Board) -> RayTrace:
        return trace_ray(a, b, self.los_options(board))

    def visible_cells(self, origin: Axial, radius: int, board: Board) -> set[Axial]:
        return visible_within_radius(origin, radius, self.los_options(board))

    # -- Area of effect --------------------------------------------------

    def build_aoe_mask(
        self,
        origin: Axial,
        shape: Union[ShapeSpec, dict[str, Any]],
        board: Board,
        clip_on_block: bool = False,
        los_filter: bool = False,
    ) -> list[Axial]:
        """Cells hit by an ability of the given shape.

        Args:
            origin: Caster hex.
            shape: Shape model or mapping with a ``shape`` tag.
            board: Board providing the sight blockers.
            clip_on_block: Cut line and bolt shapes at the first opaque
                tile (the tile itself stays in the mask).
            los_filter: Keep only cells the origin can see; opaque tiles
                are dropped from the mask.

        Raises:
            HexDomainError: Unknown shape tag or malformed spec.
        """
        spec = parse_shape(shape)
        cells = self._shape_cells(origin, spec)

        if clip_on_block and isinstance(spec, (LineShape, BoltShape)) and board.blocks_sight is not None:
            blocks = board.blocks_sight
            cells = clip_line_by_blockers(cells, lambda h: h != origin and blocks(h))

        if los_filter:
            opts = self.los_options(board, see_opaque_target=False)
            cells = filter_by_los(origin, cells, lambda a, b: has_line_of_sight(a, b, opts))

        log.debug("AoE %s at %r: %d cells", spec.shape, origin, len(cells))
        return cells

    @staticmethod
    def _shape_cells(origin: Axial, spec: ShapeSpec) -> list[Axial]:
        if isinstance(spec, CircleShape):
            return aoe_circle(origin, spec.radius)
        if isinstance(spec, DonutShape):
            return aoe_donut(origin, spec.min, spec.max, include_origin=spec.include_origin)
        if isinstance(spec, LineShape):
            return aoe_line(origin, spec.direction, spec.length,
                            thickness=spec.thickness, include_origin=spec.include_origin)
        if isinstance(spec, ConeShape):
            return aoe_cone(origin, spec.direction, spec.radius,
                            widen=spec.widen, include_origin=spec.include_origin)
        if isinstance(spec, BoltShape):
            return aoe_bolt(origin, Axial(*spec.to), spec.max_length)
        raise HexDomainError(f"Unsupported AoE shape: {spec!r}")
