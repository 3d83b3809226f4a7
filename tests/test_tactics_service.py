"""Tests for TacticsService — config and board wiring into the engines."""

import math

import pytest

from hextactics.engine.tactics_service import TacticsService
from hextactics.loaders.engine_config_loader import EngineConfig
from hextactics.models.board import Board, Tile, TileBoard
from hextactics.models.hex import Axial, HexDomainError
from hextactics.models.results import BlockedBy, PathFailure
from hextactics.models.shapes import BoltShape, CircleShape
from hextactics.util.hex_math import hex_disk

ORIGIN = Axial(0, 0)


def _make_board(radius=4, tiles=None, units=(), zoc=()):
    """Open disk-shaped board with optional tile overrides."""
    tb = TileBoard(tiles={h: Tile() for h in hex_disk(ORIGIN, radius)})
    tb.tiles.update(tiles or {})
    tb.units = set(units)
    tb.zoc = set(zoc)
    return tb


WALL = Tile(blocked=True, blocks_sight=True)


class TestConstruction:
    def test_default_config(self):
        assert TacticsService().config == EngineConfig()

    def test_invalid_config_raises(self):
        with pytest.raises(HexDomainError):
            TacticsService(EngineConfig(path_node_limit=0))


class TestMovement:
    def test_movement_preview(self):
        f = TacticsService().movement_preview(ORIGIN, 2, _make_board().as_board())
        assert len(f) == 19
        assert all(c <= 2 for c in f.costs.values())

    def test_board_edge_limits_movement(self):
        f = TacticsService().movement_preview(ORIGIN, 5, _make_board(radius=1).as_board())
        assert len(f) == 7

    def test_empty_board_is_open(self):
        f = TacticsService().movement_preview(ORIGIN, 1, Board())
        assert len(f) == 7

    def test_zoc_stop_from_config(self):
        board = _make_board(zoc=[Axial(1, 0)]).as_board()
        service = TacticsService(EngineConfig(stop_on_zoc_enter=True))
        f = service.movement_preview(ORIGIN, 2, board)
        assert f.nodes[Axial(1, 0)].sealed
        assert Axial(2, 0) not in f

    def test_node_limit_from_config(self):
        service = TacticsService(EngineConfig(movement_node_limit=4))
        f = service.movement_preview(ORIGIN, 3, _make_board().as_board())
        assert f.truncated
        assert len(f) <= 4


class TestPaths:
    def test_path_around_wall(self):
        board = _make_board(tiles={Axial(1, 0): WALL}).as_board()
        result = TacticsService().path_to_goal(ORIGIN, Axial(2, 0), board)
        assert result.success
        assert Axial(1, 0) not in result.path
        assert result.cost == 3.0

    def test_occupied_goal_override(self):
        board = _make_board(units=[Axial(2, 0)]).as_board()
        service = TacticsService()
        assert not service.path_to_goal(ORIGIN, Axial(2, 0), board).success
        assert service.path_to_goal(ORIGIN, Axial(2, 0), board, allow_occupied_goal=True).success

    def test_occupied_goal_from_config(self):
        board = _make_board(units=[Axial(2, 0)]).as_board()
        service = TacticsService(EngineConfig(allow_occupied_goal=True))
        assert service.path_to_goal(ORIGIN, Axial(2, 0), board).success

    def test_wall_edge_blocks_path(self):
        tb = _make_board()
        tb.add_wall(ORIGIN, Axial(1, 0))
        result = TacticsService().path_to_goal(ORIGIN, Axial(1, 0), tb.as_board())
        assert result.cost == 2.0

    def test_path_node_limit(self):
        service = TacticsService(EngineConfig(path_node_limit=2, heuristic_scale=0.0))
        result = service.path_to_goal(ORIGIN, Axial(4, 0), _make_board().as_board())
        assert result.reason is PathFailure.NODE_LIMIT

    def test_off_board_goal(self):
        result = TacticsService().path_to_goal(ORIGIN, Axial(9, 0), _make_board(radius=2).as_board())
        assert result.reason is PathFailure.NO_PATH

    def test_path_to_nearest(self):
        result = TacticsService().path_to_nearest(ORIGIN, [Axial(3, 0), Axial(0, -2)], _make_board().as_board())
        assert result.goal == Axial(0, -2)
        assert result.cost == 2.0


class TestSight:
    def test_line_of_sight(self):
        board = _make_board(tiles={Axial(1, 0): WALL}).as_board()
        service = TacticsService()
        assert not service.line_of_sight(ORIGIN, Axial(3, 0), board)
        assert service.line_of_sight(ORIGIN, Axial(0, 3), board)

    def test_wall_edge_blocks_sight(self):
        tb = _make_board()
        tb.add_wall(ORIGIN, Axial(1, 0))
        trace = TacticsService().trace(ORIGIN, Axial(2, 0), tb.as_board())
        assert trace.blocked_by is BlockedBy.EDGE

    def test_cover_uses_configured_decay(self):
        board = _make_board(tiles={Axial(1, 0): Tile(cover=0.5)}).as_board()
        service = TacticsService(EngineConfig(soft_cover_k=1.0))
        cover = service.cover_between(ORIGIN, Axial(2, 0), board)
        assert cover.clear
        assert cover.penalty == pytest.approx(1 - math.exp(-0.5))
        assert cover.steps is None
        assert len(service.cover_between(ORIGIN, Axial(2, 0), board, include_steps=True).steps) == 3

    def test_opaque_target_from_config(self):
        board = _make_board(tiles={Axial(2, 0): WALL}).as_board()
        assert TacticsService().line_of_sight(ORIGIN, Axial(2, 0), board)
        hidden = TacticsService(EngineConfig(see_opaque_target=False))
        assert not hidden.line_of_sight(ORIGIN, Axial(2, 0), board)

    def test_elevation(self):
        board = _make_board(tiles={Axial(1, 0): Tile(elevation=3.0)}).as_board()
        trace = TacticsService().trace(ORIGIN, Axial(2, 0), board)
        assert trace.blocked_by is BlockedBy.ELEVATION

    def test_visible_cells(self):
        service = TacticsService()
        assert len(service.visible_cells(ORIGIN, 2, _make_board().as_board())) == 19
        blocked = _make_board(tiles={Axial(1, 0): WALL}).as_board()
        visible = service.visible_cells(ORIGIN, 2, blocked)
        assert Axial(1, 0) in visible
        assert Axial(2, 0) not in visible


class TestAoEMask:
    def test_circle_from_mapping(self):
        cells = TacticsService().build_aoe_mask(ORIGIN, {"shape": "circle", "radius": 1}, Board())
        assert set(cells) == set(hex_disk(ORIGIN, 1))

    def test_model_spec(self):
        cells = TacticsService().build_aoe_mask(ORIGIN, CircleShape(radius=2), Board())
        assert len(cells) == 19

    def test_every_shape(self):
        service = TacticsService()
        specs = [
            {"shape": "donut", "min": 1, "max": 2},
            {"shape": "line", "dir": 1, "length": 3},
            {"shape": "cone", "dir": 2, "radius": 2},
            {"shape": "bolt", "to": [2, 2]},
        ]
        for spec in specs:
            assert service.build_aoe_mask(ORIGIN, spec, Board())

    def test_bad_spec_raises(self):
        with pytest.raises(HexDomainError):
            TacticsService().build_aoe_mask(ORIGIN, {"shape": "ring", "radius": 1}, Board())
        with pytest.raises(HexDomainError):
            TacticsService().build_aoe_mask(ORIGIN, {"shape": "line", "length": 2}, Board())

    def test_clip_bolt_at_wall(self):
        board = _make_board(tiles={Axial(2, 0): WALL}).as_board()
        cells = TacticsService().build_aoe_mask(ORIGIN, BoltShape(to=(4, 0)), board, clip_on_block=True)
        assert cells == [ORIGIN, Axial(1, 0), Axial(2, 0)]

    def test_clip_ignores_opaque_origin(self):
        board = _make_board(tiles={ORIGIN: WALL}).as_board()
        spec = {"shape": "line", "dir": 0, "length": 3}
        cells = TacticsService().build_aoe_mask(ORIGIN, spec, board, clip_on_block=True)
        assert len(cells) == 4

    def test_clip_only_applies_to_lines(self):
        board = _make_board(tiles={Axial(1, 0): WALL}).as_board()
        cells = TacticsService().build_aoe_mask(ORIGIN, {"shape": "circle", "radius": 1}, board, clip_on_block=True)
        assert len(cells) == 7

    def test_los_filter_drops_walls_and_shadow(self):
        board = _make_board(tiles={Axial(1, 0): WALL}).as_board()
        cells = TacticsService().build_aoe_mask(ORIGIN, {"shape": "circle", "radius": 2}, board, los_filter=True)
        assert ORIGIN in cells
        assert Axial(1, 0) not in cells
        assert Axial(2, 0) not in cells
        assert Axial(0, 1) in cells
