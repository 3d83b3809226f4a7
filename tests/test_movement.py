"""Tests for the movement field — budgets, blockers, ZoC and limits."""

import dataclasses
import math

import pytest

from hextactics.engine.movement import (
    MovementOptions,
    RangeSpec,
    attack_from_positions,
    collect_targets_from_positions,
    compute_movement_field,
    filter_by_range,
    in_hex_range,
    reachable_keys,
    reconstruct_path,
    uniform_movement,
    zoc_from_sources,
)
from hextactics.models.hex import Axial
from hextactics.models.results import MoveNode
from hextactics.util.hex_math import hex_distance, hex_neighbors

ORIGIN = Axial(0, 0)


def _flat(h):
    return 1.0


def _make_costs(overrides, default=1.0):
    return lambda h: overrides.get(h, default)


class TestBudget:
    def test_origin_at_cost_zero(self):
        f = compute_movement_field(ORIGIN, 3, _flat)
        assert f.cost_to(ORIGIN) == 0.0
        assert ORIGIN in f

    def test_open_field_matches_disk(self):
        f = compute_movement_field(ORIGIN, 2, _flat)
        assert len(f) == 19
        assert all(cost == hex_distance(ORIGIN, h) for h, cost in f.costs.items())

    def test_costs_never_exceed_budget(self):
        costs = _make_costs({Axial(1, 0): 2.5, Axial(0, 1): 0.5, Axial(-1, 0): 3.0})
        f = compute_movement_field(ORIGIN, 3.5, costs)
        assert all(c <= 3.5 for c in f.costs.values())

    def test_zero_budget_is_origin_only(self):
        f = compute_movement_field(ORIGIN, 0, _flat)
        assert f.reachable == {ORIGIN}

    def test_expensive_hex_is_routed_around(self):
        f = compute_movement_field(ORIGIN, 4, _make_costs({Axial(1, 0): 5.0}))
        assert Axial(1, 0) not in f
        assert f.cost_to(Axial(2, 0)) == 3.0

    def test_unreachable_cost_is_inf(self):
        f = compute_movement_field(ORIGIN, 1, _flat)
        assert f.cost_to(Axial(5, 0)) == math.inf


class TestBlocking:
    def test_impassable_costs_are_skipped(self):
        bad = {Axial(1, 0): math.inf, Axial(0, 1): float("nan"), Axial(-1, 0): -1.0}
        f = compute_movement_field(ORIGIN, 1, _make_costs(bad))
        assert f.reachable == {ORIGIN, Axial(1, -1), Axial(0, -1), Axial(-1, 1)}

    def test_occupied_hexes_are_skipped(self):
        units = {Axial(1, 0)}
        f = compute_movement_field(ORIGIN, 1, _flat, MovementOptions(is_occupied=lambda h: h in units))
        assert Axial(1, 0) not in f

    def test_occupied_origin_still_moves(self):
        opts = MovementOptions(is_occupied=lambda h: h == ORIGIN)
        f = compute_movement_field(ORIGIN, 1, _flat, opts)
        assert len(f) == 7

    def test_edge_blocker_forces_detour(self):
        wall = {ORIGIN, Axial(1, 0)}
        opts = MovementOptions(edge_blocker=lambda a, b: {a, b} == wall)
        f = compute_movement_field(ORIGIN, 2, _flat, opts)
        assert f.cost_to(Axial(1, 0)) == 2.0
        assert f.nodes[Axial(1, 0)].parent != ORIGIN

    def test_uniform_movement(self):
        f = uniform_movement(ORIGIN, 1, lambda h: h != Axial(1, 0))
        assert len(f) == 6


class TestZoneOfControl:
    def test_stop_on_enter_seals_hex(self):
        opts = MovementOptions(zoc_hexes=frozenset({Axial(1, 0)}), stop_on_zoc_enter=True)
        f = compute_movement_field(ORIGIN, 2, _flat, opts)
        assert Axial(1, 0) in f
        assert f.nodes[Axial(1, 0)].sealed
        # (2,0) is only two steps away through (1,0)
        assert Axial(2, 0) not in f

    def test_without_stop_zoc_is_plain_terrain(self):
        opts = MovementOptions(zoc_hexes=frozenset({Axial(1, 0)}))
        f = compute_movement_field(ORIGIN, 2, _flat, opts)
        assert Axial(2, 0) in f

    def test_zoc_from_sources(self):
        enemy = Axial(3, 3)
        zoc = zoc_from_sources([enemy])
        assert zoc == frozenset(hex_neighbors(enemy))
        assert enemy not in zoc


class TestNodeLimit:
    def test_truncated_field(self):
        f = compute_movement_field(ORIGIN, 10, _flat, MovementOptions(node_limit=5))
        assert f.truncated
        assert len(f) <= 5
        assert ORIGIN in f

    def test_limit_not_hit(self):
        f = compute_movement_field(ORIGIN, 1, _flat, MovementOptions(node_limit=100))
        assert not f.truncated


class TestReadOnlyField:
    def test_flags_cannot_be_reassigned(self):
        f = compute_movement_field(ORIGIN, 10, _flat, MovementOptions(node_limit=5))
        with pytest.raises(dataclasses.FrozenInstanceError):
            f.truncated = False
        assert f.truncated

    def test_nodes_cannot_be_edited(self):
        f = compute_movement_field(ORIGIN, 2, _flat)
        with pytest.raises(TypeError):
            f.nodes[Axial(9, 9)] = MoveNode(pos=Axial(9, 9), cost=0.0)
        assert Axial(9, 9) not in f
        assert f.cost_to(Axial(2, 0)) == 2


class TestPaths:
    def test_reconstruct_path(self):
        f = compute_movement_field(ORIGIN, 3, _flat)
        path = reconstruct_path(f, Axial(3, 0))
        assert path[0] == ORIGIN
        assert path[-1] == Axial(3, 0)
        assert len(path) == 4

    def test_reconstruct_unreachable(self):
        f = compute_movement_field(ORIGIN, 1, _flat)
        assert reconstruct_path(f, Axial(4, 0)) is None

    def test_reachable_keys(self):
        f = compute_movement_field(ORIGIN, 1, _flat)
        assert reachable_keys(f) == set(hex_neighbors(ORIGIN)) | {ORIGIN}
        assert attack_from_positions(f) == reachable_keys(f)


class TestRanges:
    def test_in_hex_range(self):
        spec = RangeSpec(max_range=3, min_range=2)
        assert in_hex_range(ORIGIN, Axial(2, 0), spec)
        assert not in_hex_range(ORIGIN, Axial(1, 0), spec)
        assert not in_hex_range(ORIGIN, Axial(4, 0), spec)

    def test_filter_by_range(self):
        hexes = [Axial(q, 0) for q in range(6)]
        assert filter_by_range(ORIGIN, hexes, RangeSpec(max_range=2)) == hexes[:3]

    def test_collect_targets(self):
        positions = [ORIGIN, Axial(0, 3)]
        targets = [Axial(2, 0), Axial(0, 5), Axial(6, -6)]
        found = collect_targets_from_positions(positions, targets, RangeSpec(max_range=2))
        assert found == [Axial(2, 0), Axial(0, 5)]

    def test_collect_targets_needs_sight(self):
        found = collect_targets_from_positions(
            [ORIGIN], [Axial(2, 0)], RangeSpec(max_range=2), has_line_of_sight=lambda a, b: False,
        )
        assert found == []
