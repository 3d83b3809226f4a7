"""Command-line entry point for ad-hoc board queries.

Loads the engine config and an optional board fixture, runs one query and
prints the result:

    hextactics los 0,0 3,0
    hextactics --board boards/ruins.yaml path 0,0 4,-2
    hextactics move 0,0 3
    hextactics aoe 0,0 cone dir=0 radius=3 widen=1

Without ``--board`` the board is open and unbounded.
Hexes are written as ``q,r``; put ``--`` before the positionals when a
hex starts with a minus sign (``hextactics los -- -1,0 2,0``).  Exit code 0
on success, 1 on a failed query or bad input.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Optional

import yaml

from hextactics.engine.tactics_service import TacticsService
from hextactics.loaders.board_loader import load_board
from hextactics.loaders.engine_config_loader import DEFAULT_ENGINE_CONFIG_PATH, load_engine_config
from hextactics.models.board import Board
from hextactics.models.hex import Axial, HexDomainError, axial_key, parse_axial_key

log = logging.getLogger(__name__)


def _hex_arg(value: str) -> Axial:
    try:
        return parse_axial_key(value)
    except HexDomainError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _shape_params(pairs: list[str]) -> dict[str, Any]:
    """Turn ``key=value`` pairs into a shape mapping (YAML-typed values)."""
    params: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise HexDomainError(f"Expected key=value, got {pair!r}")
        if "," in raw:
            h = parse_axial_key(raw)
            params[key] = [h.q, h.r]
        else:
            try:
                params[key] = yaml.safe_load(raw)
            except yaml.YAMLError as e:
                raise HexDomainError(f"Bad value for {key!r}: {raw!r}") from e
    return params


def _fmt_path(path: tuple[Axial, ...] | list[Axial]) -> str:
    return " ".join(axial_key(h) for h in path)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hextactics", description="Hex tactics board queries")
    parser.add_argument(
        "--config",
        default=DEFAULT_ENGINE_CONFIG_PATH,
        help=f"Engine config YAML (default: {DEFAULT_ENGINE_CONFIG_PATH})",
    )
    parser.add_argument("--board", help="Board fixture YAML")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    los = sub.add_parser("los", help="Line of sight and cover from A to B")
    los.add_argument("a", type=_hex_arg)
    los.add_argument("b", type=_hex_arg)

    path = sub.add_parser("path", help="Cheapest path from A to B")
    path.add_argument("a", type=_hex_arg)
    path.add_argument("b", type=_hex_arg)

    move = sub.add_parser("move", help="Reachable hexes from A within BUDGET")
    move.add_argument("a", type=_hex_arg)
    move.add_argument("budget", type=float)

    aoe = sub.add_parser("aoe", help="Area-of-effect mask at A")
    aoe.add_argument("a", type=_hex_arg)
    aoe.add_argument("shape", help="circle, donut, line, cone or bolt")
    aoe.add_argument("params", nargs="*", help="Shape fields as key=value")
    aoe.add_argument("--clip", action="store_true", help="Clip line/bolt at opaque tiles")
    aoe.add_argument("--los", action="store_true", help="Keep only cells in sight")
    return parser


def _run(args: argparse.Namespace, service: TacticsService, board: Board) -> bool:
    if args.command == "los":
        cover = service.cover_between(args.a, args.b, board)
        print(f"clear={cover.clear} blocked_by={cover.blocked_by.value} "
              f"cover_sum={cover.sum:.3f} penalty={cover.penalty:.3f}")
        return cover.clear

    if args.command == "path":
        result = service.path_to_goal(args.a, args.b, board)
        if not result.success:
            print(f"no path ({result.reason.value}, expanded {result.expanded})")
            return False
        print(f"cost={result.cost:g} steps={result.steps}")
        print(_fmt_path(result.path))
        return True

    if args.command == "move":
        move_field = service.movement_preview(args.a, args.budget, board)
        for h, cost in sorted(move_field.costs.items(), key=lambda kv: (kv[1], kv[0].q, kv[0].r)):
            print(f"{axial_key(h)}\t{cost:g}")
        if move_field.truncated:
            print("(truncated at node limit)")
        return True

    if args.command == "aoe":
        shape = {"shape": args.shape, **_shape_params(args.params)}
        cells = service.build_aoe_mask(args.a, shape, board, clip_on_block=args.clip, los_filter=args.los)
        print(f"{len(cells)} cells")
        print(_fmt_path(cells))
        return True

    raise HexDomainError(f"Unknown command: {args.command}")


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the ``hextactics`` console script."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        service = TacticsService(load_engine_config(args.config))
        board = load_board(args.board).as_board() if args.board else Board()
        ok = _run(args, service, board)
    except (HexDomainError, OSError) as e:
        log.error("%s", e)
        return 1
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
