"""Board loader — parses YAML board fixtures into TileBoard models.

Format::

    tiles:
      "0,0": {}                       # plain floor
      "1,0": {cost: 2, cover: 0.5}    # rough ground with soft cover
      "2,0": wall                     # preset name
      "3,0": {elevation: 2}
    walls:
      - [0, 0, 0, 1]                  # blocked edge between (0,0) and (0,1)
    units:
      - [1, 1]
    zoc:
      - [2, 1]

Tile presets:
- "floor": cost 1, passable, transparent
- "rough": cost 2
- "forest": cost 2, soft cover 0.5
- "wall": impassable and opaque
- "void": impassable, transparent (chasms, water)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from hextactics.models.board import Tile, TileBoard
from hextactics.models.hex import Axial, HexDomainError, parse_axial_key

log = logging.getLogger(__name__)

TILE_PRESETS: dict[str, dict[str, Any]] = {
    "floor": {},
    "rough": {"cost": 2.0},
    "forest": {"cost": 2.0, "cover": 0.5},
    "wall": {"blocked": True, "blocks_sight": True},
    "void": {"blocked": True},
}


class TileFields(BaseModel):
    """Field mapping of one tile entry, checked before it becomes a Tile."""

    model_config = ConfigDict(extra="forbid")

    cost: float = 1.0
    blocked: bool = False
    blocks_sight: bool = False
    cover: float = 0.0
    elevation: Optional[float] = None


_hex_entry = TypeAdapter(tuple[int, int])
_wall_entry = TypeAdapter(tuple[int, int, int, int])


def _parse_tile(key: str, raw: Any) -> Tile:
    if raw is None:
        return Tile()
    if isinstance(raw, str):
        preset = TILE_PRESETS.get(raw)
        if preset is None:
            raise HexDomainError(f"Unknown tile preset {raw!r} at {key}")
        return Tile(**preset)
    if not isinstance(raw, dict):
        raise HexDomainError(f"Tile {key} must be a mapping or preset name")
    try:
        fields = TileFields.model_validate(raw)
    except ValidationError as e:
        raise HexDomainError(f"Invalid tile at {key}: {e}") from e
    return Tile(**fields.model_dump())


def _parse_entry(adapter: TypeAdapter, raw: Any, what: str) -> tuple[int, ...]:
    try:
        return adapter.validate_python(raw)
    except ValidationError as e:
        raise HexDomainError(f"Invalid {what} entry {raw!r}: {e}") from e


def _parse_hex(raw: Any, what: str) -> Axial:
    q, r = _parse_entry(_hex_entry, raw, what)
    return Axial(q, r)


def _entries(raw: Any, what: str) -> list[Any]:
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise HexDomainError(f"{what} must be a list, got {raw!r}")
    return list(raw)


def load_board_from_tiles(
    tiles: dict[str, Any],
    walls: Optional[list[list[int]]] = None,
    units: Optional[list[list[int]]] = None,
    zoc: Optional[list[list[int]]] = None,
) -> TileBoard:
    """Build a TileBoard from already-parsed data.

    Args:
        tiles: Dict of {"q,r": tile} where tile is a field mapping,
               a preset name or None.
        walls: Blocked edges as [q1, r1, q2, r2].
        units: Occupied hexes as [q, r].
        zoc: Zone-of-control hexes as [q, r].

    Raises:
        HexDomainError: Malformed keys, presets, tile fields or entries.
    """
    if not isinstance(tiles, dict):
        raise HexDomainError(f"tiles must be a mapping, got {tiles!r}")
    board = TileBoard()
    for key, raw in tiles.items():
        board.tiles[parse_axial_key(str(key))] = _parse_tile(str(key), raw)

    for edge in _entries(walls, "walls"):
        q1, r1, q2, r2 = _parse_entry(_wall_entry, edge, "wall")
        a, b = Axial(q1, r1), Axial(q2, r2)
        if a.distance_to(b) != 1:
            raise HexDomainError(f"Wall between non-adjacent hexes {a!r} and {b!r}")
        board.add_wall(a, b)

    board.units = {_parse_hex(u, "unit") for u in _entries(units, "units")}
    board.zoc = {_parse_hex(z, "ZoC") for z in _entries(zoc, "zoc")}
    return board


def load_board(path: str | Path) -> TileBoard:
    """Load a board from a YAML file.

    Args:
        path: Path to the board YAML file.

    Returns:
        Populated TileBoard instance.

    Raises:
        HexDomainError: The file is not valid YAML or holds malformed data.
    """
    path = Path(path)
    with path.open() as f:
        try:
            data: dict[str, Any] = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise HexDomainError(f"Board file {path} is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise HexDomainError(f"Board file {path} must be a mapping")

    board = load_board_from_tiles(
        data.get("tiles") or {},
        walls=data.get("walls"),
        units=data.get("units"),
        zoc=data.get("zoc"),
    )
    log.info("Loaded board from %s (%d tiles, %d walls)", path, len(board.tiles), len(board.walls) // 2)
    return board
