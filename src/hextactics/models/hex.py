"""Hexagonal coordinate system using axial (q, r) and cube (x, y, z) coordinates.

Axial coordinates are the canonical storage form:
- q axis runs roughly east
- r axis runs roughly south-east

Cube coordinates are used for math only and satisfy x + y + z = 0,
with x = q, z = r and y = -q - r.

Every constructor normalizes negative zero so value equality, hashing and
string keys stay stable.

Reference: https://www.redblobgames.com/grids/hexagons/
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

from hextactics.util.constants import CUBE_EPSILON, HEX_SIZE, SQRT3

Number = Union[int, float]


class HexDomainError(ValueError):
    """Raised for inputs outside the hex domain (bad radius, broken cube, ...)."""


def normalize_zero(n: Number) -> Number:
    """Coerce -0.0 to 0.0 without touching any other value."""
    if n == 0:
        return 0.0 if isinstance(n, float) else 0
    return n


@dataclass(frozen=True)
class Axial:
    """Immutable axial hex coordinate.

    Usable directly as a dict key or set member.

    Attributes:
        q: Column coordinate (east axis).
        r: Row coordinate (south-east axis).
    """

    q: Number
    r: Number

    def __post_init__(self) -> None:
        object.__setattr__(self, "q", normalize_zero(self.q))
        object.__setattr__(self, "r", normalize_zero(self.r))

    # -- Cube coordinate -------------------------------------------------

    @property
    def s(self) -> Number:
        """Implicit cube coordinate: s = -q - r."""
        return normalize_zero(-self.q - self.r)

    def to_cube(self) -> Cube:
        return axial_to_cube(self)

    # -- Arithmetic ------------------------------------------------------

    def __add__(self, other: Axial) -> Axial:
        return Axial(self.q + other.q, self.r + other.r)

    def __sub__(self, other: Axial) -> Axial:
        return Axial(self.q - other.q, self.r - other.r)

    # -- Geometry --------------------------------------------------------

    def distance_to(self, other: Axial) -> Number:
        """Hex grid distance (number of steps along hex edges)."""
        from hextactics.util.hex_math import hex_distance

        return hex_distance(self, other)

    def neighbors(self) -> list[Axial]:
        """Return the 6 adjacent hex coordinates in direction order."""
        return [Axial(self.q + d.x, self.r + d.z) for d in CUBE_DIRECTIONS]

    def line_to(self, other: Axial) -> list[Axial]:
        """Return the hexes on the straight line from self to other."""
        from hextactics.util.hex_math import hex_linedraw

        return hex_linedraw(self, other)

    # -- Serialization ---------------------------------------------------

    def __repr__(self) -> str:
        return f"Axial({self.q},{self.r})"


@dataclass(frozen=True)
class Cube:
    """Immutable cube hex coordinate with x + y + z = 0.

    With assertions enabled a value off the plane by more than
    ``CUBE_EPSILON`` raises :class:`HexDomainError`.  Under ``python -O``
    y is recomputed from x and z instead.
    """

    x: Number
    y: Number
    z: Number

    def __post_init__(self) -> None:
        x = normalize_zero(self.x)
        y = normalize_zero(self.y)
        z = normalize_zero(self.z)
        total = x + y + z
        if abs(total) >= CUBE_EPSILON:
            if __debug__:
                raise HexDomainError(f"Cube invariant violated: x+y+z={total}")
            y = normalize_zero(-x - z)
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)
        object.__setattr__(self, "z", z)

    def to_axial(self) -> Axial:
        return cube_to_axial(self)

    def __repr__(self) -> str:
        return f"Cube({self.x},{self.y},{self.z})"


# -- Constructors --------------------------------------------------------

def axial(q: Number, r: Number) -> Axial:
    """Create a canonical axial coordinate."""
    return Axial(q, r)


def cube(x: Number, y: Number, z: Number) -> Cube:
    """Create a canonical cube coordinate, enforcing x + y + z = 0."""
    return Cube(x, y, z)


# -- Conversions ---------------------------------------------------------

def axial_to_cube(a: Axial) -> Cube:
    """axial -> cube: x = q, z = r, y = -x - z."""
    x = a.q
    z = a.r
    return Cube(x, -x - z, z)


def cube_to_axial(c: Cube) -> Axial:
    """cube -> axial: q = x, r = z (y is fully determined and dropped)."""
    return Axial(c.x, c.z)


# -- Rounding ------------------------------------------------------------

def _round_half_up(v: float) -> int:
    return math.floor(v + 0.5)


def cube_round(x: float, y: float, z: float) -> Cube:
    """Round fractional cube coordinates to the nearest hex.

    The component with the largest rounding error is recomputed from the
    other two so the zero-sum invariant holds exactly.
    """
    rx = _round_half_up(x)
    ry = _round_half_up(y)
    rz = _round_half_up(z)

    dx = abs(rx - x)
    dy = abs(ry - y)
    dz = abs(rz - z)

    if dx > dy and dx > dz:
        rx = -ry - rz
    elif dy > dz:
        ry = -rx - rz
    else:
        rz = -rx - ry

    return Cube(rx, ry, rz)


def axial_round(q: float, r: float) -> Axial:
    """Round fractional axial coordinates by going through cube space."""
    c = cube_round(q, -q - r, r)
    return cube_to_axial(c)


# -- Equality & keys -----------------------------------------------------

def axial_eq(a: Axial, b: Axial) -> bool:
    return a.q == b.q and a.r == b.r


def cube_eq(a: Cube, b: Cube) -> bool:
    return a.x == b.x and a.y == b.y and a.z == b.z


def _fmt(n: Number) -> str:
    n = normalize_zero(n)
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return str(n)


def axial_key(a: Axial) -> str:
    """Stable ``"q,r"`` string key, e.g. for logging or YAML mappings."""
    return f"{_fmt(a.q)},{_fmt(a.r)}"


def cube_key(c: Cube) -> str:
    return f"{_fmt(c.x)},{_fmt(c.y)},{_fmt(c.z)}"


def parse_axial_key(key: str) -> Axial:
    """Parse a ``"q,r"`` key (braces and whitespace tolerated).

    Raises:
        HexDomainError: If the key does not hold exactly two integers.
    """
    parts = [p.strip() for p in key.strip().strip("{}").split(",")]
    if len(parts) != 2 or not all(parts):
        raise HexDomainError(f"Invalid axial key: {key!r}")
    try:
        q, r = int(parts[0]), int(parts[1])
    except ValueError as e:
        raise HexDomainError(f"Invalid axial key: {key!r}") from e
    return Axial(q, r)


# -- Serialization -------------------------------------------------------

def axial_serialize(a: Axial) -> list[Number]:
    return [a.q, a.r]


def axial_deserialize(data: Sequence[Number]) -> Axial:
    if len(data) != 2:
        raise HexDomainError(f"Axial needs 2 components, got {len(data)}")
    return Axial(data[0], data[1])


def cube_serialize(c: Cube) -> list[Number]:
    return [c.x, c.y, c.z]


def cube_deserialize(data: Sequence[Number]) -> Cube:
    if len(data) != 3:
        raise HexDomainError(f"Cube needs 3 components, got {len(data)}")
    return Cube(data[0], data[1], data[2])


# -- Pixel conversion (pointy-top) ---------------------------------------

def axial_to_world(a: Axial, size: float = HEX_SIZE) -> tuple[float, float]:
    """Center of the hex in world units."""
    x = size * (SQRT3 * a.q + SQRT3 / 2 * a.r)
    y = size * 1.5 * a.r
    return normalize_zero(x), normalize_zero(y)


def world_to_axial(x: float, y: float, size: float = HEX_SIZE) -> Axial:
    """Hex containing the world-space point (x, y)."""
    qf = (SQRT3 / 3 * x - y / 3) / size
    rf = (2 / 3 * y) / size
    return axial_round(qf, rf)


# The 6 cube direction vectors, ordered 0..5.
# Axial equivalents: (1,0) (1,-1) (0,-1) (-1,0) (-1,1) (0,1)
CUBE_DIRECTIONS: tuple[Cube, ...] = (
    Cube(1, -1, 0),   # E
    Cube(1, 0, -1),   # NE
    Cube(0, 1, -1),   # NW
    Cube(-1, 1, 0),   # W
    Cube(-1, 0, 1),   # SW
    Cube(0, -1, 1),   # SE
)

AXIAL_ZERO = Axial(0, 0)
CUBE_ZERO = Cube(0, 0, 0)
