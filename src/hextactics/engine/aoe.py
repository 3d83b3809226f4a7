"""Area of effect — hex shape generators for abilities.

Shapes:
- circle: every hex within a radius
- donut: annulus between an inner and outer radius
- line: a beam along one of the 6 directions, optionally thickened
- cone: a wedge whose aperture grows with ``widen``
- bolt: the straight hex line between two points, optionally truncated

Every generator returns an ordered list of unique hexes with no metadata;
callers intersect it with their own unit and board state.  Clipping at
blockers and LOS filtering are separate post-processing steps.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from hextactics.models.board import HexPredicate
from hextactics.models.hex import CUBE_DIRECTIONS, Axial, Cube, HexDomainError
from hextactics.util.hex_math import (
    cube_direction,
    cube_sub,
    hex_disk,
    hex_linedraw,
)


def unique_cells(cells: Iterable[Axial]) -> list[Axial]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(cells))


# -- Direction helpers ---------------------------------------------------

def dir_diff(a: int, b: int) -> int:
    """Smallest number of 60 degree steps between two directions."""
    d = abs(a - b) % 6
    return min(d, 6 - d)


def dominant_direction(rel: Cube) -> int:
    """Direction whose unit vector best matches `rel` (max dot product)."""
    best = 0
    best_dot = float("-inf")
    for i, d in enumerate(CUBE_DIRECTIONS):
        dot = rel.x * d.x + rel.y * d.y + rel.z * d.z
        if dot > best_dot:
            best_dot = dot
            best = i
    return best


# -- Circle / donut ------------------------------------------------------

def aoe_circle(origin: Axial, radius: int) -> list[Axial]:
    return hex_disk(origin, radius)


def aoe_donut(
    origin: Axial,
    min_radius: int,
    max_radius: int,
    include_origin: bool = False,
) -> list[Axial]:
    """Hexes with min_radius <= distance <= max_radius.

    Invalid bands (negative radii, max < min) give an empty list.
    ``include_origin`` only matters for the degenerate 0..0 band.
    """
    if min_radius < 0 or max_radius < 0 or max_radius < min_radius:
        return []
    if max_radius == 0:
        return [origin] if include_origin else []
    outer = hex_disk(origin, max_radius)
    if min_radius == 0:
        return outer
    inner = set(hex_disk(origin, min_radius - 1))
    return [h for h in outer if h not in inner]


# -- Line / bolt ---------------------------------------------------------

def aoe_line(
    origin: Axial,
    direction: int,
    length: int,
    thickness: int = 1,
    include_origin: bool = True,
) -> list[Axial]:
    """A beam of `length` steps along `direction`.

    ``thickness`` > 1 widens every step sideways (directions +/-2) by
    ``thickness - 1`` hexes on each side.  Cells come out step by step,
    the center column first within a step.
    """
    if length < 0:
        raise HexDomainError(f"Line length must be >= 0, got {length}")
    thickness = max(1, thickness)
    fwd = cube_direction(direction)
    left = CUBE_DIRECTIONS[(direction + 2) % 6]
    right = CUBE_DIRECTIONS[(direction + 4) % 6]

    cells: list[Axial] = [origin] if include_origin else []
    for step in range(1, length + 1):
        cq = origin.q + fwd.x * step
        cr = origin.r + fwd.z * step
        cells.append(Axial(cq, cr))
        for w in range(1, thickness):
            cells.append(Axial(cq + left.x * w, cr + left.z * w))
            cells.append(Axial(cq + right.x * w, cr + right.z * w))
    return unique_cells(cells)


def aoe_bolt(origin: Axial, to: Axial, max_length: Optional[int] = None) -> list[Axial]:
    """Straight hex line from origin to `to`, at most ``max_length`` steps."""
    line = hex_linedraw(origin, to)
    if max_length is None:
        return line
    return line[:max(0, max_length + 1)]


# -- Cone ----------------------------------------------------------------

def aoe_cone(
    origin: Axial,
    direction: int,
    radius: int,
    widen: int = 1,
    include_origin: bool = False,
) -> list[Axial]:
    """Wedge out to `radius` facing `direction`.

    A hex is included when its dominant direction from the origin is at
    most ``widen`` steps away from ``direction``: 0 is about 60 degrees,
    1 about 180 and 2 about 300.
    """
    cube_direction(direction)  # raises on a bad direction
    if not 0 <= widen <= 3:
        raise HexDomainError(f"Cone widen must be in 0..3, got {widen}")

    o = origin.to_cube()
    cells: list[Axial] = []
    for h in hex_disk(origin, radius):
        if h == origin:
            if include_origin:
                cells.append(h)
            continue
        rel = cube_sub(h.to_cube(), o)
        if dir_diff(dominant_direction(rel), direction) <= widen:
            cells.append(h)
    return cells


# -- Post-processing -----------------------------------------------------

def clip_line_by_blockers(
    cells: Iterable[Axial],
    is_blocked: HexPredicate,
    include_blocked_cell: bool = True,
) -> list[Axial]:
    """Cut an ordered line of cells at the first blocked one."""
    out: list[Axial] = []
    for h in cells:
        if is_blocked(h):
            if include_blocked_cell:
                out.append(h)
            break
        out.append(h)
    return out


def filter_by_los(
    origin: Axial,
    cells: Iterable[Axial],
    has_line_of_sight: Callable[[Axial, Axial], bool],
) -> list[Axial]:
    """Keep only the cells `origin` can see."""
    return [h for h in cells if has_line_of_sight(origin, h)]
