"""Hex math utilities — geometry functions for hexagonal grids.

Cube-space primitives do the work; the ``hex_*`` functions are the axial
wrappers the rest of the engine calls.  All output is normalized.

Reference: https://www.redblobgames.com/grids/hexagons/
"""

from __future__ import annotations

from hextactics.models.hex import (
    CUBE_DIRECTIONS,
    Axial,
    Cube,
    HexDomainError,
    Number,
    axial_to_cube,
    cube_round,
    cube_to_axial,
)


# -- Vector ops ----------------------------------------------------------

def cube_add(a: Cube, b: Cube) -> Cube:
    return Cube(a.x + b.x, a.y + b.y, a.z + b.z)


def cube_sub(a: Cube, b: Cube) -> Cube:
    return Cube(a.x - b.x, a.y - b.y, a.z - b.z)


def cube_scale(a: Cube, k: Number) -> Cube:
    return Cube(a.x * k, a.y * k, a.z * k)


def cube_lerp(a: Cube, b: Cube, t: float) -> tuple[float, float, float]:
    """Fractional point between a and b; not snapped to a hex."""
    return (
        a.x + (b.x - a.x) * t,
        a.y + (b.y - a.y) * t,
        a.z + (b.z - a.z) * t,
    )


def axial_add(a: Axial, b: Axial) -> Axial:
    return cube_to_axial(cube_add(axial_to_cube(a), axial_to_cube(b)))


def axial_sub(a: Axial, b: Axial) -> Axial:
    return cube_to_axial(cube_sub(axial_to_cube(a), axial_to_cube(b)))


# -- Distance ------------------------------------------------------------

def cube_distance(a: Cube, b: Cube) -> Number:
    """Chebyshev distance in cube space."""
    return max(abs(a.x - b.x), abs(a.y - b.y), abs(a.z - b.z))


def hex_distance(a: Axial, b: Axial) -> Number:
    """Compute the hex grid distance between two coordinates."""
    return cube_distance(axial_to_cube(a), axial_to_cube(b))


axial_distance = hex_distance


# -- Directions & neighbors ----------------------------------------------

def cube_direction(direction: int) -> Cube:
    """Unit vector for direction 0..5."""
    if not isinstance(direction, int) or not 0 <= direction < 6:
        raise HexDomainError(f"Direction must be an int in 0..5, got {direction!r}")
    return CUBE_DIRECTIONS[direction]


def cube_neighbor(c: Cube, direction: int) -> Cube:
    return cube_add(c, cube_direction(direction))


def cube_neighbors(c: Cube) -> list[Cube]:
    return [cube_add(c, d) for d in CUBE_DIRECTIONS]


def hex_neighbor(a: Axial, direction: int) -> Axial:
    d = cube_direction(direction)
    return Axial(a.q + d.x, a.r + d.z)


def hex_neighbors(coord: Axial) -> list[Axial]:
    """Return the 6 neighbors of a hex coordinate, direction 0 first."""
    return [Axial(coord.q + d.x, coord.r + d.z) for d in CUBE_DIRECTIONS]


def are_neighbors(a: Axial, b: Axial) -> bool:
    return hex_distance(a, b) == 1


# -- Lines ---------------------------------------------------------------

def cube_line(a: Cube, b: Cube) -> list[Cube]:
    """Inclusive line of cubes from a to b.

    Samples N + 1 evenly spaced points, rounds each to a hex and drops
    consecutive duplicates (possible at short range).
    """
    n = cube_distance(a, b)
    if n == 0:
        return [Cube(a.x, a.y, a.z)]

    results: list[Cube] = []
    steps = max(1, int(round(n)))
    for i in range(steps + 1):
        fx, fy, fz = cube_lerp(a, b, i / steps)
        c = cube_round(fx, fy, fz)
        if results and results[-1] == c:
            continue
        results.append(c)
    return results


def hex_linedraw(a: Axial, b: Axial) -> list[Axial]:
    """Draw a line between two hex coordinates.

    Returns a list of hex coordinates from a to b (inclusive).
    """
    return [cube_to_axial(c) for c in cube_line(axial_to_cube(a), axial_to_cube(b))]


# -- Rings & spirals -----------------------------------------------------

def cube_ring(center: Cube, radius: int) -> list[Cube]:
    """All cubes at exactly `radius` steps, in a fixed winding order.

    Raises:
        HexDomainError: If radius is negative.
    """
    if radius < 0:
        raise HexDomainError(f"Ring radius must be >= 0, got {radius}")
    if radius == 0:
        return [center]

    results: list[Cube] = []
    # Start `radius` steps out in direction 4, then walk the six sides
    h = cube_add(center, cube_scale(CUBE_DIRECTIONS[4], radius))
    for side in range(6):
        for _ in range(radius):
            results.append(h)
            h = cube_neighbor(h, side)
    return results


def hex_ring(center: Axial, radius: int) -> list[Axial]:
    """Return all hexes at exactly `radius` distance from center."""
    return [cube_to_axial(c) for c in cube_ring(axial_to_cube(center), radius)]


def cube_spiral(center: Cube, max_radius: int) -> list[Cube]:
    results: list[Cube] = []
    for radius in range(max_radius + 1):
        results.extend(cube_ring(center, radius))
    return results


def hex_spiral(center: Axial, max_radius: int) -> list[Axial]:
    """Rings 0..max_radius concatenated, center first."""
    return [cube_to_axial(c) for c in cube_spiral(axial_to_cube(center), max_radius)]


# -- Range (disk) --------------------------------------------------------

def cube_range(center: Cube, radius: int) -> list[Cube]:
    """All cubes within `radius` steps (inclusive); empty for radius < 0."""
    if radius < 0:
        return []
    results: list[Cube] = []
    for dx in range(-radius, radius + 1):
        for dy in range(max(-radius, -dx - radius), min(radius, -dx + radius) + 1):
            dz = -dx - dy
            results.append(Cube(center.x + dx, center.y + dy, center.z + dz))
    return results


def hex_disk(center: Axial, radius: int) -> list[Axial]:
    """Return all hexes within `radius` distance from center (inclusive)."""
    return [cube_to_axial(c) for c in cube_range(axial_to_cube(center), radius)]


def disk_size(radius: int) -> int:
    """Number of hexes in a disk: 1 + 3r(r+1)."""
    if radius < 0:
        return 0
    return 1 + 3 * radius * (radius + 1)


# -- Rotations & mirrors -------------------------------------------------

def cube_rotate_right(c: Cube) -> Cube:
    """Rotate 60 degrees about the origin; direction i maps to i + 1."""
    return Cube(-c.y, -c.z, -c.x)


def cube_rotate_left(c: Cube) -> Cube:
    """Inverse of cube_rotate_right; direction i maps to i - 1."""
    return Cube(-c.z, -c.x, -c.y)


def cube_rotate(c: Cube, steps: int) -> Cube:
    """Rotate `steps` times to the right; negative steps rotate left."""
    out = c
    for _ in range(((steps % 6) + 6) % 6):
        out = cube_rotate_right(out)
    return out


def cube_rotate_around(pivot: Cube, c: Cube, steps: int) -> Cube:
    return cube_add(pivot, cube_rotate(cube_sub(c, pivot), steps))


def cube_mirror_q(c: Cube) -> Cube:
    """Mirror across the q axis (swap y and z)."""
    return Cube(c.x, c.z, c.y)


def cube_mirror_r(c: Cube) -> Cube:
    """Mirror across the r axis (swap x and y)."""
    return Cube(c.y, c.x, c.z)


def hex_rotate(a: Axial, steps: int) -> Axial:
    return cube_to_axial(cube_rotate(axial_to_cube(a), steps))


def hex_rotate_around(pivot: Axial, a: Axial, steps: int) -> Axial:
    return cube_to_axial(cube_rotate_around(axial_to_cube(pivot), axial_to_cube(a), steps))
