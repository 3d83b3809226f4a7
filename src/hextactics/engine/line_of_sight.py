"""Line of sight — ray tracing, soft cover and visibility fields.

A ray is the discrete hex line between two hexes.  Along it the tracer
checks, in this order for every step:

1. edge occlusion between the previous step and this one
2. tile occlusion (mid steps, and the target when it may not be opaque)
3. elevation: terrain rising strictly above the interpolated sight line

The first cause found in traversal order wins.  An edge hit on a step
short-circuits the other checks of that same step.  Soft cover is summed
over mid steps only and turned into a [0, 1] penalty with
``1 - exp(-k * sum)``.

Pure math: the board is read exclusively through the option callbacks.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from hextactics.models.board import EdgePredicate, ElevationFn, HexPredicate, SoftCoverFn
from hextactics.models.hex import Axial
from hextactics.models.results import BlockedBy, CoverResult, RayStep, RayTrace, StepKind
from hextactics.util.constants import MAX_SOFT_COVER, SOFT_COVER_K
from hextactics.util.hex_math import hex_disk, hex_linedraw

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LOSOptions:
    """Sight rules for one query.

    Attributes:
        blocks_at: Hex is opaque. Default: nothing is.
        blocks_edge: Edge between two hexes is opaque. Default: none are.
        soft_cover_at: Cover of a hex, clamped to [0, 1]. Default: 0.
        elevation_at: Terrain height, None when unknown. Default: no elevation rules.
        see_opaque_target: An opaque target hex is still visible.
        soft_cover_k: Decay factor for the cover penalty.
        max_soft_cover: Cap on the summed cover.
    """

    blocks_at: Optional[HexPredicate] = None
    blocks_edge: Optional[EdgePredicate] = None
    soft_cover_at: Optional[SoftCoverFn] = None
    elevation_at: Optional[ElevationFn] = None
    see_opaque_target: bool = True
    soft_cover_k: float = SOFT_COVER_K
    max_soft_cover: float = MAX_SOFT_COVER


_DEFAULT_OPTIONS = LOSOptions()


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _cover_value(raw: Optional[float]) -> float:
    """Cover reading clamped to [0, 1]; missing or NaN counts as 0."""
    if raw is None or math.isnan(raw):
        return 0.0
    return _clamp01(raw)


def _height(raw: Optional[float]) -> float:
    if raw is None or math.isnan(raw):
        return 0.0
    return raw


def cover_penalty(cover_sum: float, k: float = SOFT_COVER_K) -> float:
    """Map a soft-cover sum to a penalty in [0, 1]."""
    if cover_sum <= 0:
        return 0.0
    try:
        raw = 1.0 - math.exp(-k * cover_sum)
    except OverflowError:
        # Strongly negative k: exp() blows up, the clamp would give 0 anyway
        return 0.0
    return _clamp01(raw)


def trace_ray(a: Axial, b: Axial, opts: Optional[LOSOptions] = None) -> RayTrace:
    """Trace a ray from `a` to `b` and report what, if anything, blocks it.

    Args:
        a: Observer hex.
        b: Target hex.
        opts: Sight rules; defaults to an empty, fully transparent board.

    Returns:
        RayTrace with per-step details, the first blocking cause and the
        capped cover sum with its penalty.
    """
    opts = opts or _DEFAULT_OPTIONS
    line = hex_linedraw(a, b)
    last = len(line) - 1

    if last == 0:
        elevation = opts.elevation_at(a) if opts.elevation_at else None
        step = RayStep(hex=line[0], index=0, kind=StepKind.START, elevation=elevation)
        return RayTrace(steps=(step,), clear=True)

    if opts.elevation_at is not None:
        h_start = _height(opts.elevation_at(a))
        h_end = _height(opts.elevation_at(b))
    else:
        h_start = h_end = 0.0

    steps: list[RayStep] = []
    blocked_by = BlockedBy.NONE
    cover_sum = 0.0

    for i, h in enumerate(line):
        if i == 0:
            kind = StepKind.START
        elif i == last:
            kind = StepKind.TARGET
        else:
            kind = StepKind.MID

        blocked_edge = False
        blocked_tile = False
        blocked_elevation = False
        elevation: Optional[float] = None
        soft = 0.0

        if kind is not StepKind.START and opts.blocks_edge is not None:
            blocked_edge = bool(opts.blocks_edge(line[i - 1], h))

        if opts.elevation_at is not None:
            elevation = opts.elevation_at(h)

        if not blocked_edge:
            tile_checked = kind is StepKind.MID or (
                kind is StepKind.TARGET and not opts.see_opaque_target
            )
            if tile_checked and opts.blocks_at is not None:
                blocked_tile = bool(opts.blocks_at(h))

            if kind is StepKind.MID and elevation is not None and not math.isnan(elevation):
                sight_line = h_start + (h_end - h_start) * (i / last)
                blocked_elevation = elevation > sight_line

        if kind is StepKind.MID and opts.soft_cover_at is not None:
            soft = _cover_value(opts.soft_cover_at(h))
            cover_sum += soft

        if blocked_by is BlockedBy.NONE:
            if blocked_edge:
                blocked_by = BlockedBy.EDGE
            elif blocked_tile:
                blocked_by = BlockedBy.TILE
            elif blocked_elevation:
                blocked_by = BlockedBy.ELEVATION

        steps.append(RayStep(
            hex=h,
            index=i,
            kind=kind,
            elevation=elevation,
            soft_cover=soft,
            blocked_tile=blocked_tile,
            blocked_edge=blocked_edge,
            blocked_elevation=blocked_elevation,
        ))

    cover_sum = min(cover_sum, opts.max_soft_cover)
    return RayTrace(
        steps=tuple(steps),
        clear=blocked_by is BlockedBy.NONE,
        blocked_by=blocked_by,
        cover_sum=cover_sum,
        cover_penalty=cover_penalty(cover_sum, opts.soft_cover_k),
    )


def has_line_of_sight(a: Axial, b: Axial, opts: Optional[LOSOptions] = None) -> bool:
    """True if nothing blocks the ray from `a` to `b`."""
    return trace_ray(a, b, opts).clear


def cover_between(
    a: Axial,
    b: Axial,
    opts: Optional[LOSOptions] = None,
    include_steps: bool = False,
) -> CoverResult:
    """Cover and LOS read for an attack from `a` at `b`.

    Args:
        include_steps: Attach the raw ray steps for diagnostics.
    """
    trace = trace_ray(a, b, opts)
    return CoverResult(
        clear=trace.clear,
        penalty=trace.cover_penalty,
        sum=trace.cover_sum,
        blocked_by=trace.blocked_by,
        steps=trace.steps if include_steps else None,
    )


def visible_within_radius(
    origin: Axial,
    radius: int,
    opts: Optional[LOSOptions] = None,
) -> set[Axial]:
    """All hexes within `radius` that `origin` can see.

    Every cell is traced independently, so an opaque hex is itself visible
    (with ``see_opaque_target``) while the cells behind it are not.  Cost
    grows roughly with radius cubed; fine for battle-sized radii.
    """
    visible: set[Axial] = {origin}
    for h in hex_disk(origin, radius):
        if h != origin and has_line_of_sight(origin, h, opts):
            visible.add(h)
    log.debug("Visibility from %r radius %d: %d hexes", origin, radius, len(visible))
    return visible
