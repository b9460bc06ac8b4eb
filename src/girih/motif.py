"""Star motifs derived from paired edge rays.

Each polygon edge casts two rays from its midpoint, tilted by the contact
angle either side of the inward normal.  Rays are clipped at the polygon
boundary, paired greedily by the length of the line they form, and the
resulting segments are chained into closed motif polygons.

Architecture
------------
- :func:`cast_rays`: rays per edge, clipped to the polygon.
- :func:`pair_rays`: candidate pairs, cost-sorted greedy selection.
- :func:`assemble_motif_polygons`: segment chaining into closed loops.

All three are pure functions; :class:`~girih.polygon.Polygon` caches
their results.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import cmp_to_key
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .geometry import distance, points_close
from .models import Edge, Point, Ray

if TYPE_CHECKING:
    from .polygon import Polygon

DEFAULT_RAY_LENGTH = 200.0
COST_TIE_TOLERANCE = 0.1
ANTI_PARALLEL_TOLERANCE = 1e-6
CHAIN_TOLERANCE = 1e-3


@dataclass(frozen=True)
class RayPair:
    """Two rays joined into one motif line.

    *clipped_ray1* / *clipped_ray2* run from each origin to
    *intersection_point*.  Collinear pairs meet halfway between the
    origins.
    """

    ray1: Ray
    ray2: Ray
    index1: int
    index2: int
    total_length: float
    intersection_point: Point
    clipped_ray1: Ray
    clipped_ray2: Ray
    collinear: bool = False

    def segments(self) -> List[Tuple[Point, Point]]:
        return [
            (self.clipped_ray1.origin, self.clipped_ray1.endpoint),
            (self.clipped_ray2.origin, self.clipped_ray2.endpoint),
        ]


# ═══════════════════════════════════════════════════════════════════
# Rays
# ═══════════════════════════════════════════════════════════════════

def cast_rays(polygon: "Polygon") -> List[Ray]:
    """Two clipped rays per edge, the ``+contact`` ray first."""
    contact = math.radians(polygon.contact_angle)
    edges = polygon.edges
    midpoints = polygon.midpoints
    rays: List[Ray] = []
    for i, edge in enumerate(edges):
        normal = edge.angle + math.pi / 2
        for direction in (normal + contact, normal - contact):
            probe = Ray(midpoints[i], direction, DEFAULT_RAY_LENGTH, edge_index=i)
            rays.append(probe.clipped(_nearest_hit(probe, edges, skip=i)))
    return rays


def _nearest_hit(ray: Ray, edges: Sequence[Edge], skip: int) -> float:
    nearest: Optional[float] = None
    for j, other in enumerate(edges):
        if j == skip:
            continue
        hit = ray.intersect_edge(other)
        if hit is None:
            continue
        d = distance(ray.origin, hit)
        if nearest is None or d < nearest:
            nearest = d
    return DEFAULT_RAY_LENGTH if nearest is None else nearest


# ═══════════════════════════════════════════════════════════════════
# Pairing
# ═══════════════════════════════════════════════════════════════════

def pair_skip(sides: int) -> int:
    """Ray-index distance between paired rays; larger polygons skip an edge."""
    return 3 if sides > 5 else 1


def pair_rays(rays: Sequence[Ray], sides: int) -> List[RayPair]:
    """Select non-overlapping ray pairs, cheapest first."""
    if not rays:
        return []
    skip = pair_skip(sides)
    n = len(rays)

    candidates: List[RayPair] = []
    for i in range(n):
        j = (i + skip) % n
        if i == j:
            continue
        pair = _candidate(rays[i], rays[j], i, j)
        if pair is not None:
            candidates.append(pair)

    ordered = sorted(candidates, key=cmp_to_key(_compare_cost))

    used: set[int] = set()
    selected: List[RayPair] = []
    for pair in ordered:
        if pair.index1 in used or pair.index2 in used:
            continue
        used.add(pair.index1)
        used.add(pair.index2)
        selected.append(pair)
    return selected


def _compare_cost(a: RayPair, b: RayPair) -> int:
    diff = a.total_length - b.total_length
    if abs(diff) < COST_TIE_TOLERANCE:
        return 0
    return -1 if diff < 0 else 1


def _anti_parallel(a: float, b: float) -> bool:
    diff = (a - b) % (2 * math.pi)
    return abs(diff - math.pi) < ANTI_PARALLEL_TOLERANCE


def _candidate(ray1: Ray, ray2: Ray, i: int, j: int) -> Optional[RayPair]:
    if _anti_parallel(ray1.direction, ray2.direction):
        total = distance(ray1.origin, ray2.origin)
        if total == 0:
            return None
        meet = Point(
            (ray1.origin.x + ray2.origin.x) / 2,
            (ray1.origin.y + ray2.origin.y) / 2,
        )
        return RayPair(
            ray1, ray2, i, j, total, meet,
            ray1.clipped(total / 2), ray2.clipped(total / 2),
            collinear=True,
        )

    meet = ray1.intersect(ray2)
    if meet is None:
        return None
    d1 = distance(ray1.origin, meet)
    d2 = distance(ray2.origin, meet)
    total = d1 + d2
    if total == 0:
        return None
    return RayPair(ray1, ray2, i, j, total, meet, ray1.clipped(d1), ray2.clipped(d2))


# ═══════════════════════════════════════════════════════════════════
# Motif polygons
# ═══════════════════════════════════════════════════════════════════

def assemble_motif_polygons(pairs: Sequence[RayPair]) -> List[List[Point]]:
    """Chain clipped segments sharing endpoints into closed point loops.

    Open chains are dropped; closed chains need at least 3 distinct points.
    """
    segments: List[Tuple[Point, Point]] = []
    for pair in pairs:
        segments.extend(pair.segments())

    used = [False] * len(segments)
    polygons: List[List[Point]] = []

    for i, (start, end) in enumerate(segments):
        if used[i]:
            continue
        used[i] = True
        chain = [start, end]
        closed = False

        while True:
            tail = chain[-1]
            if len(chain) > 2 and points_close(tail, chain[0], CHAIN_TOLERANCE):
                closed = True
                break
            nxt = _next_link(segments, used, tail)
            if nxt is None:
                break
            chain.append(nxt)

        if closed and len(chain) - 1 >= 3:
            polygons.append(chain[:-1])

    return polygons


def _next_link(
    segments: Sequence[Tuple[Point, Point]],
    used: List[bool],
    tail: Point,
) -> Optional[Point]:
    for j, (a, b) in enumerate(segments):
        if used[j]:
            continue
        if points_close(a, tail, CHAIN_TOLERANCE):
            used[j] = True
            return b
        if points_close(b, tail, CHAIN_TOLERANCE):
            used[j] = True
            return a
    return None
