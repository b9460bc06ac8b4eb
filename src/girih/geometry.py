"""Geometry helper functions used across the package."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import Edge, Point

# Vertex keys live on a 1e-3 grid.
KEY_SCALE = 1000

VertexKey = Tuple[int, int]


def vertex_key(point: Point) -> VertexKey:
    return (round(point.x * KEY_SCALE), round(point.y * KEY_SCALE))


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def points_close(a: Point, b: Point, tol: float = 1e-3) -> bool:
    return abs(a.x - b.x) < tol and abs(a.y - b.y) < tol


def normalize(dx: float, dy: float) -> Tuple[float, float]:
    """Unit vector along ``(dx, dy)``; the zero vector maps to itself."""
    mag = math.hypot(dx, dy)
    if mag == 0:
        return (0.0, 0.0)
    return (dx / mag, dy / mag)


def rotate_point(point: Point, angle: float, center: Point) -> Point:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point.x - center.x
    dy = point.y - center.y
    return Point(center.x + dx * cos_a - dy * sin_a, center.y + dx * sin_a + dy * cos_a)


def signed_area(points: Sequence[Point]) -> float:
    """Shoelace area; positive for counter-clockwise (x right, y up) order."""
    n = len(points)
    if n < 3:
        return 0.0
    total = 0.0
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        total += a.x * b.y - b.x * a.y
    return total / 2.0


def centroid(points: Sequence[Point]) -> Point:
    """Vertex centroid (mean of the points)."""
    if not points:
        return Point(0.0, 0.0)
    return Point(
        sum(p.x for p in points) / len(points),
        sum(p.y for p in points) / len(points),
    )


def point_in_polygon(point: Point, points: Sequence[Point]) -> bool:
    """Even-odd rule containment test."""
    inside = False
    n = len(points)
    j = n - 1
    for i in range(n):
        pi = points[i]
        pj = points[j]
        if (pi.y > point.y) != (pj.y > point.y):
            x_cross = (pj.x - pi.x) * (point.y - pi.y) / (pj.y - pi.y) + pi.x
            if point.x < x_cross:
                inside = not inside
        j = i
    return inside


def regular_vertices(
    sides: int,
    radius: float,
    center_x: float = 0.0,
    center_y: float = 0.0,
    rotation: float = 0.0,
) -> List[Point]:
    """Vertices of a regular polygon.

    Vertex 0 starts at -π/2 and the polygon is then turned by π/sides, so
    an edge (not a vertex) sits at the top.  *rotation* is applied on top.
    """
    step = 2 * math.pi / sides
    phase = -math.pi / 2 + math.pi / sides + rotation
    return [
        Point(
            center_x + radius * math.cos(phase + i * step),
            center_y + radius * math.sin(phase + i * step),
        )
        for i in range(sides)
    ]


def side_length_to_radius(sides: int, side_length: float) -> float:
    return side_length / (2 * math.sin(math.pi / sides))


def best_contact_point(
    edge: Edge,
    original_edges: Iterable[Edge],
    center: Point,
    default: Point,
) -> Point:
    """Snap *default* to the closest crossing of *edge* with *original_edges*.

    A crossing replaces the default only if it lies nearer to *center*.
    """
    best = default
    best_distance = distance(default, center)
    for original in original_edges:
        hit: Optional[Point] = edge.intersect(original)
        if hit is None:
            continue
        hit_distance = distance(hit, center)
        if hit_distance < best_distance:
            best = hit
            best_distance = hit_distance
    return best
