"""Quality checks for generated polygon sets."""

from __future__ import annotations

import math
from typing import Dict, List, Sequence, Tuple

from .models import Bounds, Point
from .polygon import Polygon


def min_signed_area(polygons: Sequence[Polygon]) -> float:
    if not polygons:
        return 0.0
    return min(p.signed_area for p in polygons)


def uncovered_points(
    polygons: Sequence[Polygon],
    bounds: Bounds,
    step: float = 10.0,
) -> List[Point]:
    """Sample points of ``[0, width] × [0, height]`` inside no polygon.

    Samples sit at cell centres of a *step* grid so that they avoid the
    shared tile edges of the regular tilings.
    """
    if step <= 0:
        raise ValueError("step must be > 0")
    cols = max(1, math.ceil(bounds.width / step))
    rows = max(1, math.ceil(bounds.height / step))
    missing: List[Point] = []
    for row in range(rows):
        y = min((row + 0.5) * step, bounds.height)
        for col in range(cols):
            x = min((col + 0.5) * step, bounds.width)
            point = Point(x, y)
            if not any(p.contains(point) for p in polygons):
                missing.append(point)
    return missing


def overlapping_pairs(polygons: Sequence[Polygon]) -> List[Tuple[int, int]]:
    """Index pairs where one polygon's centre lies inside the other."""
    pairs: List[Tuple[int, int]] = []
    for i, a in enumerate(polygons):
        for j in range(i + 1, len(polygons)):
            b = polygons[j]
            reach = a.radius + b.radius
            if abs(a.center.x - b.center.x) > reach or abs(a.center.y - b.center.y) > reach:
                continue
            if a.contains(b.center) or b.contains(a.center):
                pairs.append((i, j))
    return pairs


def motif_ray_usage(polygon: Polygon) -> int:
    """Number of distinct rays claimed by the polygon's selected pairs."""
    used = set()
    for pair in polygon.motif:
        used.add(pair.index1)
        used.add(pair.index2)
    return len(used)


def diagnostics_report(polygons: Sequence[Polygon], bounds: Bounds, step: float = 10.0) -> Dict[str, object]:
    """Build a structured diagnostics report suitable for JSON export."""
    gaps = uncovered_points(polygons, bounds, step)
    overlaps = overlapping_pairs(polygons)
    return {
        "polygon_count": len(polygons),
        "min_signed_area": min_signed_area(polygons),
        "uncovered_samples": len(gaps),
        "overlapping_pairs": [list(pair) for pair in overlaps],
        "motif_pairs": sum(len(p.motif) for p in polygons),
        "passed": not gaps and not overlaps,
    }
