from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Protocol

DETERMINANT_EPSILON = 1e-10


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


class Intersectable(Protocol):
    @property
    def start(self) -> Point: ...

    @property
    def end(self) -> Point: ...


def line_parameters(
    a1: Point, a2: Point, b1: Point, b2: Point,
) -> Optional[tuple[float, float]]:
    """Solve ``a1 + u·(a2-a1) == b1 + v·(b2-b1)`` for ``(u, v)``.

    Returns ``None`` for parallel or collinear lines.
    """
    adx = a2.x - a1.x
    ady = a2.y - a1.y
    bdx = b2.x - b1.x
    bdy = b2.y - b1.y

    det = adx * bdy - ady * bdx
    if abs(det) < DETERMINANT_EPSILON:
        return None

    dx = b1.x - a1.x
    dy = b1.y - a1.y
    u = (dx * bdy - dy * bdx) / det
    v = (dx * ady - dy * adx) / det
    return u, v


@dataclass(frozen=True)
class Edge:
    start: Point
    end: Point

    @property
    def midpoint(self) -> Point:
        return Point((self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2)

    @property
    def angle(self) -> float:
        return math.atan2(self.end.y - self.start.y, self.end.x - self.start.x)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)

    def intersect(self, other: Intersectable) -> Optional[Point]:
        """Segment/segment intersection; both parameters must lie in [0, 1]."""
        params = line_parameters(self.start, self.end, other.start, other.end)
        if params is None:
            return None
        u, v = params
        if 0.0 <= u <= 1.0 and 0.0 <= v <= 1.0:
            return Point(
                self.start.x + u * (self.end.x - self.start.x),
                self.start.y + u * (self.end.y - self.start.y),
            )
        return None


@dataclass(frozen=True)
class Ray:
    """Half-line from *origin* at angle *direction* (radians).

    *length* fixes :attr:`endpoint`; it bounds the ray only when the ray is
    the *target* of another intersection test.
    """

    origin: Point
    direction: float
    length: float = 100.0
    edge_index: Optional[int] = None

    @property
    def start(self) -> Point:
        return self.origin

    @property
    def endpoint(self) -> Point:
        return Point(
            self.origin.x + math.cos(self.direction) * self.length,
            self.origin.y + math.sin(self.direction) * self.length,
        )

    @property
    def end(self) -> Point:
        return self.endpoint

    @property
    def angle(self) -> float:
        return self.direction

    def intersect(self, other: Intersectable) -> Optional[Point]:
        params = line_parameters(self.origin, self.endpoint, other.start, other.end)
        if params is None:
            return None
        u, v = params
        if u >= 0.0 and 0.0 <= v <= 1.0:
            end = self.endpoint
            return Point(
                self.origin.x + u * (end.x - self.origin.x),
                self.origin.y + u * (end.y - self.origin.y),
            )
        return None

    def intersect_edge(self, edge: Edge) -> Optional[Point]:
        return self.intersect(edge)

    def clipped(self, length: float) -> "Ray":
        return Ray(self.origin, self.direction, length, self.edge_index)

    @classmethod
    def from_edge(cls, edge: Edge) -> "Ray":
        return cls(edge.start, edge.angle, edge.magnitude)


@dataclass(frozen=True)
class Style:
    """Fill/stroke attributes handed through to renderers untouched."""

    fill: str = "aquamarine"
    fill_opacity: float = 1.0
    stroke: str = "black"
    stroke_width: float = 1.0
    stroke_opacity: float = 1.0
    motif_color: str = "purple"

    @property
    def key(self) -> str:
        return (
            f"{self.fill}-{self.fill_opacity}-{self.stroke}-"
            f"{self.stroke_width}-{self.stroke_opacity}"
        )

    def to_dict(self) -> dict:
        return {
            "fill": self.fill,
            "fill_opacity": self.fill_opacity,
            "stroke": self.stroke,
            "stroke_width": self.stroke_width,
            "stroke_opacity": self.stroke_opacity,
            "motif_color": self.motif_color,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Style":
        defaults = cls()
        return cls(
            fill=payload.get("fill", defaults.fill),
            fill_opacity=payload.get("fill_opacity", defaults.fill_opacity),
            stroke=payload.get("stroke", defaults.stroke),
            stroke_width=payload.get("stroke_width", defaults.stroke_width),
            stroke_opacity=payload.get("stroke_opacity", defaults.stroke_opacity),
            motif_color=payload.get("motif_color", defaults.motif_color),
        )


@dataclass(frozen=True)
class Bounds:
    width: float
    height: float


@dataclass(frozen=True)
class UnitDimensions:
    width: float
    height: float


@dataclass(frozen=True)
class TilePlacement:
    """One tile emitted by a tiling pattern.

    *relative_size* is the tile's circumradius divided by the pattern's
    nominal size.  *style_key* is one of ``default``, ``style1``,
    ``style2``, ``style3``.
    """

    polygon_type: str
    relative_size: float
    x: float
    y: float
    rotation: float = 0.0
    style_key: str = "default"
