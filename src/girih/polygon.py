"""Polygon container with derived metrics and motif geometry."""

from __future__ import annotations

import math
from functools import cached_property
from typing import Iterable, List, Optional, Sequence

from .geometry import (
    best_contact_point,
    centroid,
    distance,
    point_in_polygon,
    regular_vertices,
    rotate_point,
    side_length_to_radius,
    signed_area,
)
from .models import Edge, Point, Ray, Style
from .motif import RayPair, assemble_motif_polygons, cast_rays, pair_rays

DEFAULT_CONTACT_ANGLE = 22.5
DEFAULT_MOTIF_COLOR = "purple"
DEFAULT_RADIUS = 50.0


class Polygon:
    """Explicit or generative polygon.

    A *generative* polygon is defined by ``sides``, ``radius`` (the
    circumradius), a centre and a ``rotation``; its vertices are derived.
    An *explicit* polygon is defined by its vertex list.  Either way the
    instance is treated as immutable: derived attributes are computed once
    and operations such as :meth:`rotate` return new polygons.

    *contact_angle* is in degrees.  *ancestor_edges* holds the original
    edges of the tile this polygon was derived from by the rosette
    transform; midpoints are snapped to them.
    """

    def __init__(
        self,
        vertices: Optional[Iterable[Point]] = None,
        *,
        sides: Optional[int] = None,
        radius: float = DEFAULT_RADIUS,
        center_x: float = 0.0,
        center_y: float = 0.0,
        rotation: float = 0.0,
        contact_angle: float = DEFAULT_CONTACT_ANGLE,
        motif_color: str = DEFAULT_MOTIF_COLOR,
        style: Optional[Style] = None,
        ancestor_edges: Optional[Sequence[Edge]] = None,
    ) -> None:
        if vertices is not None:
            self._manual_vertices: Optional[tuple[Point, ...]] = tuple(vertices)
            self._sides = len(self._manual_vertices)
        else:
            if sides is None:
                raise ValueError("Either vertices or sides must be provided")
            if sides < 3:
                raise ValueError("sides must be >= 3")
            self._manual_vertices = None
            self._sides = sides
        self._radius = radius
        self._center_x = center_x
        self._center_y = center_y
        self._rotation = rotation

        self.contact_angle = contact_angle
        self.motif_color = motif_color
        self.style = style
        self.ancestor_edges: Optional[tuple[Edge, ...]] = (
            tuple(ancestor_edges) if ancestor_edges is not None else None
        )

    def __repr__(self) -> str:
        kind = "explicit" if self.is_explicit else "regular"
        return (
            f"Polygon({kind}, sides={self.sides}, "
            f"center=({self.center.x:.3f}, {self.center.y:.3f}))"
        )

    # ── Definition ──────────────────────────────────────────────────

    @property
    def is_explicit(self) -> bool:
        return self._manual_vertices is not None

    @property
    def sides(self) -> int:
        return self._sides

    @property
    def radius(self) -> float:
        """Circumradius from the definition (explicit: centre to vertex 0)."""
        if self._manual_vertices is None:
            return self._radius
        if not self._manual_vertices:
            return 0.0
        return distance(self.center, self._manual_vertices[0])

    @property
    def center_x(self) -> float:
        return self._center_x if self._manual_vertices is None else self.center.x

    @property
    def center_y(self) -> float:
        return self._center_y if self._manual_vertices is None else self.center.y

    @property
    def rotation(self) -> float:
        """Phase relative to the default regular layout.

        For explicit polygons this is read off vertex 0, so a regular
        polygon rebuilt from ``sides``/``radius``/``rotation`` lines up.
        """
        if self._manual_vertices is None:
            return self._rotation
        if not self._manual_vertices:
            return 0.0
        c = self.center
        v0 = self._manual_vertices[0]
        return math.atan2(v0.y - c.y, v0.x - c.x) - (-math.pi / 2 + math.pi / self.sides)

    # ── Constructors ────────────────────────────────────────────────

    @classmethod
    def regular(
        cls,
        sides: int,
        radius: float = DEFAULT_RADIUS,
        center_x: float = 0.0,
        center_y: float = 0.0,
        **kwargs,
    ) -> "Polygon":
        return cls(sides=sides, radius=radius, center_x=center_x, center_y=center_y, **kwargs)

    @classmethod
    def triangle(cls, radius: float = DEFAULT_RADIUS, center_x: float = 0.0, center_y: float = 0.0, **kwargs) -> "Polygon":
        return cls.regular(3, radius, center_x, center_y, **kwargs)

    @classmethod
    def square(cls, radius: float = DEFAULT_RADIUS, center_x: float = 0.0, center_y: float = 0.0, **kwargs) -> "Polygon":
        return cls.regular(4, radius, center_x, center_y, **kwargs)

    @classmethod
    def pentagon(cls, radius: float = DEFAULT_RADIUS, center_x: float = 0.0, center_y: float = 0.0, **kwargs) -> "Polygon":
        return cls.regular(5, radius, center_x, center_y, **kwargs)

    @classmethod
    def hexagon(cls, radius: float = DEFAULT_RADIUS, center_x: float = 0.0, center_y: float = 0.0, **kwargs) -> "Polygon":
        return cls.regular(6, radius, center_x, center_y, **kwargs)

    @classmethod
    def octagon(cls, radius: float = DEFAULT_RADIUS, center_x: float = 0.0, center_y: float = 0.0, **kwargs) -> "Polygon":
        return cls.regular(8, radius, center_x, center_y, **kwargs)

    @classmethod
    def dodecagon(cls, radius: float = DEFAULT_RADIUS, center_x: float = 0.0, center_y: float = 0.0, **kwargs) -> "Polygon":
        return cls.regular(12, radius, center_x, center_y, **kwargs)

    @classmethod
    def regular_by_side_length(
        cls,
        sides: int,
        side_length: float,
        center_x: float = 0.0,
        center_y: float = 0.0,
        **kwargs,
    ) -> "Polygon":
        if sides < 3:
            raise ValueError("sides must be >= 3")
        radius = side_length_to_radius(sides, side_length)
        return cls.regular(sides, radius, center_x, center_y, **kwargs)

    @classmethod
    def triangle_by_side_length(cls, side_length: float, center_x: float = 0.0, center_y: float = 0.0) -> "Polygon":
        return cls.regular_by_side_length(3, side_length, center_x, center_y)

    @classmethod
    def square_by_side_length(cls, side_length: float, center_x: float = 0.0, center_y: float = 0.0) -> "Polygon":
        return cls.regular_by_side_length(4, side_length, center_x, center_y)

    @classmethod
    def pentagon_by_side_length(cls, side_length: float, center_x: float = 0.0, center_y: float = 0.0) -> "Polygon":
        return cls.regular_by_side_length(5, side_length, center_x, center_y)

    @classmethod
    def hexagon_by_side_length(cls, side_length: float, center_x: float = 0.0, center_y: float = 0.0) -> "Polygon":
        return cls.regular_by_side_length(6, side_length, center_x, center_y)

    @classmethod
    def octagon_by_side_length(cls, side_length: float, center_x: float = 0.0, center_y: float = 0.0) -> "Polygon":
        return cls.regular_by_side_length(8, side_length, center_x, center_y)

    @classmethod
    def dodecagon_by_side_length(cls, side_length: float, center_x: float = 0.0, center_y: float = 0.0) -> "Polygon":
        return cls.regular_by_side_length(12, side_length, center_x, center_y)

    # ── Derived geometry ────────────────────────────────────────────

    @cached_property
    def vertices(self) -> List[Point]:
        if self._manual_vertices is not None:
            return list(self._manual_vertices)
        return regular_vertices(
            self._sides, self._radius, self._center_x, self._center_y, self._rotation,
        )

    @cached_property
    def signed_area(self) -> float:
        return signed_area(self.vertices)

    @cached_property
    def area(self) -> float:
        return abs(self.signed_area)

    @cached_property
    def perimeter(self) -> float:
        return sum(edge.magnitude for edge in self.edges)

    @cached_property
    def center(self) -> Point:
        if self._manual_vertices is None:
            return Point(self._center_x, self._center_y)
        return centroid(self._manual_vertices)

    @cached_property
    def edges(self) -> List[Edge]:
        verts = self.vertices
        n = len(verts)
        if n < 2:
            return []
        return [Edge(verts[i], verts[(i + 1) % n]) for i in range(n)]

    @cached_property
    def circumradius(self) -> float:
        if not self.edges:
            return 0.0
        return self.edges[0].magnitude / (2 * math.sin(math.pi / self.sides))

    @cached_property
    def inradius(self) -> float:
        if not self.edges:
            return 0.0
        return self.edges[0].magnitude / (2 * math.tan(math.pi / self.sides))

    @cached_property
    def apothem(self) -> float:
        return self.circumradius * math.cos(math.pi / self.sides)

    @cached_property
    def height(self) -> float:
        if self.sides % 2 == 0:
            return 2 * self.inradius
        return self.inradius + self.circumradius

    @cached_property
    def midpoints(self) -> List[Point]:
        if self.ancestor_edges is None:
            return [edge.midpoint for edge in self.edges]
        center = self.center
        return [
            best_contact_point(edge, self.ancestor_edges, center, edge.midpoint)
            for edge in self.edges
        ]

    # ── Motif ───────────────────────────────────────────────────────

    @cached_property
    def rays(self) -> List[Ray]:
        return cast_rays(self)

    @cached_property
    def motif(self) -> List[RayPair]:
        return pair_rays(self.rays, self.sides)

    @cached_property
    def motif_polygons(self) -> List[List[Point]]:
        return assemble_motif_polygons(self.motif)

    @property
    def motif_segments(self) -> List[tuple[Point, Point]]:
        segments: List[tuple[Point, Point]] = []
        for pair in self.motif:
            segments.extend(pair.segments())
        return segments

    # ── Operations ──────────────────────────────────────────────────

    def with_attributes(self, **changes) -> "Polygon":
        """Copy with different contact angle / motif colour / style / ancestors."""
        attrs = {
            "contact_angle": self.contact_angle,
            "motif_color": self.motif_color,
            "style": self.style,
            "ancestor_edges": self.ancestor_edges,
        }
        unknown = set(changes) - set(attrs)
        if unknown:
            raise TypeError(f"Unknown polygon attributes: {sorted(unknown)}")
        attrs.update(changes)
        if self._manual_vertices is not None:
            return Polygon(self._manual_vertices, **attrs)
        return Polygon(
            sides=self._sides,
            radius=self._radius,
            center_x=self._center_x,
            center_y=self._center_y,
            rotation=self._rotation,
            **attrs,
        )

    def rotate(self, angle: float) -> "Polygon":
        """Return a copy turned by *angle* radians about its centre."""
        attrs = {
            "contact_angle": self.contact_angle,
            "motif_color": self.motif_color,
            "style": self.style,
            "ancestor_edges": self.ancestor_edges,
        }
        if self._manual_vertices is None:
            return Polygon(
                sides=self._sides,
                radius=self._radius,
                center_x=self._center_x,
                center_y=self._center_y,
                rotation=self._rotation + angle,
                **attrs,
            )
        center = self.center
        return Polygon(
            [rotate_point(v, angle, center) for v in self._manual_vertices],
            **attrs,
        )

    def contains(self, point: Point) -> bool:
        return point_in_polygon(point, self.vertices)

    def to_dict(self) -> dict:
        """Renderer-facing payload: plain lists and dicts only."""
        return {
            "vertices": [[v.x, v.y] for v in self.vertices],
            "style": self.style.to_dict() if self.style is not None else None,
            "contact_angle": self.contact_angle,
            "motif_color": self.motif_color,
            "motif_polygons": [
                [[p.x, p.y] for p in points] for points in self.motif_polygons
            ],
            "motif_segments": [
                [[a.x, a.y], [b.x, b.y]] for a, b in self.motif_segments
            ],
        }
