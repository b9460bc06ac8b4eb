"""Rosette transform: re-tile a polygon set through a shared planar graph.

Every input polygon contributes vertices and edges to one graph:

- polygons with five or more sides add an inset regular polygon whose
  vertices are joined by spokes to the outer edge midpoints;
- triangles and squares add spokes from their centre to each edge's
  contact point.

Vertices are deduplicated on a 1e-3 grid, so spokes from neighbouring
tiles meet at shared contact points.  Degree-2 vertices lying on a straight
line are merged away, then the bounded faces of the graph are extracted by
rotational traversal and become the output polygons.

Architecture
------------
- :class:`PlanarGraph`: keyed vertices, undirected edges, ancestor tags.
- :func:`rosette_transform`: build, merge, walk faces, assemble.
- :class:`TopologyError`: a traversal arrived along an edge the vertex
  does not know about.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .geometry import VertexKey, best_contact_point, signed_area, vertex_key
from .models import Edge, Point
from .polygon import Polygon

logger = logging.getLogger(__name__)

COLLINEAR_TOLERANCE = 1e-3
MAX_FACE_STEPS = 50
MIN_FACE_AREA = 1e-6

EdgeKey = Tuple[VertexKey, VertexKey]


class TopologyError(RuntimeError):
    """The planar graph is inconsistent; face extraction cannot continue."""


def inner_radius(radius: float, sides: int) -> float:
    """Circumradius of the inset polygon used for rosettes."""
    n = sides
    return radius * (
        math.cos(math.pi / n)
        - math.sin(math.pi / n) * math.tan(math.pi * (n - 2) / (4 * n))
    )


def face_signature(keys: Sequence[VertexKey]) -> Tuple[VertexKey, ...]:
    """Lexicographically smallest rotation of a face's key cycle."""
    if not keys:
        return ()
    rotations = (tuple(keys[i:]) + tuple(keys[:i]) for i in range(len(keys)))
    return min(rotations)


def _edge_key(a: VertexKey, b: VertexKey) -> EdgeKey:
    return (a, b) if a <= b else (b, a)


def _collinear(a: Point, v: Point, b: Point) -> bool:
    cross = (v.x - a.x) * (b.y - a.y) - (v.y - a.y) * (b.x - a.x)
    return abs(cross) < COLLINEAR_TOLERANCE


def _strictly_between(v: Point, a: Point, b: Point) -> bool:
    length_sq = (b.x - a.x) ** 2 + (b.y - a.y) ** 2
    if length_sq < COLLINEAR_TOLERANCE:
        return False
    t = ((v.x - a.x) * (b.x - a.x) + (v.y - a.y) * (b.y - a.y)) / length_sq
    return COLLINEAR_TOLERANCE < t < 1 - COLLINEAR_TOLERANCE


class PlanarGraph:
    """Undirected graph over quantised vertex keys.

    ``ancestors`` maps a vertex key to the polygon that first contributed
    it; ``original_edges`` keeps the edges of every five-or-more-sided
    polygon for contact-point refinement.
    """

    def __init__(self) -> None:
        self.vertices: Dict[VertexKey, Point] = {}
        self.edges: Dict[EdgeKey, None] = {}
        self.ancestors: Dict[VertexKey, Polygon] = {}
        self.original_edges: Dict[Polygon, Tuple[Edge, ...]] = {}

    def __repr__(self) -> str:
        return f"PlanarGraph(vertices={len(self.vertices)}, edges={len(self.edges)})"

    @classmethod
    def from_polygons(cls, polygons: Iterable[Polygon]) -> "PlanarGraph":
        graph = cls()
        for polygon in polygons:
            if polygon.sides >= 5:
                graph.add_regular_polygon(polygon)
            else:
                graph.add_irregular_polygon(polygon)
        return graph

    # ── Construction ────────────────────────────────────────────────

    def add_vertex(self, point: Point, ancestor: Optional[Polygon] = None) -> VertexKey:
        """Insert *point* unless its key is taken; the first ancestor sticks."""
        key = vertex_key(point)
        if key not in self.vertices:
            self.vertices[key] = point
            if ancestor is not None:
                self.ancestors[key] = ancestor
        return key

    def add_edge(self, a: VertexKey, b: VertexKey) -> bool:
        if a == b:
            return False
        key = _edge_key(a, b)
        if key in self.edges:
            return False
        self.edges[key] = None
        return True

    def add_regular_polygon(self, polygon: Polygon) -> None:
        n = polygon.sides
        self.original_edges[polygon] = tuple(polygon.edges)
        inset = Polygon.regular(
            n,
            inner_radius(polygon.radius, n),
            polygon.center.x,
            polygon.center.y,
            rotation=polygon.rotation + math.pi / n,
        )
        inner = [self.add_vertex(v, polygon) for v in inset.vertices]
        outer = [self.add_vertex(m, polygon) for m in polygon.midpoints]
        for i in range(n):
            self.add_edge(outer[i], inner[i])
            self.add_edge(inner[i], inner[(i + 1) % n])

    def add_irregular_polygon(self, polygon: Polygon) -> None:
        center = polygon.center
        hub = self.add_vertex(center, polygon)
        ancestor = self.dominant_ancestor(polygon.vertices)
        reference = self.original_edges.get(ancestor) if ancestor is not None else None
        for edge in polygon.edges:
            contact = edge.midpoint
            if reference:
                contact = best_contact_point(edge, reference, center, contact)
            self.add_edge(self.add_vertex(contact, polygon), hub)

    def dominant_ancestor(self, points: Iterable[Point]) -> Optional[Polygon]:
        """Polygon tagged on most of *points*; ties go to the first seen."""
        counts = Counter(
            self.ancestors[key]
            for key in map(vertex_key, points)
            if key in self.ancestors
        )
        if not counts:
            return None
        return counts.most_common(1)[0][0]

    # ── Queries ─────────────────────────────────────────────────────

    def adjacency(self) -> Dict[VertexKey, List[VertexKey]]:
        """Neighbour keys per vertex, in edge insertion order."""
        result: Dict[VertexKey, List[VertexKey]] = {key: [] for key in self.vertices}
        for a, b in self.edges:
            result.setdefault(a, []).append(b)
            result.setdefault(b, []).append(a)
        return result

    def sorted_adjacency(self) -> Dict[VertexKey, List[VertexKey]]:
        """Neighbour keys per vertex, ordered by ascending direction angle."""
        result = {}
        for key, neighbours in self.adjacency().items():
            origin = self.vertices[key]

            def angle(other: VertexKey, origin: Point = origin) -> float:
                p = self.vertices[other]
                return math.atan2(p.y - origin.y, p.x - origin.x)

            result[key] = sorted(neighbours, key=angle)
        return result

    # ── Simplification ──────────────────────────────────────────────

    def merge_collinear_edges(self, max_passes: Optional[int] = None) -> int:
        """Remove degree-2 vertices lying between their two neighbours.

        Runs passes until nothing changes, at most *max_passes* (twice the
        starting vertex count by default).  Returns the number of vertices
        removed.
        """
        if not self.vertices:
            return 0
        if max_passes is None:
            max_passes = 2 * len(self.vertices)
        merged = 0
        for _ in range(max_passes):
            count = self._merge_pass()
            if not count:
                break
            merged += count
        else:
            if self._has_mergeable_vertex():
                logger.warning(
                    "Collinear merge stopped after %d passes with merges pending",
                    max_passes,
                )
        return merged

    def _mergeable(self, key: VertexKey, neighbours: Sequence[VertexKey]) -> bool:
        if len(neighbours) != 2:
            return False
        a = self.vertices[neighbours[0]]
        v = self.vertices[key]
        b = self.vertices[neighbours[1]]
        return _collinear(a, v, b) and _strictly_between(v, a, b)

    def _has_mergeable_vertex(self) -> bool:
        return any(self._mergeable(k, n) for k, n in self.adjacency().items())

    def _merge_pass(self) -> int:
        merged = 0
        consumed: set[EdgeKey] = set()
        for key, neighbours in self.adjacency().items():
            if len(neighbours) != 2:
                continue
            first, second = neighbours
            e1 = _edge_key(key, first)
            e2 = _edge_key(key, second)
            # A neighbour merged earlier in this pass has left the graph.
            if e1 in consumed or e2 in consumed:
                continue
            if not self._mergeable(key, neighbours):
                continue
            del self.edges[e1]
            del self.edges[e2]
            self.add_edge(first, second)
            consumed.update((e1, e2, _edge_key(first, second)))
            del self.vertices[key]
            self.ancestors.pop(key, None)
            merged += 1
        return merged

    # ── Faces ───────────────────────────────────────────────────────

    def find_faces(self) -> List[List[VertexKey]]:
        """Bounded faces as counter-clockwise key cycles, each emitted once.

        The walk takes, at every vertex, the edge following the arrival edge
        in ascending angular order.  That traces bounded faces clockwise and
        the unbounded face counter-clockwise, so only walks with negative
        area are kept (and then reversed).
        """
        around = self.sorted_adjacency()
        visited: set[Tuple[VertexKey, VertexKey]] = set()
        seen: set[Tuple[VertexKey, ...]] = set()
        faces: List[List[VertexKey]] = []
        capped = 0

        for a, b in self.edges:
            for start, first in ((a, b), (b, a)):
                if (start, first) in visited:
                    continue
                walk = self._walk(start, first, around, visited)
                if walk is None:
                    capped += 1
                    continue
                signature = face_signature(walk)
                if signature in seen:
                    continue
                seen.add(signature)
                area = signed_area([self.vertices[k] for k in walk])
                if area > -MIN_FACE_AREA:
                    continue
                faces.append(list(reversed(walk)))
        if capped:
            # The unbounded face of a large graph routinely exceeds the cap.
            logger.debug("%d face walks stopped at %d steps", capped, MAX_FACE_STEPS)
        return faces

    def _walk(
        self,
        start: VertexKey,
        first: VertexKey,
        around: Dict[VertexKey, List[VertexKey]],
        visited: set,
    ) -> Optional[List[VertexKey]]:
        face = [start]
        previous, current = start, first
        visited.add((start, first))
        for _ in range(MAX_FACE_STEPS):
            if current == start:
                return face
            face.append(current)
            ring = around.get(current, [])
            try:
                idx = ring.index(previous)
            except ValueError:
                raise TopologyError(
                    f"Vertex {current} has no edge back to {previous}"
                ) from None
            nxt = ring[(idx + 1) % len(ring)]
            visited.add((current, nxt))
            previous, current = current, nxt
        return None

    def assemble_polygons(
        self,
        faces: Iterable[Sequence[VertexKey]],
        polygons: Sequence[Polygon],
    ) -> List[Polygon]:
        """Build polygons from faces, inheriting from the dominant ancestor."""
        result: List[Polygon] = []
        for face in faces:
            if len(face) < 3:
                continue
            points = [self.vertices[key] for key in face]
            ancestor = self.dominant_ancestor(points)
            if ancestor is None:
                if not polygons:
                    result.append(Polygon(points))
                    continue
                ancestor = polygons[0]
                edges = None
            else:
                edges = self.original_edges.get(ancestor)
            result.append(
                Polygon(
                    points,
                    contact_angle=ancestor.contact_angle,
                    motif_color=ancestor.motif_color,
                    style=ancestor.style,
                    ancestor_edges=edges,
                )
            )
        return result


def rosette_transform(polygons: Sequence[Polygon]) -> List[Polygon]:
    """Replace *polygons* with the bounded faces of their rosette graph."""
    polygons = list(polygons)
    if not polygons:
        return []
    graph = PlanarGraph.from_polygons(polygons)
    merged = graph.merge_collinear_edges()
    faces = graph.find_faces()
    result = graph.assemble_polygons(faces, polygons)
    logger.debug(
        "Rosette: %d polygons -> %r, %d merged, %d faces",
        len(polygons), graph, merged, len(result),
    )
    return result
