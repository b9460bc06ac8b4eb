"""Periodic tiling generators.

Each pattern lays its tiles out on a rectangular lattice of *cells*.  A
cell is addressed by ``(row, col)`` and emits the placements of one
fundamental domain; :meth:`TilingPattern.generate_positions` walks the
cells covering a bounds rectangle plus one repeat unit of margin on every
side.

Architecture
------------
- :class:`TilingPattern`: abstract base: lattice steps, unit dimensions,
  per-cell placements, lazy generation.
- One subclass per tiling family, registered in :data:`PATTERNS`.
- :func:`get_pattern` / :func:`generate_positions`: lookup by name;
  unknown names produce no placements.

Geometry conventions: a tile's ``relative_size`` is its circumradius over
the pattern size, and ``rotation`` is relative to the default regular
layout of :func:`girih.geometry.regular_vertices`.  Every family places a
tile centred on the origin.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional, Tuple, Type

from .models import Bounds, TilePlacement, UnitDimensions

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2.0)
SQRT3 = math.sqrt(3.0)


def _unit(angle_deg: float) -> Tuple[float, float]:
    rad = math.radians(angle_deg)
    return (math.cos(rad), math.sin(rad))


class TilingPattern(ABC):
    """Base class for a periodic tiling of the plane."""

    name: str = ""

    def __init__(self, size: float = 50.0) -> None:
        if size <= 0:
            raise ValueError("size must be > 0")
        self.size = size

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size})"

    @abstractmethod
    def lattice_steps(self) -> Tuple[float, float]:
        """Return ``(col_step, row_step)`` between neighbouring cells."""

    @abstractmethod
    def unit_dimensions(self) -> UnitDimensions:
        """Return the repeat period of the tiling."""

    @abstractmethod
    def cell(self, row: int, col: int) -> List[TilePlacement]:
        """Return the placements emitted by one lattice cell."""

    def generate_positions(self, bounds: Bounds) -> Iterator[TilePlacement]:
        """Lazily yield placements covering ``[0, width] × [0, height]``.

        Rows and columns start one repeat unit before the origin and end one
        repeat unit past the bounds.  Each call returns a fresh generator.
        """
        col_step, row_step = self.lattice_steps()
        unit = self.unit_dimensions()
        col_margin = math.ceil(unit.width / col_step)
        row_margin = math.ceil(unit.height / row_step)
        last_row = math.ceil(bounds.height / row_step) + row_margin
        last_col = math.ceil(bounds.width / col_step) + col_margin

        for row in range(-row_margin, last_row + 1):
            for col in range(-col_margin, last_col + 1):
                yield from self.cell(row, col)


# ═══════════════════════════════════════════════════════════════════
# Regular tilings
# ═══════════════════════════════════════════════════════════════════

class SquarePattern(TilingPattern):
    """Squares stood on a corner; rows of diamonds offset by half a unit."""

    name = "square"

    def lattice_steps(self) -> Tuple[float, float]:
        return (2 * self.size, self.size)

    def unit_dimensions(self) -> UnitDimensions:
        return UnitDimensions(2 * self.size, self.size)

    def cell(self, row: int, col: int) -> List[TilePlacement]:
        col_step, row_step = self.lattice_steps()
        x = col * col_step + (self.size if row % 2 else 0.0)
        y = row * row_step
        return [TilePlacement("square", 1.0, x, y, rotation=math.pi / 4)]


class TrianglePattern(TilingPattern):
    """Alternating up/down triangles.

    *offset* shifts every row horizontally.
    """

    name = "triangle"

    def __init__(self, size: float = 50.0, offset: float = 0.0) -> None:
        super().__init__(size)
        self.offset = offset

    @property
    def side(self) -> float:
        return self.size * SQRT3

    def lattice_steps(self) -> Tuple[float, float]:
        return (self.side / 2, 1.5 * self.size)

    def unit_dimensions(self) -> UnitDimensions:
        return UnitDimensions(self.side, 3 * self.size)

    def cell(self, row: int, col: int) -> List[TilePlacement]:
        col_step, row_step = self.lattice_steps()
        x = col * col_step + self.offset + (col_step if row % 2 else 0.0)
        y = row * row_step
        if col % 2 == 0:
            return [TilePlacement("triangle", 1.0, x, y, style_key="style1")]
        return [
            TilePlacement(
                "triangle", 1.0, x, y + self.size / 2,
                rotation=math.pi, style_key="style2",
            )
        ]


class HexagonPattern(TilingPattern):
    """Pointy-top hexagons; odd rows shifted by half a hexagon width."""

    name = "hexagon"

    def lattice_steps(self) -> Tuple[float, float]:
        return (self.size * SQRT3, 1.5 * self.size)

    def unit_dimensions(self) -> UnitDimensions:
        return UnitDimensions(self.size * SQRT3, 1.5 * self.size)

    def cell(self, row: int, col: int) -> List[TilePlacement]:
        col_step, row_step = self.lattice_steps()
        x = col * col_step + (col_step / 2 if row % 2 else 0.0)
        y = row * row_step
        return [TilePlacement("hexagon", 1.0, x, y, rotation=math.pi / 6)]


# ═══════════════════════════════════════════════════════════════════
# Archimedean tilings
# ═══════════════════════════════════════════════════════════════════

class OctagonSquarePattern(TilingPattern):
    """4.8.8: octagons on a centred square lattice, squares in the gaps.

    *size* is the shared edge length.
    """

    name = "octagon-square"

    @property
    def step(self) -> float:
        apothem = self.size / (2 * math.tan(math.pi / 8))
        return 2 * apothem + self.size

    def lattice_steps(self) -> Tuple[float, float]:
        return (self.step, self.step)

    def unit_dimensions(self) -> UnitDimensions:
        return UnitDimensions(self.step, self.step)

    def cell(self, row: int, col: int) -> List[TilePlacement]:
        step = self.step
        half = step / 2
        cx = col * step
        cy = row * step
        octagon = 1 / (2 * math.sin(math.pi / 8))
        square = 1 / SQRT2
        return [
            TilePlacement("octagon", octagon, cx, cy, style_key="style1"),
            TilePlacement("octagon", octagon, cx + half, cy + half, style_key="style1"),
            TilePlacement("square", square, cx + half, cy, style_key="style2"),
            TilePlacement("square", square, cx, cy + half, style_key="style2"),
        ]


class RhombitrihexagonalPattern(TilingPattern):
    """3.4.6.4: hexagons ringed by squares, triangles at the hexagon triples.

    Hexagon centres form a triangular lattice with spacing
    ``size·(1 + √3)``; each lattice point owns one hexagon, three squares
    and two triangles.
    """

    name = "rhombitrihexagonal"

    @property
    def spacing(self) -> float:
        return self.size * (1 + SQRT3)

    def lattice_steps(self) -> Tuple[float, float]:
        d = self.spacing
        return (d * SQRT3, d / 2)

    def unit_dimensions(self) -> UnitDimensions:
        d = self.spacing
        return UnitDimensions(d * SQRT3, d)

    def cell(self, row: int, col: int) -> List[TilePlacement]:
        d = self.spacing
        col_step, row_step = self.lattice_steps()
        px = col * col_step + (col_step / 2 if row % 2 else 0.0)
        py = row * row_step

        placements = [TilePlacement("hexagon", 1.0, px, py, style_key="style1")]
        for angle, rotation in ((30, math.pi / 6), (90, 0.0), (150, -math.pi / 6)):
            ux, uy = _unit(angle)
            placements.append(
                TilePlacement(
                    "square", 1 / SQRT2, px + ux * d / 2, py + uy * d / 2,
                    rotation=rotation,
                )
            )
        for angle, rotation in ((0, -math.pi / 6), (60, math.pi / 6)):
            ux, uy = _unit(angle)
            placements.append(
                TilePlacement(
                    "triangle", 1 / SQRT3, px + ux * d / SQRT3, py + uy * d / SQRT3,
                    rotation=rotation, style_key="style2",
                )
            )
        return placements


class SnubSquarePattern(TilingPattern):
    """3.3.4.3.4: squares of alternating chirality joined by triangles.

    Squares sit on a centred square lattice of period
    ``size·√(2 + √3)``; even rows turn them by -15° and carry the four
    triangles, odd rows turn them by +15°.
    """

    name = "snub-square"

    @property
    def period(self) -> float:
        return self.size * math.sqrt(2 + SQRT3)

    def lattice_steps(self) -> Tuple[float, float]:
        return (self.period, self.period / 2)

    def unit_dimensions(self) -> UnitDimensions:
        return UnitDimensions(self.period, self.period)

    def cell(self, row: int, col: int) -> List[TilePlacement]:
        col_step, row_step = self.lattice_steps()
        px = col * col_step + (col_step / 2 if row % 2 else 0.0)
        py = row * row_step

        if row % 2:
            return [TilePlacement("square", 1 / SQRT2, px, py, rotation=math.pi / 12)]

        placements = [TilePlacement("square", 1 / SQRT2, px, py, rotation=-math.pi / 12)]
        reach = self.size / 2 + self.size * SQRT3 / 6
        for angle in (-15, 75, 165, 255):
            ux, uy = _unit(angle)
            placements.append(
                TilePlacement(
                    "triangle", 1 / SQRT3, px + ux * reach, py + uy * reach,
                    rotation=math.radians(angle - 90),
                )
            )
        return placements


class TruncatedHexagonalPattern(TilingPattern):
    """3.12.12: dodecagons on a triangular lattice, triangles in the gaps.

    The dodecagon edge is ``size / 2``.  Columns alternate by half a
    lattice spacing vertically.
    """

    name = "truncated-hexagonal"

    @property
    def edge(self) -> float:
        return self.size / 2

    @property
    def spacing(self) -> float:
        return self.edge * (2 + SQRT3)

    def lattice_steps(self) -> Tuple[float, float]:
        d = self.spacing
        return (d * SQRT3 / 2, d)

    def unit_dimensions(self) -> UnitDimensions:
        d = self.spacing
        return UnitDimensions(d * SQRT3, d)

    def cell(self, row: int, col: int) -> List[TilePlacement]:
        d = self.spacing
        col_step, row_step = self.lattice_steps()
        px = col * col_step
        py = row * row_step + (d / 2 if col % 2 else 0.0)

        dodecagon = self.edge / (2 * math.sin(math.pi / 12)) / self.size
        triangle = self.edge / SQRT3 / self.size
        reach = d / SQRT3
        ux0, uy0 = _unit(0)
        ux60, uy60 = _unit(60)
        return [
            TilePlacement("dodecagon", dodecagon, px, py, style_key="style1"),
            TilePlacement(
                "triangle", triangle, px + ux0 * reach, py + uy0 * reach,
                rotation=math.pi / 6, style_key="style2",
            ),
            TilePlacement(
                "triangle", triangle, px + ux60 * reach, py + uy60 * reach,
                rotation=-math.pi / 6, style_key="style3",
            ),
        ]


# ═══════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════

PATTERNS: Dict[str, Type[TilingPattern]] = {
    cls.name: cls
    for cls in (
        TrianglePattern,
        SquarePattern,
        HexagonPattern,
        OctagonSquarePattern,
        RhombitrihexagonalPattern,
        SnubSquarePattern,
        TruncatedHexagonalPattern,
    )
}


def get_pattern(pattern_type: str, size: float = 50.0, **options) -> Optional[TilingPattern]:
    """Instantiate the pattern registered as *pattern_type*, or ``None``.

    *options* are passed to patterns that accept them (``offset`` for the
    triangle pattern) and ignored by the rest.
    """
    cls = PATTERNS.get(pattern_type)
    if cls is None:
        return None
    if cls is TrianglePattern:
        return TrianglePattern(size, offset=options.get("offset", 0.0))
    return cls(size)


def generate_positions(
    pattern_type: str,
    size: float,
    bounds: Bounds,
    **options,
) -> Iterator[TilePlacement]:
    """Placements for a named tiling; nothing for an unknown name."""
    pattern = get_pattern(pattern_type, size, **options)
    if pattern is None:
        logger.warning("Unknown tiling type %r, no tiles generated", pattern_type)
        return iter(())
    return pattern.generate_positions(bounds)
