"""Tessellation pipeline: pattern → factory → optional rosette.

:class:`TessellationConfig` is the whole configuration surface and
:class:`Tessellation` is a pure function of it.  The exported payload
(:meth:`Tessellation.to_dict`) carries only lists, dicts, numbers and
strings so that renderers never need the package's own types.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, List, Optional

from .factory import PolygonFactory
from .models import Bounds, Style
from .patterns import PATTERNS, get_pattern
from .polygon import Polygon
from .rosette import rosette_transform

logger = logging.getLogger(__name__)

STYLE_SLOTS = ("style", "style1", "style2", "style3")


@dataclass(frozen=True)
class TessellationConfig:
    """Parameters of one tessellation run.

    *contact_angle* is in degrees; *offset* only affects the triangle
    pattern.  Style slots left as ``None`` fall back to ``style``, and a
    polygon whose resolved style is ``None`` uses the renderer's default.
    """

    type: str = "hexagon"
    size: float = 50.0
    width: float = 800.0
    height: float = 600.0
    offset: float = 0.0
    contact_angle: float = 22.5
    motif_color: str = "purple"
    background_color: str = "#f5f5dc"
    style: Optional[Style] = None
    style1: Optional[Style] = None
    style2: Optional[Style] = None
    style3: Optional[Style] = None
    rosette: bool = False

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.type not in PATTERNS:
            errors.append(f"Unknown tiling type: {self.type!r}")
        if self.size <= 0:
            errors.append(f"size must be > 0, got {self.size}")
        if self.width < 0 or self.height < 0:
            errors.append(f"bounds must be non-negative, got {self.width}x{self.height}")
        if not 0 < self.contact_angle < 90:
            errors.append(f"contact_angle must lie in (0, 90) degrees, got {self.contact_angle}")
        return errors

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {
            "type": self.type,
            "size": self.size,
            "width": self.width,
            "height": self.height,
            "offset": self.offset,
            "contact_angle": self.contact_angle,
            "motif_color": self.motif_color,
            "background_color": self.background_color,
            "rosette": self.rosette,
        }
        for slot in STYLE_SLOTS:
            style = getattr(self, slot)
            data[slot] = style.to_dict() if style is not None else None
        return data

    @classmethod
    def from_dict(cls, payload: dict) -> "TessellationConfig":
        defaults = cls()
        styles = {
            slot: Style.from_dict(payload[slot]) if payload.get(slot) is not None else None
            for slot in STYLE_SLOTS
        }
        return cls(
            type=payload.get("type", defaults.type),
            size=payload.get("size", defaults.size),
            width=payload.get("width", defaults.width),
            height=payload.get("height", defaults.height),
            offset=payload.get("offset", defaults.offset),
            contact_angle=payload.get("contact_angle", defaults.contact_angle),
            motif_color=payload.get("motif_color", defaults.motif_color),
            background_color=payload.get("background_color", defaults.background_color),
            rosette=payload.get("rosette", defaults.rosette),
            **styles,
        )


def build_polygons(config: TessellationConfig) -> List[Polygon]:
    """Run the full pipeline for *config*; unknown tiling types give ``[]``."""
    pattern = get_pattern(config.type, config.size, offset=config.offset)
    if pattern is None:
        logger.warning("Unknown tiling type %r, no tiles generated", config.type)
        return []

    factory = PolygonFactory(
        config.size,
        config.contact_angle,
        config.motif_color,
        config.style,
        config.style1,
        config.style2,
        config.style3,
    )
    bounds = Bounds(config.width, config.height)
    polygons = [factory.create(placement) for placement in pattern.generate_positions(bounds)]
    logger.debug("%r produced %d tiles for %sx%s", pattern, len(polygons), config.width, config.height)

    if config.rosette:
        polygons = rosette_transform(polygons)
    return polygons


class Tessellation:
    """Polygons for one configuration, computed once per instance."""

    VERSION = "1.0"

    def __init__(self, config: Optional[TessellationConfig] = None) -> None:
        self.config = config or TessellationConfig()

    def __repr__(self) -> str:
        return f"Tessellation(type={self.config.type!r}, size={self.config.size})"

    @cached_property
    def polygons(self) -> List[Polygon]:
        return build_polygons(self.config)

    @property
    def polygon_count(self) -> int:
        return len(self.polygons)

    def bounds(self) -> Dict[str, float]:
        return {
            "width": self.config.width,
            "height": self.config.height,
            "polygon_count": self.polygon_count,
        }

    def group_by_style(self) -> Dict[str, List[Polygon]]:
        """Polygons grouped by style key, ``"default"`` for unstyled ones."""
        groups: Dict[str, List[Polygon]] = {}
        for polygon in self.polygons:
            key = polygon.style.key if polygon.style is not None else "default"
            groups.setdefault(key, []).append(polygon)
        return groups

    def to_dict(self) -> dict:
        return {
            "version": self.VERSION,
            "config": self.config.to_dict(),
            "bounds": self.bounds(),
            "polygons": [polygon.to_dict() for polygon in self.polygons],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def validate_tessellation_payload(payload: Dict[str, Any]) -> List[str]:
    """Structural check of an exported payload; empty list when valid.

    ``schemas/tessellation.schema.json`` holds the formal schema for use
    with ``jsonschema``.
    """
    errors: List[str] = []
    for key in ("version", "config", "bounds", "polygons"):
        if key not in payload:
            errors.append(f"Missing top-level key: {key}")

    polygons = payload.get("polygons", [])
    if not isinstance(polygons, list):
        return errors + ["'polygons' must be a list"]

    expected = payload.get("bounds", {}).get("polygon_count")
    if expected is not None and expected != len(polygons):
        errors.append(f"polygon_count mismatch: bounds says {expected}, got {len(polygons)}")

    for i, polygon in enumerate(polygons):
        for key in ("vertices", "style", "contact_angle", "motif_color", "motif_polygons", "motif_segments"):
            if key not in polygon:
                errors.append(f"Polygon {i}: missing '{key}'")
        vertices = polygon.get("vertices", [])
        if len(vertices) < 3:
            errors.append(f"Polygon {i}: fewer than 3 vertices")
        for segment in polygon.get("motif_segments", []):
            if len(segment) != 2:
                errors.append(f"Polygon {i}: motif segment must have 2 endpoints")
                break
    return errors
