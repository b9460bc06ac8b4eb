"""Turn tile placements into styled polygons."""

from __future__ import annotations

from typing import Dict, Optional

from .models import Style, TilePlacement
from .polygon import DEFAULT_CONTACT_ANGLE, DEFAULT_MOTIF_COLOR, Polygon

POLYGON_SIDES: Dict[str, int] = {
    "triangle": 3,
    "square": 4,
    "pentagon": 5,
    "hexagon": 6,
    "octagon": 8,
    "dodecagon": 12,
}


class PolygonFactory:
    """Sizes, places, rotates and styles polygons for one tessellation."""

    def __init__(
        self,
        base_size: float,
        contact_angle: float = DEFAULT_CONTACT_ANGLE,
        motif_color: str = DEFAULT_MOTIF_COLOR,
        default_style: Optional[Style] = None,
        style1: Optional[Style] = None,
        style2: Optional[Style] = None,
        style3: Optional[Style] = None,
    ) -> None:
        self.base_size = base_size
        self.contact_angle = contact_angle
        self.motif_color = motif_color
        self.default_style = default_style
        self.style1 = style1
        self.style2 = style2
        self.style3 = style3

    def style_for(self, style_key: Optional[str]) -> Optional[Style]:
        """Resolve a placement's style key; missing slots use the default."""
        slots = {"style1": self.style1, "style2": self.style2, "style3": self.style3}
        style = slots.get(style_key) if style_key else None
        return style if style is not None else self.default_style

    def create(
        self,
        placement: TilePlacement,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> Polygon:
        """Build the polygon for *placement*, optionally at ``(x, y)``."""
        sides = POLYGON_SIDES.get(placement.polygon_type)
        if sides is None:
            raise ValueError(f"Unknown polygon type: {placement.polygon_type!r}")
        return Polygon.regular(
            sides,
            self.base_size * placement.relative_size,
            placement.x if x is None else x,
            placement.y if y is None else y,
            rotation=placement.rotation or 0.0,
            contact_angle=self.contact_angle,
            motif_color=self.motif_color,
            style=self.style_for(placement.style_key),
        )
