"""girih: periodic polygon tilings, rosette duals and star motifs.

Public API is organised into layers:

- **Core**: points, edges, rays, polygons and their motifs
- **Tilings**: periodic pattern generators and the tile factory
- **Transforms**: the rosette planar-graph transform
- **Pipeline**: configuration and the exported payload
- **Diagnostics**: coverage and overlap checks
"""

# ── Core ────────────────────────────────────────────────────────────
from .models import Point, Edge, Ray, Style, Bounds, UnitDimensions, TilePlacement
from .geometry import vertex_key, signed_area, point_in_polygon, regular_vertices
from .polygon import Polygon
from .motif import RayPair, cast_rays, pair_rays, assemble_motif_polygons

# ── Tilings ─────────────────────────────────────────────────────────
from .patterns import (
    TilingPattern,
    SquarePattern,
    TrianglePattern,
    HexagonPattern,
    OctagonSquarePattern,
    RhombitrihexagonalPattern,
    SnubSquarePattern,
    TruncatedHexagonalPattern,
    PATTERNS,
    get_pattern,
    generate_positions,
)
from .factory import PolygonFactory, POLYGON_SIDES

# ── Transforms ──────────────────────────────────────────────────────
from .rosette import PlanarGraph, TopologyError, inner_radius, face_signature, rosette_transform

# ── Pipeline ────────────────────────────────────────────────────────
from .tessellation import (
    TessellationConfig,
    Tessellation,
    build_polygons,
    validate_tessellation_payload,
)

# ── Diagnostics ─────────────────────────────────────────────────────
from .diagnostics import (
    min_signed_area,
    uncovered_points,
    overlapping_pairs,
    motif_ray_usage,
    diagnostics_report,
)
