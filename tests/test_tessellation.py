"""Tests for the configuration surface and the tessellation pipeline."""

import dataclasses
import json
from pathlib import Path

import pytest

from girih.diagnostics import uncovered_points
from girih.geometry import distance
from girih.models import Bounds, Style
from girih.patterns import PATTERNS
from girih.tessellation import (
    Tessellation,
    TessellationConfig,
    build_polygons,
    validate_tessellation_payload,
)

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "tessellation.schema.json"


def _on_tile_edge(point, polygons, tolerance=1e-6):
    """Samples exactly on a shared face edge are ambiguous under even-odd."""
    for polygon in polygons:
        for edge in polygon.edges:
            detour = distance(edge.start, point) + distance(point, edge.end)
            if detour - edge.magnitude < tolerance:
                return True
    return False


@pytest.fixture
def styled_config():
    return TessellationConfig(
        type="octagon-square",
        size=30,
        width=120,
        height=90,
        style=Style(fill="white"),
        style1=Style(fill="navy", stroke="gold"),
        style2=Style(fill="crimson", fill_opacity=0.5),
    )


class TestConfig:
    def test_defaults(self):
        config = TessellationConfig()
        assert config.type == "hexagon"
        assert config.size == 50
        assert (config.width, config.height) == (800, 600)
        assert config.offset == 0
        assert config.contact_angle == 22.5
        assert config.motif_color == "purple"
        assert config.background_color == "#f5f5dc"
        assert config.style is None
        assert config.rosette is False

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            TessellationConfig().size = 10

    def test_round_trip(self, styled_config):
        data = styled_config.to_dict()
        assert json.loads(json.dumps(data)) == data
        assert TessellationConfig.from_dict(data) == styled_config

    def test_from_partial_dict(self):
        config = TessellationConfig.from_dict({"type": "square", "rosette": True})
        assert config.type == "square"
        assert config.rosette is True
        assert config.size == 50

    def test_empty_style_slot_means_default_style(self):
        config = TessellationConfig.from_dict({"style": {}, "style1": None})
        assert config.style == Style()
        assert config.style1 is None

    def test_validate_ok(self):
        assert TessellationConfig().validate() == []

    def test_validate_reports_every_problem(self):
        errors = TessellationConfig(type="penrose", size=0, contact_angle=95).validate()
        assert len(errors) == 3
        assert any("penrose" in e for e in errors)


class TestPipeline:
    def test_unknown_type_yields_nothing(self):
        assert build_polygons(TessellationConfig(type="penrose")) == []
        assert Tessellation(TessellationConfig(type="penrose")).polygon_count == 0

    def test_polygons_carry_configuration(self):
        config = TessellationConfig(
            type="hexagon", size=40, width=100, height=100,
            contact_angle=35.0, motif_color="gold",
        )
        polygons = build_polygons(config)
        assert polygons
        for polygon in polygons:
            assert polygon.sides == 6
            assert polygon.contact_angle == 35.0
            assert polygon.motif_color == "gold"
            assert polygon.style is None

    def test_polygons_cached_per_instance(self):
        tess = Tessellation(TessellationConfig(width=100, height=100))
        assert tess.polygons is tess.polygons
        assert tess.polygon_count == len(tess.polygons)

    def test_recomputation_is_independent(self):
        config = TessellationConfig(type="snub-square", size=30, width=100, height=100)
        first = [p.vertices for p in Tessellation(config).polygons]
        second = [p.vertices for p in Tessellation(config).polygons]
        assert first == second

    def test_bounds(self):
        tess = Tessellation(TessellationConfig(width=120, height=80))
        assert tess.bounds() == {"width": 120, "height": 80, "polygon_count": tess.polygon_count}

    def test_group_by_style(self, styled_config):
        tess = Tessellation(styled_config)
        groups = tess.group_by_style()
        assert set(groups) == {styled_config.style1.key, styled_config.style2.key}
        octagons = groups[styled_config.style1.key]
        squares = groups[styled_config.style2.key]
        assert {p.sides for p in octagons} == {8}
        assert {p.sides for p in squares} == {4}
        assert len(octagons) + len(squares) == tess.polygon_count

    def test_unstyled_group_is_default(self):
        groups = Tessellation(TessellationConfig(width=100, height=100)).group_by_style()
        assert list(groups) == ["default"]

    def test_triangle_offset_is_passed_through(self):
        base = TessellationConfig(type="triangle", size=30, width=60, height=60)
        shifted = dataclasses.replace(base, offset=5.0)
        a = build_polygons(base)[0].center
        b = build_polygons(shifted)[0].center
        assert b.x == pytest.approx(a.x + 5.0)
        assert b.y == pytest.approx(a.y)

    def test_rosette_replaces_tiles(self):
        plain = TessellationConfig(type="hexagon", size=40, width=120, height=120)
        rosette = dataclasses.replace(plain, rosette=True)
        faces = build_polygons(rosette)
        assert faces
        assert len(faces) != len(build_polygons(plain))
        for polygon in faces:
            assert len(polygon.vertices) >= 3
            assert polygon.signed_area > 0

    @pytest.mark.parametrize("pattern_type", sorted(PATTERNS))
    def test_rosette_covers_viewport(self, pattern_type):
        config = TessellationConfig(
            type=pattern_type, size=40, width=200, height=160, rosette=True,
        )
        faces = Tessellation(config).polygons
        gaps = uncovered_points(faces, Bounds(config.width, config.height), step=9.7)
        assert [p for p in gaps if not _on_tile_edge(p, faces)] == []


class TestExport:
    def test_payload_shape(self, styled_config):
        payload = Tessellation(styled_config).to_dict()
        assert payload["config"] == styled_config.to_dict()
        assert payload["bounds"]["polygon_count"] == len(payload["polygons"])
        first = payload["polygons"][0]
        assert isinstance(first["vertices"][0], list)
        assert first["style"]["fill"] in {"navy", "crimson"}

    def test_lightweight_validator(self, styled_config):
        payload = Tessellation(styled_config).to_dict()
        assert validate_tessellation_payload(payload) == []

    def test_lightweight_validator_reports_problems(self):
        errors = validate_tessellation_payload({"polygons": [{"vertices": [[0, 0]]}]})
        assert "Missing top-level key: version" in errors
        assert any("fewer than 3 vertices" in e for e in errors)
        assert any("missing 'style'" in e for e in errors)

    def test_json_round_trip(self):
        tess = Tessellation(TessellationConfig(type="square", size=40, width=80, height=80))
        loaded = json.loads(tess.to_json())
        assert loaded == json.loads(json.dumps(tess.to_dict()))

    @pytest.mark.parametrize("rosette", [False, True])
    def test_payload_validates_against_schema(self, styled_config, rosette):
        import jsonschema

        schema = json.loads(SCHEMA_PATH.read_text())
        config = dataclasses.replace(styled_config, rosette=rosette)
        payload = Tessellation(config).to_dict()
        # Should not raise
        jsonschema.validate(instance=payload, schema=schema)
