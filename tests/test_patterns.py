"""Tests for the periodic tiling generators."""

import itertools
import math

import pytest

from girih.diagnostics import overlapping_pairs, uncovered_points
from girih.factory import PolygonFactory
from girih.models import Bounds, Point, TilePlacement
from girih.patterns import (
    PATTERNS,
    SquarePattern,
    TrianglePattern,
    generate_positions,
    get_pattern,
)

ALL_TYPES = sorted(PATTERNS)


def _polygons(pattern_type, size, bounds):
    factory = PolygonFactory(size)
    return [factory.create(p) for p in generate_positions(pattern_type, size, bounds)]


class TestRegistry:
    def test_seven_families(self):
        assert set(PATTERNS) == {
            "triangle",
            "square",
            "hexagon",
            "octagon-square",
            "rhombitrihexagonal",
            "snub-square",
            "truncated-hexagonal",
        }

    def test_unknown_type_is_empty(self):
        assert get_pattern("penrose", 50) is None
        assert list(generate_positions("penrose", 50, Bounds(100, 100))) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            SquarePattern(0)

    def test_triangle_offset_option(self):
        pattern = get_pattern("triangle", 50, offset=7.0)
        assert isinstance(pattern, TrianglePattern)
        assert pattern.offset == 7.0
        assert get_pattern("hexagon", 50, offset=7.0).size == 50


class TestSquareScenario:
    def test_margin_spans_one_unit_past_bounds(self):
        placements = list(SquarePattern(50).generate_positions(Bounds(100, 100)))
        xs = [p.x for p in placements]
        ys = [p.y for p in placements]
        assert min(xs) <= 0 and max(xs) >= 150
        assert min(ys) <= 0 and max(ys) >= 150

    def test_unit_dimensions(self):
        unit = SquarePattern(50).unit_dimensions()
        assert (unit.width, unit.height) == (100, 50)


@pytest.mark.parametrize("pattern_type", ALL_TYPES)
class TestEveryPattern:
    def test_placements_are_well_formed(self, pattern_type):
        for placement in generate_positions(pattern_type, 40, Bounds(120, 90)):
            assert isinstance(placement, TilePlacement)
            assert placement.relative_size > 0
            assert placement.style_key in {"default", "style1", "style2", "style3"}

    def test_count_grows_with_bounds(self, pattern_type):
        counts = [
            sum(1 for _ in generate_positions(pattern_type, 40, Bounds(w, h)))
            for w, h in [(50, 50), (100, 100), (200, 150), (400, 300)]
        ]
        assert counts == sorted(counts)
        assert counts[0] >= 1

    def test_origin_is_covered(self, pattern_type):
        polygons = _polygons(pattern_type, 40, Bounds(100, 100))
        assert any(p.contains(Point(0.0, 0.0)) for p in polygons)

    def test_generation_is_deterministic(self, pattern_type):
        bounds = Bounds(150, 120)
        first = list(generate_positions(pattern_type, 40, bounds))
        second = list(generate_positions(pattern_type, 40, bounds))
        assert first == second

    def test_generation_is_lazy(self, pattern_type):
        pattern = get_pattern(pattern_type, 40)
        head = list(itertools.islice(pattern.generate_positions(Bounds(10_000, 10_000)), 3))
        assert len(head) == 3

    def test_cell_area_matches_lattice(self, pattern_type):
        size = 40.0
        pattern = get_pattern(pattern_type, size)
        factory = PolygonFactory(size)
        col_step, row_step = pattern.lattice_steps()
        placements = pattern.cell(0, 0) + pattern.cell(1, 0)
        area = sum(factory.create(p).area for p in placements)
        assert area == pytest.approx(2 * col_step * row_step, rel=1e-9)

    def test_unit_is_whole_number_of_cells(self, pattern_type):
        pattern = get_pattern(pattern_type, 40)
        col_step, row_step = pattern.lattice_steps()
        unit = pattern.unit_dimensions()
        cols = unit.width / col_step
        rows = unit.height / row_step
        assert cols == pytest.approx(round(cols))
        assert rows == pytest.approx(round(rows))

    def test_gapless_and_non_overlapping(self, pattern_type):
        bounds = Bounds(200, 150)
        polygons = _polygons(pattern_type, 30, bounds)
        assert uncovered_points(polygons, bounds, step=7.3) == []
        assert overlapping_pairs(polygons) == []


class TestTrianglePattern:
    def test_alternating_orientation(self):
        pattern = TrianglePattern(50)
        up = pattern.cell(0, 0)[0]
        down = pattern.cell(0, 1)[0]
        assert up.rotation == 0.0
        assert down.rotation == pytest.approx(math.pi)
        assert (up.style_key, down.style_key) == ("style1", "style2")

    def test_unit_spans_an_up_down_pair(self):
        pattern = TrianglePattern(40)
        unit = pattern.unit_dimensions()
        assert unit.width == pytest.approx(pattern.side)
        assert unit.height == pytest.approx(120.0)

    def test_margin_spans_one_unit_past_bounds(self):
        pattern = TrianglePattern(40)
        placements = list(pattern.generate_positions(Bounds(200, 160)))
        assert min(p.x for p in placements) <= -pattern.side + 1e-9
        assert min(p.y for p in placements) <= -120.0 + 1e-9

    def test_offset_shifts_rows(self):
        plain = TrianglePattern(50).cell(2, 3)[0]
        shifted = TrianglePattern(50, offset=12.5).cell(2, 3)[0]
        assert shifted.x == pytest.approx(plain.x + 12.5)
        assert shifted.y == plain.y
