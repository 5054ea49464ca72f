"""Tests for the primitive profile builders."""
import pytest

from toolpath.builders import BuildContext, build_geometry_toolpath
from toolpath.builders.profiles import (
    build_circle_toolpath,
    build_custom_toolpath,
    build_polygon_toolpath,
    build_rectangle_toolpath,
)
from toolpath.models import (
    ArcCut,
    CircleGeometry,
    Comment,
    CustomGeometry,
    LinearCut,
    MachiningSettings,
    PolygonGeometry,
    RapidMove,
    RawLine,
    RectangleGeometry,
)
from toolpath.origin import OriginTransform


def make_ctx(geometry=None, **overrides):
    settings = MachiningSettings(**overrides)
    return BuildContext(settings=settings, transform=OriginTransform(settings, geometry))


def cuts(segments):
    return [s for s in segments if isinstance(s, LinearCut) and s.x is not None]


class TestRectangleContour:
    """Tests for rectangle contours."""

    def test_one_closed_loop_per_level(self):
        geometry = RectangleGeometry(100, 50)
        segments = build_rectangle_toolpath(make_ctx(geometry), geometry)

        assert segments[0] == Comment('Rectangle toolpath')
        assert len(segments) == 1 + 5 * 7
        assert segments[1] == Comment('Z Level: -1.000')
        assert segments[2] == RapidMove(x=-53, y=-28, comment='Move to start position')
        assert segments[3] == LinearCut(z=-1, f=300, comment='Plunge to cutting depth')
        assert segments[4] == LinearCut(x=53, y=-28, f=800, comment='Corner 1')
        assert segments[7] == LinearCut(x=-53, y=-28, f=800, comment='Corner 4')

    def test_last_level_at_full_depth(self):
        geometry = RectangleGeometry(100, 50)
        segments = build_rectangle_toolpath(make_ctx(geometry, depth=2.5), geometry)
        plunges = [s for s in segments if isinstance(s, LinearCut) and s.z is not None]
        assert [p.z for p in plunges] == [-1, -2, -2.5]

    def test_conventional_reverses_corners(self):
        geometry = RectangleGeometry(100, 50)
        segments = build_rectangle_toolpath(make_ctx(geometry, direction='conventional'), geometry)
        assert segments[4] == LinearCut(x=-53, y=28, f=800, comment='Corner 1')

    def test_inside_offset(self):
        geometry = RectangleGeometry(100, 50)
        segments = build_rectangle_toolpath(make_ctx(geometry, offset='inside', depth=1), geometry)
        assert segments[2] == RapidMove(x=-47, y=-22, comment='Move to start position')

    def test_too_small_after_offset(self):
        geometry = RectangleGeometry(4, 4)
        segments = build_rectangle_toolpath(make_ctx(geometry, offset='inside'), geometry)
        assert segments == [
            Comment('Rectangle toolpath'),
            Comment('Cannot generate toolpath: rectangle after offset is too small'),
        ]

    def test_corner_origin_moves_every_point(self):
        geometry = RectangleGeometry(100, 50)
        ctx = make_ctx(geometry, origin_type='workpiece-corner', depth=1)
        segments = build_rectangle_toolpath(ctx, geometry)
        assert segments[2] == RapidMove(x=-3, y=-3, comment='Move to start position')
        assert all(s.x >= -3 and s.y >= -3 for s in cuts(segments))


class TestRectanglePocket:
    """Tests for rectangle pocketing."""

    def test_rings_grow_to_the_offset_boundary(self):
        geometry = RectangleGeometry(20, 10)
        ctx = make_ctx(geometry, operation_type='pocket', offset='inside', depth=1)
        segments = build_rectangle_toolpath(ctx, geometry)

        assert segments[2] == Comment('Pocket operation - Stepover: 40% (2.40mm)')
        assert segments[3] == RapidMove(x=0, y=0, comment='Move to center')
        assert segments[4] == LinearCut(z=-1, f=300, comment='Plunge to cutting depth')

        ring_cuts = cuts(segments)
        assert len(ring_cuts) == 6 * 5
        assert ring_cuts[0] == LinearCut(x=1.2, y=-1.2, f=800, comment='Step 1 corner 1')
        assert max(abs(c.x) for c in ring_cuts) == 7
        assert max(abs(c.y) for c in ring_cuts) == 2

    def test_no_retract_between_rings(self):
        geometry = RectangleGeometry(20, 10)
        ctx = make_ctx(geometry, operation_type='pocket', offset='inside', depth=1)
        segments = build_rectangle_toolpath(ctx, geometry)
        assert sum(isinstance(s, RapidMove) for s in segments) == 1

    def test_zero_stepover(self):
        geometry = RectangleGeometry(20, 10)
        ctx = make_ctx(geometry, operation_type='pocket', stepover=0)
        segments = build_rectangle_toolpath(ctx, geometry)
        assert segments[-1] == Comment('Cannot generate pocket: stepover must be positive')


class TestCircle:
    """Tests for circle contours and pockets."""

    def test_full_circle_per_level(self):
        geometry = CircleGeometry(20)
        segments = build_circle_toolpath(make_ctx(geometry, depth=2), geometry)

        assert segments[0] == Comment('Circle toolpath')
        assert segments[2] == RapidMove(x=23, y=0, comment='Move to start position')
        assert segments[4] == ArcCut(command='G3', x=23, y=0, i=-23, j=0, f=800, comment='Full circle')
        assert sum(isinstance(s, ArcCut) for s in segments) == 2

    def test_conventional_uses_g2(self):
        geometry = CircleGeometry(20)
        segments = build_circle_toolpath(make_ctx(geometry, depth=1, direction='conventional'), geometry)
        assert segments[4].command == 'G2'

    def test_pocket_rings(self):
        geometry = CircleGeometry(10)
        ctx = make_ctx(geometry, operation_type='pocket', offset='inside', depth=1)
        segments = build_circle_toolpath(ctx, geometry)
        arcs = [s for s in segments if isinstance(s, ArcCut)]

        assert [round(a.x, 3) for a in arcs] == [2.4, 4.8, 7]
        assert arcs[-1].i == -7
        assert segments[2] == Comment('Circular pocket operation - Stepover: 40% (2.40mm)')

    def test_radius_too_small(self):
        geometry = CircleGeometry(2)
        segments = build_circle_toolpath(make_ctx(geometry, offset='inside'), geometry)
        assert segments[-1] == Comment('Cannot generate toolpath: radius after offset is too small')


class TestPolygon:
    """Tests for polygon contours and pockets."""

    def test_contour_visits_every_vertex(self):
        geometry = PolygonGeometry(sides=6, radius=30)
        segments = build_polygon_toolpath(make_ctx(geometry, offset='center', depth=1), geometry)

        assert segments[0] == Comment('Polygon toolpath (6 sides)')
        assert segments[2] == RapidMove(x=30, y=0, comment='Move to start position')
        points = cuts(segments)
        assert len(points) == 6
        assert points[-1].comment == 'Point 6'
        assert points[-1].x == pytest.approx(30)
        assert points[-1].y == pytest.approx(0)

    def test_too_few_sides(self):
        geometry = PolygonGeometry(sides=2, radius=30)
        segments = build_polygon_toolpath(make_ctx(geometry), geometry)
        assert segments[-1] == Comment('Cannot generate toolpath: polygon needs at least 3 sides')

    def test_pocket_rings(self):
        geometry = PolygonGeometry(sides=4, radius=10)
        ctx = make_ctx(geometry, operation_type='pocket', offset='inside', depth=1)
        segments = build_polygon_toolpath(ctx, geometry)
        ring_cuts = cuts(segments)
        assert len(ring_cuts) == 3 * 5
        assert ring_cuts[-1].comment == 'Point 5 at radius 7.000'


class TestCustom:
    """Tests for raw G-code pass-through."""

    def test_lines_pass_through(self):
        geometry = CustomGeometry("G0 X0 Y0\nG1 X10 F100")
        segments = build_custom_toolpath(make_ctx(), geometry)
        assert segments == [Comment('Custom path'), RawLine('G0 X0 Y0'), RawLine('G1 X10 F100')]

    def test_empty_text(self):
        assert build_custom_toolpath(make_ctx(), CustomGeometry('')) == []


class TestGeometryDispatch:
    """Tests for build_geometry_toolpath."""

    def test_dispatch_on_kind(self):
        geometry = CircleGeometry(5)
        segments = build_geometry_toolpath(make_ctx(geometry, depth=1), geometry)
        assert segments[0] == Comment('Circle toolpath')
