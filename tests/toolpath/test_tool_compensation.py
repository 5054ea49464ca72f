"""Tests for tool offset and radius compensation."""
import pytest

from toolpath.utils.tool_compensation import (
    calculate_offset_radius,
    calculate_offset_size,
    get_compensation_code,
)


class TestOffsets:
    """Tests for the offset helpers."""

    def test_outside_radius_grows_by_half_tool(self):
        assert calculate_offset_radius(20, 6, 'outside') == 23

    def test_inside_radius_shrinks_by_half_tool(self):
        assert calculate_offset_radius(20, 6, 'inside') == 17

    def test_center_radius_unchanged(self):
        assert calculate_offset_radius(20, 6, 'center') == 20

    def test_inside_radius_may_go_negative(self):
        assert calculate_offset_radius(2, 6, 'inside') == -1

    def test_rectangle_size_changes_by_full_diameter(self):
        assert calculate_offset_size(100, 50, 6, 'outside') == (106, 56)
        assert calculate_offset_size(100, 50, 6, 'inside') == (94, 44)
        assert calculate_offset_size(100, 50, 6, 'center') == (100, 50)


class TestCompensationCode:
    """Tests for G41/G42 selection."""

    @pytest.mark.parametrize("offset,direction,expected", [
        ('outside', 'climb', 'G41'),
        ('outside', 'conventional', 'G42'),
        ('inside', 'climb', 'G42'),
        ('inside', 'conventional', 'G41'),
    ])
    def test_contour_table(self, offset, direction, expected):
        assert get_compensation_code('contour', offset, direction) == expected

    def test_profile_is_compensated(self):
        assert get_compensation_code('profile', 'outside', 'climb') == 'G41'

    def test_center_offset_has_no_code(self):
        assert get_compensation_code('contour', 'center', 'climb') is None

    def test_pocket_is_not_compensated(self):
        assert get_compensation_code('pocket', 'inside', 'climb') is None
