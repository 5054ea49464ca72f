"""Tests for the G-code reader."""
from toolpath.models import ArcCut, Comment, LinearCut, RapidMove, RawLine
from toolpath.utils.gcode_parser import parse_gcode, parse_line, parse_words, split_comment


class TestSplitComment:
    """Tests for split_comment and parse_words."""

    def test_code_and_comment(self):
        assert split_comment("G0 X1 ; Move") == ("G0 X1", "Move")

    def test_no_comment(self):
        assert split_comment("G90") == ("G90", None)

    def test_parse_words(self):
        assert parse_words(" X1.5 Y-2 z.5") == {'X': 1.5, 'Y': -2.0, 'Z': 0.5}


class TestParseLine:
    """Tests for parse_line."""

    def test_rapid(self):
        assert parse_line("G0 X10 Y-5.5 ; Move to start position") == RapidMove(
            x=10, y=-5.5, comment='Move to start position'
        )

    def test_zero_padded_linear(self):
        assert parse_line("G01 Z-1 F300") == LinearCut(z=-1, f=300)

    def test_linear_with_extrusion(self):
        assert parse_line("G1 X1 Y2 E0.12345") == LinearCut(x=1, y=2, e=0.12345)

    def test_arc(self):
        assert parse_line("G2 X23 Y0 I-23 J0 F800") == ArcCut(
            command='G2', x=23, y=0, i=-23, j=0, f=800
        )

    def test_arc_without_endpoint_is_kept_raw(self):
        assert parse_line("G3 I-5 J0") == RawLine('G3 I-5 J0')

    def test_comment_line(self):
        assert parse_line("; Z Level: -1.000") == Comment('Z Level: -1.000')

    def test_blank_line(self):
        assert parse_line("") == RawLine('')

    def test_other_commands_are_raw(self):
        assert parse_line("M3 S10000 ; Start spindle") == RawLine('M3 S10000', 'Start spindle')
        assert parse_line("G92 E0") == RawLine('G92 E0')

    def test_motion_with_unknown_words_is_raw(self):
        assert parse_line("G1 X1 P2") == RawLine('G1 X1 P2')


class TestParseGcode:

    def test_one_segment_per_line(self):
        segments = parse_gcode("G90\n\nG0 Z5\n; done\n")
        assert segments == [RawLine('G90'), RawLine(''), RapidMove(z=5), Comment('done')]
