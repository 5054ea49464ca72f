"""Tests for the post-processing pipeline and text optimisation."""
from toolpath.models import MachiningSettings, RapidMove
from toolpath.utils.optimize import (
    ArcFitter,
    PostProcessingPipeline,
    RedundantMoveFilter,
    create_pipeline,
    optimize_gcode_text,
)


class RecordingPass:
    """Post-processor that records its calls."""

    def __init__(self, enabled=True):
        self.enabled = enabled
        self.calls = 0

    def is_enabled(self):
        return self.enabled

    def process(self, segments):
        self.calls += 1
        return segments[:-1]


class TestPostProcessingPipeline:
    """Tests for PostProcessingPipeline and create_pipeline."""

    def test_factory_registers_dedup_then_arc_fit(self):
        pipeline = create_pipeline(MachiningSettings())
        assert [type(p) for p in pipeline.processors] == [RedundantMoveFilter, ArcFitter]

    def test_disabled_passes_are_skipped(self):
        enabled, disabled = RecordingPass(), RecordingPass(enabled=False)
        pipeline = PostProcessingPipeline()
        pipeline.register(enabled)
        pipeline.register(disabled)

        result = pipeline.run([RapidMove(z=1), RapidMove(z=2)])

        assert result == [RapidMove(z=1)]
        assert enabled.calls == 1
        assert disabled.calls == 0

    def test_nothing_enabled_returns_input(self):
        segments = [RapidMove(z=1), RapidMove(z=1)]
        assert create_pipeline(MachiningSettings()).run(segments) == segments


class TestOptimizeGcodeText:
    """Tests for optimize_gcode_text."""

    def test_removes_duplicate_rapid(self):
        text, removed = optimize_gcode_text("G0 X0 Y0 Z5\nG0 X0 Y0 Z5\nM5\n")
        assert text == "G0 X0.000 Y0.000 Z5.000\nM5\n"
        assert removed == 1

    def test_comments_and_raw_lines_survive(self):
        text, removed = optimize_gcode_text("; header\nM3 S1000 ; Start spindle\n\nG28\n")
        assert text == "; header\nM3 S1000 ; Start spindle\n\nG28\n"
        assert removed == 0

    def test_fit_arcs(self):
        source = "G0 X20 Y0 Z-1\nG1 X10 Y0 F800\nG1 X0 Y10\nG1 X-10 Y0\n"
        text, removed = optimize_gcode_text(source, remove_redundant=False, fit_arcs=True)
        assert text.splitlines() == [
            "G0 X20.000 Y0.000 Z-1.000",
            "G1 X10.000 Y0.000 F800",
            "G3 X-10.000 Y0.000 I-10.000 J0.000 ; Fitted arc",
        ]
        assert removed == 1

    def test_tolerance_controls_small_moves(self):
        source = "G0 X0 Y0 Z0\nG1 X1 F100\nG1 X1.05\n"
        _, removed_fine = optimize_gcode_text(source, tolerance=0.01)
        _, removed_coarse = optimize_gcode_text(source, tolerance=0.1)
        assert removed_fine == 0
        assert removed_coarse == 1
