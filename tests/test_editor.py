"""Tests for CurveEditorController: hit-testing, drag state and presets."""

import pytest

from trailr.core.curve import ControlPoint
from trailr.core.editor import CurveEditorController, Viewport
from trailr.core.presets import PresetRegistry

from conftest import to_device


class TestViewport:
    def test_to_curve_space_flips_y(self):
        vp = Viewport(10, 20, 200, 100)
        assert vp.to_curve_space(10, 20) == (0.0, 1.0)
        assert vp.to_curve_space(210, 120) == (1.0, 0.0)
        assert vp.to_curve_space(110, 45) == (0.5, 0.75)

    def test_to_device_inverts_mapping(self):
        vp = Viewport(10, 20, 200, 100)
        assert vp.to_device(0.5, 0.75) == (110, 45)

    def test_empty_viewport_rejected(self):
        with pytest.raises(ValueError):
            CurveEditorController(Viewport.from_size(0, 120))

    def test_empty_resize_ignored(self, controller, changes):
        controller.set_viewport(Viewport.from_size(0, 0))
        assert controller.viewport.width == 100
        assert changes == []

    def test_resize_rerenders_without_touching_curve(self, controller, changes):
        before = controller.points
        controller.set_viewport(Viewport.from_size(300, 150))
        assert changes == [True]
        assert controller.points == before


class TestPresets:
    def test_starts_on_default(self, controller):
        assert controller.current_preset == "default"
        assert controller.points == [ControlPoint(0, 1), ControlPoint(1, 0)]

    def test_load_preset(self, controller, changes):
        assert controller.load_preset("bell") is True
        assert controller.current_preset == "bell"
        assert controller.sample(0.25) == 0.5
        assert changes == [True]

    def test_unknown_preset_is_noop(self, controller, changes):
        controller.load_preset("bell")
        before = controller.points
        assert controller.load_preset("nope") is False
        assert controller.points == before
        assert controller.current_preset == "bell"
        assert changes == [True]

    def test_reset_reloads_current_preset(self, controller):
        controller.load_preset("comet")
        controller.pointer_down(*to_device(0.5, 0.5))
        controller.pointer_up()
        assert len(controller.points) == 4
        controller.reset()
        assert controller.points == [ControlPoint(0, 1), ControlPoint(0.1, 0.7), ControlPoint(1, 0)]

    def test_unknown_initial_preset_falls_back_to_first(self):
        registry = PresetRegistry.from_dict({"flat": [(0, 0.5), (1, 0.5)]})
        ctl = CurveEditorController(Viewport.from_size(10, 10), registry, "missing")
        assert ctl.current_preset == "flat"

    def test_preset_signal(self, controller):
        names = []
        controller.presetChanged.connect(lambda name: names.append(name))
        controller.load_preset("fade_in")
        controller.load_preset("unknown")
        assert names == ["fade_in"]


class TestPointerDown:
    def test_miss_inserts_and_starts_drag(self, controller, changes):
        controller.pointer_down(*to_device(0.3, 0.6))
        assert controller.active_index == 1
        assert controller.points[1].x == pytest.approx(0.3)
        assert controller.points[1].y == pytest.approx(0.6)
        assert changes == [True]

    def test_hit_starts_drag_without_insert(self, controller, changes):
        controller.pointer_down(*to_device(0.02, 0.97))
        assert controller.active_index == 0
        assert len(controller.points) == 2
        assert changes == []

    def test_tolerance_is_strict(self, controller):
        controller.pointer_down(*to_device(0.06, 1.0))
        # just outside the box: inserted instead of grabbing the anchor
        assert len(controller.points) == 3

    def test_first_match_wins_not_nearest(self, controller):
        controller.load_preset("full")
        controller.model.insert(ControlPoint(0.5, 1.0))
        controller.model.insert(ControlPoint(0.53, 1.0))
        # two close points at x=.5 and x=.53; a press at .52 is nearest the second
        assert controller.hit_test(0.52, 1.0) == 1

    def test_press_while_dragging_ignored(self, controller):
        controller.pointer_down(*to_device(0.5, 0.2))
        controller.pointer_down(*to_device(0.8, 0.8))
        assert len(controller.points) == 3
        assert controller.active_index == 1


class TestDrag:
    def test_move_updates_active_point(self, controller, changes):
        controller.pointer_down(*to_device(0.5, 0.5))
        controller.pointer_move(*to_device(0.4, 0.9))
        assert controller.points[1].x == pytest.approx(0.4)
        assert controller.points[1].y == pytest.approx(0.9)
        assert len(changes) == 2

    def test_move_clamps_to_neighbours(self, controller):
        controller.pointer_down(*to_device(0.5, 0.5))
        controller.pointer_move(*to_device(1.4, -0.5))
        assert controller.points[1] == ControlPoint(1.0, 0.0)
        controller.pointer_move(*to_device(-1.0, 2.0))
        assert controller.points[1] == ControlPoint(0.0, 1.0)

    def test_anchor_drag_is_vertical(self, controller):
        controller.pointer_down(*to_device(1.0, 0.0))
        controller.pointer_move(*to_device(0.7, 0.4))
        assert controller.points[-1].x == 1.0
        assert controller.points[-1].y == pytest.approx(0.4)

    def test_move_when_idle_does_nothing(self, controller, changes):
        controller.pointer_move(*to_device(0.5, 0.5))
        assert changes == []

    @pytest.mark.parametrize("end", ["pointer_up", "pointer_leave"])
    def test_release_or_leave_ends_drag(self, controller, end):
        finished = []
        controller.dragFinished.connect(lambda: finished.append(True))
        controller.pointer_down(*to_device(0.5, 0.5))
        getattr(controller, end)()
        assert controller.active_index is None
        assert finished == [True]
        before = controller.points
        controller.pointer_move(*to_device(0.9, 0.9))
        assert controller.points == before

    def test_drag_started_signal(self, controller):
        started = []
        controller.dragStarted.connect(lambda i: started.append(i))
        controller.pointer_down(*to_device(0.5, 0.5))
        assert started == [1]


class TestDoubleClick:
    def test_removes_interior_point(self, controller):
        controller.load_preset("bell")
        controller.double_click(*to_device(0.51, 0.98))
        assert len(controller.points) == 2

    def test_anchor_survives(self, controller, changes):
        controller.double_click(*to_device(0.0, 1.0))
        controller.double_click(*to_device(1.0, 0.0))
        assert len(controller.points) == 2
        assert changes == []

    def test_miss_is_noop(self, controller):
        controller.load_preset("bell")
        controller.double_click(*to_device(0.25, 0.1))
        assert len(controller.points) == 3

    def test_remove_while_dragging_ends_drag(self, controller):
        controller.load_preset("bell")
        controller.pointer_down(*to_device(0.5, 1.0))
        assert controller.active_index == 1
        controller.double_click(*to_device(0.5, 1.0))
        assert controller.active_index is None
        assert len(controller.points) == 2


class TestInvert:
    def test_invert_mirrors_and_renders(self, controller, changes):
        controller.load_preset("comet")
        changes.clear()
        controller.invert()
        assert [p.x for p in controller.points] == pytest.approx([0.0, 0.9, 1.0])
        assert controller.sample(0) == 0.0
        assert controller.sample(1) == 1.0
        assert changes == [True]
