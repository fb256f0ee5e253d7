# trailr/core/editor.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from app_config import DEFAULTS
from trailr.qt import QtCore
from trailr.core.curve import ControlPoint, CurveModel
from trailr.core.presets import BUILTIN_PRESETS, DEFAULT_PRESET, PresetRegistry
from trailr.core.logging import get_logger

HIT_TOLERANCE = float(DEFAULTS["editor"]["hit_tolerance"])


@dataclass(frozen=True)
class Viewport:
    """Device-space rectangle the curve is drawn into (top-left origin, pixels)."""
    origin_x: float
    origin_y: float
    width: float
    height: float

    @classmethod
    def from_size(cls, width: float, height: float) -> "Viewport":
        return cls(0.0, 0.0, float(width), float(height))

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def to_curve_space(self, device_x: float, device_y: float) -> Tuple[float, float]:
        # y flipped so 0 is the bottom edge
        return ((device_x - self.origin_x) / self.width,
                1 - (device_y - self.origin_y) / self.height)

    def to_device(self, x: float, y: float) -> Tuple[float, float]:
        return (self.origin_x + x * self.width,
                self.origin_y + (1 - y) * self.height)


class CurveEditorController(QtCore.QObject):
    """
    Turns pointer events into CurveModel edits.

    Idle: a press on a point starts dragging it; a press elsewhere inserts a
    point and drags that. Dragging: moves are clamped by the model; release
    or leaving the canvas ends the drag and further presses are ignored until
    then. Double-click deletes an interior point whatever the drag state.
    curveChanged fires after every mutation and on resize.
    """
    curveChanged = QtCore.Signal()
    presetChanged = QtCore.Signal(str)
    dragStarted = QtCore.Signal(int)
    dragFinished = QtCore.Signal()

    def __init__(self, viewport: Viewport, presets: PresetRegistry = BUILTIN_PRESETS,
                 preset_name: str = DEFAULT_PRESET, hit_tolerance: float = HIT_TOLERANCE,
                 parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        if viewport.is_empty:
            raise ValueError(f"viewport must have a non-zero size, got {viewport.width}x{viewport.height}")
        self._log = get_logger(__name__)
        self.presets = presets
        self.hit_tolerance = float(hit_tolerance)
        self.viewport = viewport
        self.model = CurveModel()
        self.active_index: Optional[int] = None
        self.current_preset: Optional[str] = None

        if not self.load_preset(preset_name):
            # fall back to whatever the registry lists first
            self.load_preset(presets.names()[0])

    # ──────────────────────────────────────────────────────────────────────────
    # State
    # ──────────────────────────────────────────────────────────────────────────
    @property
    def points(self) -> List[ControlPoint]:
        return self.model.points

    @property
    def is_dragging(self) -> bool:
        return self.active_index is not None

    def hit_test(self, x: float, y: float) -> Optional[int]:
        """First point inside the tolerance box, in point order (not the nearest)."""
        tol = self.hit_tolerance
        for i, p in enumerate(self.model.points):
            if abs(p.x - x) < tol and abs(p.y - y) < tol:
                return i
        return None

    def sample(self, x: float) -> float:
        return self.model.sample(x)

    # ──────────────────────────────────────────────────────────────────────────
    # Commands
    # ──────────────────────────────────────────────────────────────────────────
    def load_preset(self, name: str) -> bool:
        self._log.info("Loading preset: %s", name)
        template = self.presets.template(name)
        if template is None:
            self._log.info("Unknown preset %r ignored", name)
            return False
        self.model.load_preset(template)
        self.active_index = None
        self.current_preset = name
        self.presetChanged.emit(name)
        self.curveChanged.emit()
        return True

    def reset(self) -> bool:
        """Reload the current preset, discarding edits."""
        if self.current_preset is None:
            return False
        return self.load_preset(self.current_preset)

    def invert(self) -> None:
        self.model.invert()
        self.active_index = None
        self.curveChanged.emit()

    def set_viewport(self, viewport: Viewport) -> None:
        if viewport.is_empty:
            self._log.debug("Ignoring empty viewport %sx%s", viewport.width, viewport.height)
            return
        self.viewport = viewport
        self.curveChanged.emit()

    # ──────────────────────────────────────────────────────────────────────────
    # Pointer events (device coordinates)
    # ──────────────────────────────────────────────────────────────────────────
    def pointer_down(self, device_x: float, device_y: float) -> None:
        if self.is_dragging:
            return
        x, y = self.viewport.to_curve_space(device_x, device_y)
        found = self.hit_test(x, y)
        if found is not None:
            self.active_index = found
        else:
            self.active_index = self.model.insert(ControlPoint(x, y))
            self._log.debug("Inserted point %d at (%.3f, %.3f)", self.active_index, x, y)
            self.curveChanged.emit()
        self.dragStarted.emit(self.active_index)

    def pointer_move(self, device_x: float, device_y: float) -> None:
        if not self.is_dragging:
            return
        x, y = self.viewport.to_curve_space(device_x, device_y)
        if self.model.move_to(self.active_index, x, y):
            self.curveChanged.emit()

    def pointer_up(self) -> None:
        self._end_drag()

    def pointer_leave(self) -> None:
        self._end_drag()

    def double_click(self, device_x: float, device_y: float) -> None:
        x, y = self.viewport.to_curve_space(device_x, device_y)
        found = self.hit_test(x, y)
        if found is None or self.model.is_anchor(found):
            return
        if self.model.remove_at(found):
            self._log.debug("Removed point %d", found)
            if self.active_index is not None:
                self._end_drag()
            self.curveChanged.emit()

    def _end_drag(self) -> None:
        if self.active_index is None:
            return
        self.active_index = None
        self.dragFinished.emit()
