# trailr/ui/curve_canvas.py
from __future__ import annotations
from typing import Optional, Sequence
from trailr.qt import QtCore, QtGui, QtWidgets
from trailr.core.curve import ControlPoint
from trailr.core.editor import CurveEditorController, Viewport
from trailr.ui.theme import StylePalette

GRID_DIVISIONS = 4


def paint_curve(p: QtGui.QPainter, points: Sequence[ControlPoint], width: float, height: float,
                palette: StylePalette, active_index: Optional[int] = None) -> None:
    """Draw background, grid, the polyline through ``points`` and a marker per point."""
    w, h = float(width), float(height)
    p.fillRect(QtCore.QRectF(0, 0, w, h), palette.background)

    # Grid: quarters in both axes, centre line a touch brighter
    p.setRenderHint(QtGui.QPainter.Antialiasing, False)
    grid_pen = QtGui.QPen(palette.grid, 1)
    p.setPen(grid_pen)
    for i in range(1, GRID_DIVISIONS):
        gx = w * i / GRID_DIVISIONS
        gy = h * i / GRID_DIVISIONS
        p.drawLine(QtCore.QPointF(gx, 0), QtCore.QPointF(gx, h))
        p.drawLine(QtCore.QPointF(0, gy), QtCore.QPointF(w, gy))
    p.setPen(QtGui.QPen(palette.grid.lighter(130), 1))
    p.drawLine(QtCore.QPointF(0, h / 2), QtCore.QPointF(w, h / 2))

    if not points:
        return

    p.setRenderHint(QtGui.QPainter.Antialiasing, True)
    vp = Viewport.from_size(w, h)
    device = [QtCore.QPointF(*vp.to_device(pt.x, pt.y)) for pt in points]
    p.setPen(QtGui.QPen(palette.curve, palette.curve_width))
    p.drawPolyline(QtGui.QPolygonF(device))

    p.setPen(QtCore.Qt.PenStyle.NoPen)
    r = palette.point_radius
    for i, c in enumerate(device):
        p.setBrush(palette.active_point if i == active_index else palette.point)
        p.drawEllipse(c, r, r)


class CurveCanvas(QtWidgets.QWidget):
    """Paints the controller's curve and forwards mouse input to it."""

    def __init__(self, controller: CurveEditorController, palette: Optional[StylePalette] = None,
                 parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self.style_palette = palette or StylePalette.from_theme()
        self.setMinimumSize(240, 160)
        self.setMouseTracking(False)
        self.setSizePolicy(QtWidgets.QSizePolicy.Policy.Expanding, QtWidgets.QSizePolicy.Policy.Expanding)
        self.setToolTip("Click to add a point, drag to shape, double-click to remove")
        controller.curveChanged.connect(self.update)
        controller.dragStarted.connect(lambda _index: self.update())
        controller.dragFinished.connect(self.update)

    def resizeEvent(self, e: QtGui.QResizeEvent) -> None:
        super().resizeEvent(e)
        self.controller.set_viewport(Viewport.from_size(self.width(), self.height()))

    def paintEvent(self, e: QtGui.QPaintEvent) -> None:
        p = QtGui.QPainter(self)
        try:
            paint_curve(p, self.controller.points, self.width(), self.height(),
                        self.style_palette, self.controller.active_index)
        finally:
            p.end()

    def render_image(self) -> QtGui.QImage:
        """Offscreen render at the current size (used for snapshots/tests)."""
        img = QtGui.QImage(max(1, self.width()), max(1, self.height()), QtGui.QImage.Format.Format_RGB32)
        p = QtGui.QPainter(img)
        try:
            paint_curve(p, self.controller.points, img.width(), img.height(),
                        self.style_palette, self.controller.active_index)
        finally:
            p.end()
        return img

    # Input
    def mousePressEvent(self, e: QtGui.QMouseEvent) -> None:
        if e.button() == QtCore.Qt.MouseButton.LeftButton:
            pos = e.position()
            self.controller.pointer_down(pos.x(), pos.y())
            e.accept()
            return
        super().mousePressEvent(e)

    def mouseMoveEvent(self, e: QtGui.QMouseEvent) -> None:
        pos = e.position()
        # Qt grabs the mouse while a button is held and delays leaveEvent until release
        if self.controller.is_dragging and not self.rect().contains(pos.toPoint()):
            self.controller.pointer_leave()
        else:
            self.controller.pointer_move(pos.x(), pos.y())
        super().mouseMoveEvent(e)

    def mouseReleaseEvent(self, e: QtGui.QMouseEvent) -> None:
        if e.button() == QtCore.Qt.MouseButton.LeftButton:
            self.controller.pointer_up()
        super().mouseReleaseEvent(e)

    def mouseDoubleClickEvent(self, e: QtGui.QMouseEvent) -> None:
        if e.button() == QtCore.Qt.MouseButton.LeftButton:
            pos = e.position()
            self.controller.double_click(pos.x(), pos.y())
            e.accept()
            return
        super().mouseDoubleClickEvent(e)

    def leaveEvent(self, e: QtCore.QEvent) -> None:
        self.controller.pointer_leave()
        super().leaveEvent(e)
