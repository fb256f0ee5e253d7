# trailr/ui/preview_view.py
from __future__ import annotations
from typing import Optional
import numpy as np
from trailr.qt import QtCore, QtGui, QtWidgets

class PreviewView(QtWidgets.QLabel):
    """
    Shows the flattened layer stack. Accepts numpy RGB uint8 frames.
    """
    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(240, 160)
        self.setAlignment(QtCore.Qt.AlignCenter)
        self.setStyleSheet("background-color: #222; color: #777;")
        self.setText("Open some layers to preview the trail")
        self._qimage: Optional[QtGui.QImage] = None

    @staticmethod
    def np_to_qimage(rgb: np.ndarray) -> QtGui.QImage:
        # rgb shape expected (h, w, 3), uint8
        rgb = np.ascontiguousarray(rgb, dtype=np.uint8)
        h, w, ch = rgb.shape
        if ch != 3:
            raise ValueError(f"expected 3 channels, got {ch}")
        # copy() so the QImage never points at a numpy buffer that goes away
        return QtGui.QImage(rgb.data, w, h, 3 * w, QtGui.QImage.Format.Format_RGB888).copy()

    @QtCore.Slot(object)
    def set_image(self, rgb: Optional[np.ndarray]) -> None:
        if rgb is None:
            self._qimage = None
            self.setText("Open some layers to preview the trail")
        else:
            self._qimage = self.np_to_qimage(rgb)
            self.setText("")
        self.update()

    def has_image(self) -> bool:
        return self._qimage is not None

    def paintEvent(self, e: QtGui.QPaintEvent) -> None:
        if not self._qimage:
            super().paintEvent(e)
            return
        p = QtGui.QPainter(self)
        p.fillRect(self.rect(), QtGui.QColor("#222"))
        target = QtCore.QRectF(self.rect())
        scaled = self._qimage.scaled(
            target.size().toSize(),
            QtCore.Qt.AspectRatioMode.KeepAspectRatio,
            QtCore.Qt.TransformationMode.SmoothTransformation,
        )
        x = (self.width() - scaled.width()) / 2
        y = (self.height() - scaled.height()) / 2
        p.drawImage(QtCore.QPointF(x, y), scaled)
        p.end()
