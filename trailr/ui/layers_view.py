# trailr/ui/layers_view.py
from __future__ import annotations
from typing import Iterable
from trailr.qt import QtCore, QtWidgets
from trailr.core.layers import Layer

class LayersView(QtWidgets.QListWidget):
    """Read-only list of the stack (top first) with the opacity each layer received."""

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumWidth(220)
        self.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self.setStyleSheet("QListWidget { background: #1a1a1a; }")

    @staticmethod
    def describe(index: int, layer: Layer) -> str:
        return f"{index:02d}  {layer.name}  •  {layer.opacity:.2f}%  •  {layer.blend_mode.label}"

    def set_layers(self, layers: Iterable[Layer]) -> None:
        self.clear()
        for i, layer in enumerate(layers):
            it = QtWidgets.QListWidgetItem(self.describe(i, layer))
            it.setData(QtCore.Qt.ItemDataRole.UserRole, layer.id)
            if layer.source is not None:
                it.setToolTip(str(layer.source))
            self.addItem(it)
