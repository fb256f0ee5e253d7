# trailr/ui/theme.py
from __future__ import annotations
from dataclasses import dataclass
from trailr.qt import QtGui, QtWidgets


class Theme:
    bg          = QtGui.QColor("#1f2124")
    panel       = QtGui.QColor("#26292e")
    panel_alt   = QtGui.QColor("#2c3036")
    stroke      = QtGui.QColor("#3a3f46")
    text        = QtGui.QColor("#d6d7d9")
    text_dim    = QtGui.QColor("#aab0b7")
    accent      = QtGui.QColor("#3fb6ff")
    accent_dim  = QtGui.QColor("#2a90cc")
    danger      = QtGui.QColor("#e57373")

    # Curve canvas
    canvas_bg   = QtGui.QColor("#333333")
    canvas_grid = QtGui.QColor("#444444")
    curve       = QtGui.QColor("#00aaff")
    point       = QtGui.QColor("#ffffff")
    point_active = QtGui.QColor("#fdd663")


@dataclass(frozen=True)
class StylePalette:
    """Colours and sizes the curve painter needs; it never looks at Theme itself."""
    background: QtGui.QColor
    grid: QtGui.QColor
    curve: QtGui.QColor
    point: QtGui.QColor
    active_point: QtGui.QColor
    curve_width: float = 2.0
    point_radius: float = 5.0

    @classmethod
    def from_theme(cls, point_radius: float = 5.0) -> "StylePalette":
        return cls(
            background=QtGui.QColor(Theme.canvas_bg),
            grid=QtGui.QColor(Theme.canvas_grid),
            curve=QtGui.QColor(Theme.curve),
            point=QtGui.QColor(Theme.point),
            active_point=QtGui.QColor(Theme.point_active),
            point_radius=float(point_radius),
        )

def apply_fusion_theme(app: QtWidgets.QApplication) -> None:
    app.setStyle("Fusion")
    pal = QtGui.QPalette()
    pal.setColor(QtGui.QPalette.Window, Theme.bg)
    pal.setColor(QtGui.QPalette.Base, Theme.panel)
    pal.setColor(QtGui.QPalette.AlternateBase, Theme.panel_alt)
    pal.setColor(QtGui.QPalette.Text, Theme.text)
    pal.setColor(QtGui.QPalette.WindowText, Theme.text)
    pal.setColor(QtGui.QPalette.ButtonText, Theme.text)
    pal.setColor(QtGui.QPalette.Button, Theme.panel)
    pal.setColor(QtGui.QPalette.ToolTipBase, Theme.panel)
    pal.setColor(QtGui.QPalette.ToolTipText, Theme.text)
    pal.setColor(QtGui.QPalette.Highlight, Theme.accent)
    pal.setColor(QtGui.QPalette.HighlightedText, QtGui.QColor("#0c0d0e"))
    app.setPalette(pal)
