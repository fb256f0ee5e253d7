# trailr/qt.py
import PySide6
from PySide6 import QtCore, QtGui, QtWidgets

Signal = QtCore.Signal
Slot = QtCore.Slot

QT_BINDING = "PySide6"


def qt_versions() -> str:
    """Binding and runtime Qt versions, for the startup log."""
    return f"{QT_BINDING} {PySide6.__version__} / Qt {QtCore.qVersion()}"


__all__ = ["QtCore", "QtGui", "QtWidgets", "Signal", "Slot", "QT_BINDING", "qt_versions"]
