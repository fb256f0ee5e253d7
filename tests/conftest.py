"""Shared pytest fixtures for trailr tests."""

from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from trailr.core.curve import ControlPoint, CurveModel
from trailr.core.editor import CurveEditorController, Viewport
from trailr.core.presets import BUILTIN_PRESETS

# Device-space size used by controller fixtures; 100x100 keeps the maths readable
VIEW_SIZE = 100.0


def to_device(x: float, y: float) -> tuple[float, float]:
    """Curve-space (x, y) to device pixels for a VIEW_SIZE square viewport."""
    return x * VIEW_SIZE, (1 - y) * VIEW_SIZE


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for widget tests."""
    from PySide6 import QtWidgets

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def default_model() -> CurveModel:
    return CurveModel(BUILTIN_PRESETS.template("default"))


@pytest.fixture
def bell_model() -> CurveModel:
    return CurveModel(BUILTIN_PRESETS.template("bell"))


@pytest.fixture
def wavy_model() -> CurveModel:
    return CurveModel([
        ControlPoint(0.0, 0.2),
        ControlPoint(0.2, 0.9),
        ControlPoint(0.4, 0.1),
        ControlPoint(0.4, 0.6),
        ControlPoint(0.75, 0.3),
        ControlPoint(1.0, 1.0),
    ])


@pytest.fixture
def controller() -> CurveEditorController:
    return CurveEditorController(Viewport.from_size(VIEW_SIZE, VIEW_SIZE))


@pytest.fixture
def changes(controller) -> list:
    """Records every curveChanged emission."""
    seen = []
    controller.curveChanged.connect(lambda: seen.append(True))
    return seen
