# trailr/ui/main_window.py
from __future__ import annotations
from pathlib import Path
from typing import Optional
import qtawesome as qta

from trailr.qt import QtCore, QtGui, QtWidgets
from trailr.core.apply import ApplyRunner
from trailr.core.blend import BlendMode
from trailr.core.config import get_settings
from trailr.core.editor import CurveEditorController, Viewport
from trailr.core.errors import TrailrError
from trailr.core.layers import LayerStack
from trailr.core.logging import get_logger
from trailr.core.presets import BUILTIN_PRESETS, DEFAULT_PRESET
from trailr.ui.curve_canvas import CurveCanvas
from trailr.ui.layers_view import LayersView
from trailr.ui.preview_view import PreviewView
from trailr.ui.theme import StylePalette, Theme
from app_config import APP_NAME, APPLY_COMMAND_NAME, DEFAULTS, IMAGE_EXTS

class MainWindow(QtWidgets.QMainWindow):
    def __init__(self):
        super().__init__()
        self._log = get_logger(__name__)
        self.setWindowTitle(APP_NAME)
        self.resize(1100, 640)
        self.settings = get_settings()
        self.stack: Optional[LayerStack] = None

        preset = str(self.settings.get("editor/preset", DEFAULT_PRESET))
        if preset not in BUILTIN_PRESETS:
            preset = DEFAULT_PRESET
        tolerance = self.settings.get_float("editor/hit_tolerance", DEFAULTS["editor"]["hit_tolerance"])
        radius = self.settings.get_float("editor/point_radius_px", DEFAULTS["editor"]["point_radius_px"])

        # Canvas minimum size keeps the first viewport non-empty; resizeEvent takes over from there
        self.controller = CurveEditorController(
            Viewport.from_size(240, 160), BUILTIN_PRESETS, preset, hit_tolerance=tolerance, parent=self,
        )
        self.runner = ApplyRunner(APPLY_COMMAND_NAME, parent=self)

        self.canvas = CurveCanvas(self.controller, StylePalette.from_theme(radius), self)
        self.layers_view = LayersView(self)
        self.preview = PreviewView(self)

        self._build_controls()
        self._build_layout()
        self._build_menu()
        self._wire()
        self._restore_state()

    def _icon(self, name: str) -> QtGui.QIcon:
        try:
            return qta.icon(name, color=Theme.text)
        except Exception as ex:
            self._log.debug("icon %s unavailable: %s", name, ex)
            return QtGui.QIcon()

    def _build_controls(self):
        self.preset_combo = QtWidgets.QComboBox()
        for name in BUILTIN_PRESETS.names():
            self.preset_combo.addItem(name.replace("_", " ").title(), name)
        self.preset_combo.setCurrentIndex(max(0, self.preset_combo.findData(self.controller.current_preset)))

        self.blend_combo = QtWidgets.QComboBox()
        for mode in BlendMode:
            self.blend_combo.addItem(mode.label, mode.value)
        blend = str(self.settings.get("apply/blend_mode", DEFAULTS["apply"]["blend_mode"]))
        self.blend_combo.setCurrentIndex(max(0, self.blend_combo.findData(blend)))

        self.reset_btn = QtWidgets.QToolButton()
        self.reset_btn.setIcon(self._icon("fa5s.undo"))
        self.reset_btn.setToolTip("Reset curve to the selected preset")
        self.invert_btn = QtWidgets.QToolButton()
        self.invert_btn.setIcon(self._icon("fa5s.exchange-alt"))
        self.invert_btn.setToolTip("Mirror the curve left ↔ right")
        self.run_btn = QtWidgets.QPushButton("Run")
        self.run_btn.setIcon(self._icon("fa5s.play"))
        self.run_btn.setToolTip(APPLY_COMMAND_NAME)

    def _build_layout(self):
        controls = QtWidgets.QHBoxLayout()
        controls.setContentsMargins(6, 6, 6, 6)
        controls.setSpacing(8)
        controls.addWidget(QtWidgets.QLabel("Preset"))
        controls.addWidget(self.preset_combo)
        controls.addWidget(self.reset_btn)
        controls.addWidget(self.invert_btn)
        controls.addSpacing(12)
        controls.addWidget(QtWidgets.QLabel("Blend"))
        controls.addWidget(self.blend_combo)
        controls.addStretch()
        controls.addWidget(self.run_btn)

        left_col = QtWidgets.QWidget()
        left_layout = QtWidgets.QVBoxLayout(left_col)
        left_layout.setContentsMargins(0, 0, 0, 0)
        left_layout.addWidget(self.canvas, 1)
        left_layout.addLayout(controls)

        right = QtWidgets.QSplitter(QtCore.Qt.Orientation.Vertical)
        right.addWidget(self.preview)
        right.addWidget(self.layers_view)

        splitter = QtWidgets.QSplitter()
        splitter.addWidget(left_col)
        splitter.addWidget(right)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        self.setCentralWidget(splitter)

    def _build_menu(self):
        bar = self.menuBar()
        file_menu = bar.addMenu("&File")

        open_act = QtGui.QAction(self._icon("fa5s.folder-open"), "&Open Layers...", self)
        open_act.setShortcut(QtGui.QKeySequence.StandardKey.Open)
        open_act.triggered.connect(self._open_dialog)
        file_menu.addAction(open_act)

        exit_act = QtGui.QAction("E&xit", self)
        exit_act.triggered.connect(self.close)
        file_menu.addAction(exit_act)

    def _wire(self):
        self.preset_combo.currentIndexChanged.connect(self._on_preset_selected)
        self.controller.presetChanged.connect(self._sync_preset_combo)
        self.reset_btn.clicked.connect(self.controller.reset)
        self.invert_btn.clicked.connect(self.controller.invert)
        self.run_btn.clicked.connect(self.run_apply)
        self.blend_combo.currentIndexChanged.connect(
            lambda _i: self.settings.set("apply/blend_mode", self.blend_combo.currentData())
        )
        self.runner.busyChanged.connect(lambda busy: self.run_btn.setEnabled(not busy))

    # ──────────────────────────────────────────────────────────────────────────
    # Actions
    # ──────────────────────────────────────────────────────────────────────────
    def _on_preset_selected(self, index: int) -> None:
        name = self.preset_combo.itemData(index)
        if name and self.controller.load_preset(name):
            self.settings.set("editor/preset", name)

    @QtCore.Slot(str)
    def _sync_preset_combo(self, name: str) -> None:
        i = self.preset_combo.findData(name)
        if i >= 0 and i != self.preset_combo.currentIndex():
            self.preset_combo.blockSignals(True)
            self.preset_combo.setCurrentIndex(i)
            self.preset_combo.blockSignals(False)

    def _open_dialog(self):
        patterns = " ".join(f"*{ext}" for ext in sorted(IMAGE_EXTS))
        paths, _ = QtWidgets.QFileDialog.getOpenFileNames(
            self, "Open layers (top first)", self.settings.get("paths/last_open_dir", ""),
            f"Images ({patterns})"
        )
        if not paths:
            return
        self.settings.set("paths/last_open_dir", str(Path(paths[0]).parent))
        self.open_layers(sorted(paths))

    def open_layers(self, paths) -> None:
        try:
            self.stack = LayerStack.from_files(paths)
        except TrailrError as ex:
            self._report(ex)
            return
        self._refresh_stack()

    def run_apply(self) -> None:
        try:
            applied = self.runner.run(self.controller.sample, self.stack, self.blend_combo.currentData())
        except TrailrError as ex:
            self._report(ex)
            return
        if not applied:
            self.statusBar().showMessage("No layers loaded: open some images first.", 5000)
            return
        self.statusBar().showMessage(f"{APPLY_COMMAND_NAME}: {len(applied)} layer(s) updated", 5000)
        self._refresh_stack()

    def _refresh_stack(self) -> None:
        if self.stack is None:
            self.layers_view.clear()
            self.preview.set_image(None)
            return
        self.layers_view.set_layers(self.stack)
        try:
            self.preview.set_image(self.stack.composite())
        except TrailrError as ex:
            self._log.warning("Preview unavailable: %s", ex)
            self.preview.set_image(None)

    def _report(self, ex: Exception) -> None:
        self._log.error("%s", ex)
        QtWidgets.QMessageBox.warning(self, APP_NAME, str(ex))

    # ──────────────────────────────────────────────────────────────────────────
    # State
    # ──────────────────────────────────────────────────────────────────────────
    def _restore_state(self):
        g = self.settings.get("ui/main_geometry")
        if isinstance(g, QtCore.QByteArray):
            self.restoreGeometry(g)

    def closeEvent(self, e: QtGui.QCloseEvent) -> None:
        self.settings.set("ui/main_geometry", self.saveGeometry())
        return super().closeEvent(e)
