# main.py
from __future__ import annotations
import logging
import sys
from trailr.qt import QtWidgets, qt_versions
from app_config import ensure_app_dirs, apply_qsettings_org, banner
from trailr.core.logging import setup_logging
from trailr.ui.main_window import MainWindow
from trailr.ui.theme import apply_fusion_theme


def main() -> int:
    ensure_app_dirs()
    apply_qsettings_org()
    logger = setup_logging(level=logging.DEBUG if "--debug" in sys.argv else logging.INFO)

    app = QtWidgets.QApplication(sys.argv)
    logger.info(banner())
    logger.info(qt_versions())

    apply_fusion_theme(app)
    mw = MainWindow()
    mw.show()

    return app.exec()

if __name__ == "__main__":
    raise SystemExit(main())
