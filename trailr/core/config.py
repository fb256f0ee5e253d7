# trailr/core/config.py
from __future__ import annotations
from typing import Any
from PySide6.QtCore import QSettings
from app_config import apply_qsettings_org, DEFAULTS

class Settings:
    """
    Thin wrapper over QSettings with defaults and simple dict-like get/set.
    Only editor choices are stored here (preset name, blend mode, folders);
    curve points are never persisted.
    """
    def __init__(self, qsettings: QSettings | None = None):
        apply_qsettings_org()
        self._qs = qsettings if qsettings is not None else QSettings()

        # Prime defaults if key not present
        for group, values in DEFAULTS.items():
            for k, v in values.items() if isinstance(values, dict) else []:
                key = f"{group}/{k}"
                if not self._qs.contains(key):
                    self._qs.setValue(key, v)

    def get(self, key: str, default: Any = None) -> Any:
        val = self._qs.value(key, default)
        return val if val is not None else default

    def get_float(self, key: str, default: float) -> float:
        # INI-backed QSettings hands numbers back as strings
        try:
            return float(self.get(key, default))
        except (TypeError, ValueError):
            return float(default)

    def set(self, key: str, value: Any) -> None:
        self._qs.setValue(key, value)
        self._qs.sync()

def get_settings() -> Settings:
    return Settings()
