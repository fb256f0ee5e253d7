# trailr/core/errors.py
from __future__ import annotations


class TrailrError(Exception):
    """Base class for errors the UI reports to the user."""


class LayerLoadError(TrailrError):
    def __init__(self, path, reason: str = "could not decode image"):
        super().__init__(f"{path}: {reason}")
        self.path = path


class LayerStackError(TrailrError):
    pass


class ApplyInProgressError(TrailrError):
    """An apply run was requested while a previous one is still outstanding."""
