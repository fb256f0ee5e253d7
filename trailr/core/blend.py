# trailr/core/blend.py
from __future__ import annotations
from enum import Enum
from typing import Callable, Dict, Optional
import numpy as np


class BlendMode(str, Enum):
    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    LIGHTEN = "lighten"
    DARKEN = "darken"
    OVERLAY = "overlay"
    DIFFERENCE = "difference"
    LINEAR_DODGE = "linear_dodge"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


_ALIASES = {
    "add": BlendMode.LINEAR_DODGE,
    "linear dodge": BlendMode.LINEAR_DODGE,
    "lineardodge": BlendMode.LINEAR_DODGE,
}


def blend_mode_from_token(token: Optional[str]) -> BlendMode:
    """Map a selector token to a BlendMode. Unknown or missing tokens give NORMAL."""
    if not token:
        return BlendMode.NORMAL
    key = str(token).strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return BlendMode(key)
    except ValueError:
        return BlendMode.NORMAL


# Per-mode colour mix. base/top are float32 RGB in [0, 1]; opacity is applied afterwards.
def _overlay(base: np.ndarray, top: np.ndarray) -> np.ndarray:
    return np.where(base <= 0.5, 2.0 * base * top, 1.0 - 2.0 * (1.0 - base) * (1.0 - top))


_MIXERS: Dict[BlendMode, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    BlendMode.NORMAL: lambda base, top: top,
    BlendMode.MULTIPLY: lambda base, top: base * top,
    BlendMode.SCREEN: lambda base, top: 1.0 - (1.0 - base) * (1.0 - top),
    BlendMode.LIGHTEN: np.maximum,
    BlendMode.DARKEN: np.minimum,
    BlendMode.OVERLAY: _overlay,
    BlendMode.DIFFERENCE: lambda base, top: np.abs(base - top),
    BlendMode.LINEAR_DODGE: lambda base, top: np.clip(base + top, 0.0, 1.0),
}


def blend(base: np.ndarray, top: np.ndarray, mode: BlendMode = BlendMode.NORMAL,
          opacity: float = 1.0) -> np.ndarray:
    """
    Composite ``top`` over ``base``.

    :param base: float32 RGB image in [0, 1], shape (h, w, 3)
    :param top: same shape as base
    :param mode: blend mode used for the colour mix
    :param opacity: 0..1 weight of the mixed result
    :returns: new float32 array, base is left untouched
    """
    if base.shape != top.shape:
        raise ValueError(f"shape mismatch: {base.shape} vs {top.shape}")
    o = float(max(0.0, min(1.0, opacity)))
    mixed = _MIXERS[mode](base, top)
    return (base * (1.0 - o) + mixed * o).astype(np.float32, copy=False)
