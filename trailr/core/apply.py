# trailr/core/apply.py
from __future__ import annotations
from typing import Any, Callable, List, NamedTuple, Optional, Protocol, Sequence

from app_config import APPLY_COMMAND_NAME
from trailr.qt import QtCore
from trailr.core.blend import BlendMode, blend_mode_from_token
from trailr.core.errors import ApplyInProgressError
from trailr.core.logging import get_logger


class LayerAssignment(NamedTuple):
    layer: Any              # opaque host handle
    opacity: float          # percent, 0..100
    blend_mode: BlendMode


class ApplyTarget(Protocol):
    def layers(self) -> Sequence[Any]: ...
    def apply_batch(self, assignments: Sequence[LayerAssignment], command_name: str) -> None: ...


def normalized_position(index: int, count: int) -> float:
    """Map a layer index to [0, 1]. A single layer sits at 0."""
    if count <= 1:
        return 0.0
    return index / (count - 1)


def plan_assignments(sampler: Callable[[float], float], layers: Sequence[Any],
                     blend_mode: BlendMode) -> List[LayerAssignment]:
    total = len(layers)
    return [
        LayerAssignment(layer, sampler(normalized_position(i, total)) * 100, blend_mode)
        for i, layer in enumerate(layers)
    ]


class ApplyRunner(QtCore.QObject):
    """
    Samples the curve once per layer and hands the batch to the apply target.
    Only one run may be outstanding; the UI disables Run while busyChanged(True).
    """
    busyChanged = QtCore.Signal(bool)
    applyFinished = QtCore.Signal(int)      # layers touched

    def __init__(self, command_name: str = APPLY_COMMAND_NAME, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._log = get_logger(__name__)
        self.command_name = command_name
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def run(self, sampler: Callable[[float], float], target: Optional[ApplyTarget],
            blend_token: Optional[str]) -> List[LayerAssignment]:
        if self._busy:
            raise ApplyInProgressError(f"{self.command_name} is already running")

        layers = list(target.layers()) if target is not None else []
        if not layers:
            self._log.warning("%s: no layers to apply the curve to", self.command_name)
            return []

        mode = blend_mode_from_token(blend_token)
        self._log.info("%s: %d layer(s), blend=%s", self.command_name, len(layers), mode.value)
        assignments = plan_assignments(sampler, layers, mode)
        for i, a in enumerate(assignments):
            self._log.debug("Layer %d: setting opacity to %.2f%%", i, a.opacity)

        self._set_busy(True)
        try:
            target.apply_batch(assignments, self.command_name)
        except Exception:
            self._log.exception("%s failed", self.command_name)
            raise
        finally:
            self._set_busy(False)

        self.applyFinished.emit(len(assignments))
        return assignments

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        self.busyChanged.emit(busy)
