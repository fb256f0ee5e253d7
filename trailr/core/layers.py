# trailr/core/layers.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence
import math
import uuid

import cv2
import numpy as np

from trailr.core.blend import BlendMode, blend
from trailr.core.errors import LayerLoadError, LayerStackError
from trailr.core.logging import get_logger

if TYPE_CHECKING:
    from trailr.core.apply import LayerAssignment

log = get_logger(__name__)


@dataclass(eq=False)
class Layer:
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Layer"
    image: Optional[np.ndarray] = None  # float32 RGB in [0, 1]
    opacity: float = 100.0              # percent
    blend_mode: BlendMode = BlendMode.NORMAL
    source: Optional[Path] = None


def read_rgb(path: Path | str) -> np.ndarray:
    """Decode an image file to float32 RGB in [0, 1]."""
    path = Path(path)
    try:
        # np.fromfile + imdecode copes with non-ASCII paths, cv2.imread does not on Windows
        raw = np.fromfile(str(path), dtype=np.uint8)
    except OSError as ex:
        raise LayerLoadError(path, str(ex)) from ex
    if raw.size == 0:
        raise LayerLoadError(path, "empty file")
    try:
        bgr = cv2.imdecode(raw, cv2.IMREAD_COLOR)
    except cv2.error as ex:
        raise LayerLoadError(path, str(ex)) from ex
    if bgr is None:
        raise LayerLoadError(path)
    rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    return rgb.astype(np.float32) / 255.0


class LayerStack:
    """
    Ordered image layers; index 0 is the top of the stack.

    Acts as the apply target for ApplyRunner: ``layers()`` hands out the
    handles and ``apply_batch()`` writes opacity/blend mode back.
    """

    def __init__(self, layers: Optional[Iterable[Layer]] = None) -> None:
        self._layers: List[Layer] = list(layers or [])
        self._log = get_logger(__name__)

    @classmethod
    def from_files(cls, paths: Sequence[Path | str]) -> "LayerStack":
        layers: List[Layer] = []
        size = None
        for p in paths:
            img = read_rgb(p)
            if size is None:
                size = (img.shape[1], img.shape[0])
            elif (img.shape[1], img.shape[0]) != size:
                img = cv2.resize(img, size, interpolation=cv2.INTER_AREA)
            layers.append(Layer(name=Path(p).stem, image=img, source=Path(p)))
        log.info("Loaded %d layer(s)%s", len(layers), f" at {size[0]}x{size[1]}" if size else "")
        return cls(layers)

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self):
        return iter(self._layers)

    def __getitem__(self, index: int) -> Layer:
        return self._layers[index]

    def layers(self) -> List[Layer]:
        return list(self._layers)

    def apply_batch(self, assignments: Sequence["LayerAssignment"], command_name: str = "") -> None:
        """Write every assignment or none of them."""
        known = {id(layer) for layer in self._layers}
        for a in assignments:
            if id(a.layer) not in known:
                raise LayerStackError(f"{command_name or 'apply'}: layer {getattr(a.layer, 'name', a.layer)!r} is not in this stack")
            if not math.isfinite(a.opacity) or not 0.0 <= a.opacity <= 100.0:
                raise LayerStackError(f"{command_name or 'apply'}: opacity {a.opacity!r} out of range")
        for a in assignments:
            a.layer.opacity = float(a.opacity)
            a.layer.blend_mode = a.blend_mode
        self._log.debug("%s: committed %d layer(s)", command_name or "apply", len(assignments))

    def composite(self) -> np.ndarray:
        """Flatten bottom-up into uint8 RGB for preview."""
        images = [layer for layer in self._layers if layer.image is not None]
        if not images:
            raise LayerStackError("nothing to composite")
        h, w = images[0].image.shape[:2]
        out = np.zeros((h, w, 3), dtype=np.float32)
        for layer in reversed(images):
            img = layer.image
            if img.shape[:2] != (h, w):
                img = cv2.resize(img, (w, h), interpolation=cv2.INTER_AREA)
            out = blend(out, img, layer.blend_mode, layer.opacity / 100.0)
        return (np.clip(out, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
