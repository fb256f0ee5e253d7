# trailr/core/presets.py
from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from trailr.core.curve import ControlPoint


@dataclass(frozen=True)
class Preset:
    name: str
    template: Tuple[Tuple[float, float], ...]

    def __post_init__(self) -> None:
        pts = self.template
        if len(pts) < 2:
            raise ValueError(f"preset {self.name!r} needs at least 2 points")
        if pts[0][0] != 0.0 or pts[-1][0] != 1.0:
            raise ValueError(f"preset {self.name!r} must start at x=0 and end at x=1")
        if any(b[0] < a[0] for a, b in zip(pts, pts[1:])):
            raise ValueError(f"preset {self.name!r} is not sorted by x")
        if any(not 0.0 <= y <= 1.0 for _x, y in pts):
            raise ValueError(f"preset {self.name!r} has y outside [0, 1]")

    def points(self) -> List[ControlPoint]:
        """Fresh ControlPoints; callers may mutate them freely."""
        return [ControlPoint(float(x), float(y)) for x, y in self.template]


class PresetRegistry(Mapping[str, Preset]):
    """Immutable name -> Preset table. Iteration follows definition order."""

    def __init__(self, presets: Iterable[Preset]):
        table = {}
        for p in presets:
            if p.name in table:
                raise ValueError(f"duplicate preset name {p.name!r}")
            table[p.name] = p
        if not table:
            raise ValueError("a preset registry needs at least one preset")
        self._table = MappingProxyType(table)

    @classmethod
    def from_dict(cls, table: Mapping[str, Sequence[Tuple[float, float]]]) -> "PresetRegistry":
        return cls(Preset(name, tuple((float(x), float(y)) for x, y in pts)) for name, pts in table.items())

    def __getitem__(self, name: str) -> Preset:
        return self._table[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def names(self) -> List[str]:
        return list(self._table)

    def template(self, name: str) -> Optional[List[ControlPoint]]:
        """Points for ``name``, or None when the name is unknown."""
        preset = self._table.get(name)
        return preset.points() if preset is not None else None


DEFAULT_PRESET = "default"

BUILTIN_PRESETS = PresetRegistry.from_dict({
    "default": [(0.0, 1.0), (1.0, 0.0)],
    "full":    [(0.0, 1.0), (1.0, 1.0)],
    "comet":   [(0.0, 1.0), (0.1, 0.7), (1.0, 0.0)],
    "fade_in": [(0.0, 0.0), (1.0, 1.0)],
    "bell":    [(0.0, 0.0), (0.5, 1.0), (1.0, 0.0)],
})
