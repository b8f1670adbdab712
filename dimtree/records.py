"""Reference record types implementing the ``Dimensional`` protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .metrics import coordinate_distance, get_metric


@dataclass(frozen=True)
class Point:
    """Point in k-dimensional space with a named coordinate metric."""

    values: tuple[float, ...]
    metric: str = "euclidean"

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        get_metric(self.metric)

    @classmethod
    def of(cls, *values: float, metric: str = "euclidean") -> "Point":
        """Build a point from positional coordinates."""

        return cls(values=tuple(values), metric=metric)

    @property
    def dimension(self) -> int:
        return len(self.values)

    def coordinates(self) -> tuple[float, ...]:
        return self.values

    def distance(self, other: Any) -> float:
        return coordinate_distance(self.values, other.coordinates(), metric=self.metric)


@dataclass(frozen=True)
class Color:
    """8-bit RGB color; distance is Euclidean in RGB space."""

    r: int
    g: int
    b: int

    metric: ClassVar[str] = "euclidean"

    def __post_init__(self) -> None:
        for channel, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not 0 <= value <= 255:
                raise ValueError(f"{channel} must be in [0, 255], received {value}")

    def coordinates(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def distance(self, other: Any) -> float:
        return coordinate_distance(
            self.coordinates(), other.coordinates(), metric=self.metric
        )


__all__ = ["Color", "Point"]
