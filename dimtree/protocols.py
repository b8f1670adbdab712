"""Structural protocols for indexable records."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Dimensional(Protocol):
    """Record exposing an ordered coordinate vector and a distance.

    ``coordinates`` must be deterministic and stable while the record is
    indexed. ``distance`` must be a metric no smaller than the separation on
    any single axis; nearest-neighbor pruning relies on it.

    A record may also carry a ``metric`` attribute naming a registered
    metric. It then promises that ``distance`` equals that metric over
    coordinates, which lets the dense backend score all records in one
    batched kernel call.
    """

    def coordinates(self) -> Sequence[Any]:
        ...

    def distance(self, other: Any) -> float:
        ...


__all__ = ["Dimensional"]
