"""Construction policy helpers for dimtree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

AxisPolicy = Literal["cycle", "spread"]
SelectionMethod = Literal["quickselect", "sort"]

_AXIS_POLICIES = ("cycle", "spread")
_SELECTION_METHODS = ("quickselect", "sort")


@dataclass(frozen=True)
class KDTreeConfig:
    """Resolved options for k-d tree construction.

    ``axis_policy="cycle"`` splits on ``depth % k``; ``"spread"`` splits on
    the axis of greatest coordinate extent among the records being
    partitioned. ``selection`` picks the median-finding algorithm; both
    methods yield identical trees.
    """

    axis_policy: AxisPolicy = "cycle"
    selection: SelectionMethod = "quickselect"

    def __post_init__(self) -> None:
        if self.axis_policy not in _AXIS_POLICIES:
            raise ValueError(
                "axis_policy must be one of: 'cycle', 'spread'; "
                f"received {self.axis_policy!r}"
            )
        if self.selection not in _SELECTION_METHODS:
            raise ValueError(
                "selection must be one of: 'quickselect', 'sort'; "
                f"received {self.selection!r}"
            )


__all__ = ["AxisPolicy", "KDTreeConfig", "SelectionMethod"]
