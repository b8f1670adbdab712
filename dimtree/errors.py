"""Error types raised by dimtree."""

from __future__ import annotations


class DimensionMismatch(ValueError):
    """A record's coordinate count disagrees with the tree dimensionality."""

    def __init__(self, expected: int, received: int, *, what: str = "record"):
        super().__init__(
            f"{what} must have {expected} coordinates to match the tree; "
            f"received {received}"
        )
        self.expected = expected
        self.received = received


__all__ = ["DimensionMismatch"]
