"""Bounding-box helpers over coordinate matrices."""

from __future__ import annotations

import jax.numpy as jnp
from jaxtyping import Array


def coordinate_bounds(points: Array) -> tuple[Array, Array]:
    """Return per-axis minimum and maximum of an ``(n, k)`` matrix."""

    return jnp.min(points, axis=0), jnp.max(points, axis=0)


def widest_axis(points: Array) -> int:
    """Return the axis with the largest coordinate extent (lowest on ties)."""

    minimum, maximum = coordinate_bounds(points)
    return int(jnp.argmax(maximum - minimum))


__all__ = ["coordinate_bounds", "widest_axis"]
