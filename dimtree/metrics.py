"""Distance functions used by records and the query engine.

Each metric has two forms. The scalar form compares two coordinate tuples
with plain arithmetic and backs ``record.distance``. The batched form is a
JAX kernel over float64 vectors; ``distances_to`` maps it over the rows of a
coordinate matrix for the dense query backend.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any, Optional

import jax
import jax.numpy as jnp
from jaxtyping import Array

from .dtypes import as_coordinates

MetricKernel = Callable[[Array, Array], Array]
ScalarMetric = Callable[[Sequence[Any], Sequence[Any]], Any]


@jax.jit
def _euclidean(a: Array, b: Array) -> Array:
    delta = a - b
    return jnp.sqrt(jnp.sum(delta * delta))


@jax.jit
def _manhattan(a: Array, b: Array) -> Array:
    return jnp.sum(jnp.abs(a - b))


@jax.jit
def _chebyshev(a: Array, b: Array) -> Array:
    return jnp.max(jnp.abs(a - b))


def _euclidean_scalar(a: Sequence[Any], b: Sequence[Any]) -> float:
    return math.sqrt(sum((x - y) * (x - y) for x, y in zip(a, b)))


def _manhattan_scalar(a: Sequence[Any], b: Sequence[Any]) -> Any:
    return sum(abs(x - y) for x, y in zip(a, b))


def _chebyshev_scalar(a: Sequence[Any], b: Sequence[Any]) -> Any:
    return max(abs(x - y) for x, y in zip(a, b))


_METRICS: dict[str, MetricKernel] = {
    "euclidean": _euclidean,
    "manhattan": _manhattan,
    "chebyshev": _chebyshev,
}

_SCALAR_METRICS: dict[str, ScalarMetric] = {
    "euclidean": _euclidean_scalar,
    "manhattan": _manhattan_scalar,
    "chebyshev": _chebyshev_scalar,
}


def axis_distance(a: Any, b: Any) -> Any:
    """Separation of two scalars along a single axis."""

    return abs(a - b)


def available_metrics() -> tuple[str, ...]:
    """Return registered metric names."""

    return tuple(sorted(_METRICS.keys()))


def get_metric(name: str) -> MetricKernel:
    """Return the kernel registered under ``name``."""

    kernel = _METRICS.get(name)
    if kernel is None:
        supported = ", ".join(f"'{m}'" for m in available_metrics())
        raise ValueError(f"Unknown metric '{name}'; supported metrics: {supported}")
    return kernel


def register_metric(
    name: str,
    kernel: MetricKernel,
    *,
    scalar: Optional[ScalarMetric] = None,
    overwrite: bool = False,
) -> None:
    """Register a coordinate metric for lookup by name.

    The kernel receives two float64 vectors of equal length and must return
    a non-negative scalar that is at least the separation on every axis.
    ``scalar`` is an optional plain-Python equivalent over coordinate
    sequences; without it single distances are evaluated through ``kernel``.
    """

    normalized = name.strip()
    if not normalized:
        raise ValueError("metric name must be a non-empty string")
    if (normalized in _METRICS) and (not overwrite):
        raise ValueError(
            f"metric '{normalized}' is already registered; "
            "pass overwrite=True to replace it"
        )
    _METRICS[normalized] = kernel
    if scalar is None:
        _SCALAR_METRICS.pop(normalized, None)
    else:
        _SCALAR_METRICS[normalized] = scalar


def _check_lengths(a: int, b: int) -> None:
    if a != b:
        raise ValueError(
            f"coordinate vectors must share length; received {a} and {b}"
        )


def coordinate_distance(
    a: Sequence[Any], b: Sequence[Any], *, metric: str = "euclidean"
) -> float:
    """Distance between two coordinate vectors under a registered metric."""

    _check_lengths(len(a), len(b))
    kernel = get_metric(metric)
    scalar = _SCALAR_METRICS.get(metric)
    if scalar is not None:
        return float(scalar(a, b))
    return float(kernel(as_coordinates(a), as_coordinates(b)))


def distances_to(
    query: Sequence[Any], points: Array, *, metric: str = "euclidean"
) -> Array:
    """Distances from ``query`` to every row of the ``(n, k)`` array ``points``."""

    kernel = get_metric(metric)
    query_row = as_coordinates(query)
    _check_lengths(query_row.shape[0], points.shape[-1])
    return jax.vmap(kernel, in_axes=(None, 0))(query_row, points)


def euclidean_distance(a: Sequence[Any], b: Sequence[Any]) -> float:
    """Straight-line distance between two coordinate vectors."""

    return coordinate_distance(a, b, metric="euclidean")


__all__ = [
    "MetricKernel",
    "ScalarMetric",
    "available_metrics",
    "axis_distance",
    "coordinate_distance",
    "distances_to",
    "euclidean_distance",
    "get_metric",
    "register_metric",
]
