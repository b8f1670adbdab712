"""Local dtype policy for dimtree coordinate arrays."""

import jax.numpy as jnp

# Coordinates, bounds and metric kernels all run in float64.
COORD_DTYPE = jnp.float64
INDEX_DTYPE = jnp.int64


def as_coordinates(x):
    """Convert a coordinate vector/matrix to the dimtree coordinate dtype."""
    return jnp.asarray(x, dtype=COORD_DTYPE)


def as_index(x):
    """Convert a scalar/array to the dimtree index dtype."""
    return jnp.asarray(x, dtype=INDEX_DTYPE)


__all__ = ["COORD_DTYPE", "INDEX_DTYPE", "as_coordinates", "as_index"]
