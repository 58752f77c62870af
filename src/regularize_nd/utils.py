"""
Input validation and small helpers shared by the fitting front ends.

This file is part of regularize-nd.

Copyright (c) 2025 regularize-nd Developers.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

from __future__ import annotations

from collections.abc import MutableMapping, Sequence
from typing import Any

import numpy as np

from regularize_nd.exceptions import (
    DomainBoundsError,
    InputShapeError,
    InvalidSmoothnessError,
    NonFiniteValueError,
)
from regularize_nd.grid import GridSpecification

GridLike = GridSpecification | Sequence[Sequence[float] | np.ndarray]


def as_grid(grid: GridLike) -> GridSpecification:
    """Return ``grid`` as a GridSpecification, validating it if needed."""
    if isinstance(grid, GridSpecification):
        return grid
    return GridSpecification(tuple(grid))


def as_points(x: Any, n_dims: int) -> np.ndarray:
    """Convert scattered points to an (m, n_dims) float array.

    A 1-D ``x`` is a single column of coordinates, so it is only accepted for
    one-dimensional grids.
    """
    points = np.asarray(x, dtype=np.float64)
    if points.ndim == 1 and n_dims == 1:
        points = points.reshape(-1, 1)
    if points.ndim != 2:
        msg = f"x must be a 2-D array of points, got an array with shape {points.shape}"
        raise InputShapeError(msg, field="x", constraint="shape (m, n)")
    if points.shape[1] != n_dims:
        msg = (
            "Dimensionality mismatch. The number of columns in x "
            f"({points.shape[1]}) does not match the number of grid vectors ({n_dims})."
        )
        raise InputShapeError(msg, field="x", constraint=f"{n_dims} columns")
    if points.shape[0] == 0:
        msg = "x must contain at least one scattered point"
        raise InputShapeError(msg, field="x", constraint="m >= 1")
    return points


def as_values(y: Any, n_points: int) -> np.ndarray:
    """Convert scattered values to a finite (m,) float array."""
    values = np.asarray(y, dtype=np.float64)
    if values.ndim == 2 and values.shape[1] == 1:
        values = values[:, 0]
    if values.ndim != 1 or len(values) != n_points:
        msg = f"y must have the same number of rows as x ({n_points}), got shape {values.shape}"
        raise InputShapeError(msg, field="y", constraint=f"shape ({n_points},)")
    if not np.all(np.isfinite(values)):
        msg = "y contains non-finite values"
        raise NonFiniteValueError(msg, field="y", constraint="finite")
    return values


def normalize_smoothness(smoothness: float | Sequence[float] | np.ndarray, n_dims: int) -> np.ndarray:
    """Broadcast a scalar smoothness to every axis and check its values.

    Args:
        smoothness: Scalar or one value per axis.
        n_dims: Number of grid axes.

    Returns:
        (n_dims,) array of non-negative weights.
    """
    weights = np.asarray(smoothness, dtype=np.float64)
    if weights.ndim == 0:
        weights = np.full(n_dims, float(weights))
    if weights.shape != (n_dims,):
        msg = (
            "If smoothness is not a scalar, then it must have the same number of elements "
            f"as there are grid dimensions ({n_dims}), got shape {weights.shape}"
        )
        raise InputShapeError(msg, field="smoothness", constraint=f"scalar or length {n_dims}")
    if not np.all(np.isfinite(weights)) or np.any(weights < 0):
        msg = f"smoothness must be finite and non-negative in all components, got {weights.tolist()}"
        raise InvalidSmoothnessError(msg, field="smoothness", constraint=">= 0")
    return weights


def check_within_bounds(x: np.ndarray, grid: GridSpecification) -> None:
    """Raise DomainBoundsError unless every point lies inside the grid bounds."""
    # NaN coordinates fail both comparisons
    inside = (x >= grid.mins) & (x <= grid.maxs)
    if not np.all(inside):
        bad_point, bad_axis = np.argwhere(~inside)[0]
        n_outside = int(np.sum(~np.all(inside, axis=1)))
        msg = (
            f"All x points must be within the range of the grid vectors. {n_outside} point(s) are outside, "
            f"e.g. x[{bad_point}, {bad_axis}] = {x[bad_point, bad_axis]} is not within "
            f"[{grid.mins[bad_axis]}, {grid.maxs[bad_axis]}]."
        )
        raise DomainBoundsError(msg, field=f"x[:, {bad_axis}]", constraint=f"within grid[{bad_axis}] bounds")


def validate_points(x: Any, grid: GridSpecification) -> np.ndarray:
    """Shape and bounds check of the scattered points."""
    points = as_points(x, grid.n_dims)
    check_within_bounds(points, grid)
    return points


def update_history(attrs: MutableMapping[Any, Any], message: str) -> None:
    """Append ``message`` to the ``history`` attribute."""
    existing_history = attrs.get("history", "")
    attrs["history"] = f"{existing_history}\n{message}" if existing_history else message
