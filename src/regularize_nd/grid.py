"""
Rectilinear grid description.

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

from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field

import numpy as np
import xarray as xr

from regularize_nd.constants import MIN_GRID_POINTS, InterpMethod
from regularize_nd.exceptions import (
    InputShapeError,
    InsufficientGridSizeError,
    NonFiniteValueError,
    NonMonotonicGridError,
)

ABSOLUTE_MIN_GRID_POINTS = min(MIN_GRID_POINTS.values())


def _readonly(values: np.ndarray) -> np.ndarray:
    values.flags.writeable = False
    return values


@dataclass(frozen=True, eq=False)
class GridSpecification:
    """Immutable n-dimensional rectilinear grid.

    Each entry of ``nodes`` is the strictly increasing node vector of one axis.
    Axis ``d`` of the grid corresponds with column ``d`` of the scattered points.

    Derived attributes (computed once):
        n_dims: Number of axes.
        shape: Node count per axis.
        size: Total number of grid nodes.
        mins, maxs: First and last node of every axis.
        extent: ``maxs - mins``.
        spacing: Consecutive node differences per axis.
    """

    nodes: tuple[np.ndarray, ...]
    n_dims: int = field(init=False)
    shape: tuple[int, ...] = field(init=False)
    size: int = field(init=False)
    mins: np.ndarray = field(init=False)
    maxs: np.ndarray = field(init=False)
    extent: np.ndarray = field(init=False)
    spacing: tuple[np.ndarray, ...] = field(init=False)

    def __post_init__(self) -> None:
        """Normalize the node vectors and validate them."""
        if isinstance(self.nodes, np.ndarray) and self.nodes.ndim == 1:
            msg = "grid must be a sequence of node vectors, one per dimension, not a single vector"
            raise InputShapeError(msg, field="grid", constraint="sequence of 1-D node vectors")
        if len(self.nodes) == 0:
            msg = "grid must contain at least one node vector"
            raise InputShapeError(msg, field="grid", constraint="n_dims >= 1")

        nodes = []
        for axis, vector in enumerate(self.nodes):
            vector = np.array(vector, dtype=np.float64)
            name = f"grid[{axis}]"
            if vector.ndim != 1:
                msg = f"{name} must be a 1-D node vector, got an array with shape {vector.shape}"
                raise InputShapeError(msg, field=name, constraint="1-D")
            if not np.all(np.isfinite(vector)):
                msg = f"{name} contains non-finite node values"
                raise NonFiniteValueError(msg, field=name, constraint="finite")
            if len(vector) < ABSOLUTE_MIN_GRID_POINTS:
                msg = (
                    f"{name} has {len(vector)} nodes. Numerical second derivatives need at least "
                    f"{ABSOLUTE_MIN_GRID_POINTS} nodes in every dimension."
                )
                raise InsufficientGridSizeError(
                    msg, field=name, constraint=f"length >= {ABSOLUTE_MIN_GRID_POINTS}"
                )
            if np.any(np.diff(vector) <= 0):
                msg = f"All nodes in {name} must be strictly monotonically increasing."
                raise NonMonotonicGridError(msg, field=name, constraint="strictly increasing")
            nodes.append(_readonly(vector))

        object.__setattr__(self, "nodes", tuple(nodes))
        object.__setattr__(self, "n_dims", len(nodes))
        object.__setattr__(self, "shape", tuple(len(vector) for vector in nodes))
        object.__setattr__(self, "size", int(np.prod(self.shape)))
        object.__setattr__(self, "mins", _readonly(np.array([vector[0] for vector in nodes])))
        object.__setattr__(self, "maxs", _readonly(np.array([vector[-1] for vector in nodes])))
        object.__setattr__(self, "extent", _readonly(self.maxs - self.mins))
        object.__setattr__(self, "spacing", tuple(_readonly(np.diff(vector)) for vector in nodes))

    def __len__(self) -> int:
        return self.n_dims

    def __getitem__(self, axis: int) -> np.ndarray:
        return self.nodes[axis]

    def __repr__(self) -> str:
        return f"GridSpecification(shape={self.shape}, mins={self.mins.tolist()}, maxs={self.maxs.tolist()})"

    def require_min_points(self, method: InterpMethod) -> None:
        """Check the node count of every axis against the requirement of ``method``."""
        required = MIN_GRID_POINTS[method]
        for axis, count in enumerate(self.shape):
            if count < required:
                msg = (
                    f"Not enough grid points in grid[{axis}]. The {method.value} interpolation method "
                    f"and numerical 2nd derivatives require {required} points."
                )
                raise InsufficientGridSizeError(msg, field=f"grid[{axis}]", constraint=f"length >= {required}")

    @classmethod
    def uniform(
        cls,
        mins: Sequence[float],
        maxs: Sequence[float],
        counts: Sequence[int],
    ) -> GridSpecification:
        """Create a grid with evenly spaced nodes on every axis.

        Args:
            mins: Lower bound per axis.
            maxs: Upper bound per axis.
            counts: Number of nodes per axis.

        Returns:
            The grid specification.
        """
        if not len(mins) == len(maxs) == len(counts):
            msg = "mins, maxs and counts must have the same length"
            raise InputShapeError(msg, field="counts", constraint="len(mins) == len(maxs) == len(counts)")
        return cls(tuple(np.linspace(lo, hi, int(n)) for lo, hi, n in zip(mins, maxs, counts)))

    @classmethod
    def from_dataset(cls, ds: xr.Dataset, dims: Sequence[Hashable] | None = None) -> GridSpecification:
        """Create a grid from the 1-D dimension coordinates of a Dataset.

        Args:
            ds: Dataset holding the node vectors as dimension coordinates.
            dims: Order of the grid axes. Defaults to the order of the
                dimension coordinates in ``ds``.

        Returns:
            The grid specification.
        """
        if dims is None:
            dims = grid_dims_of(ds)
        missing = [dim for dim in dims if dim not in ds.coords]
        if missing:
            msg = f"Coordinates {missing} not found in the target grid"
            raise InputShapeError(msg, field="grid_dims", constraint="coordinates of the target grid")
        return cls(tuple(ds[dim].to_numpy() for dim in dims))

    def to_dataset(self, dims: Sequence[Hashable]) -> xr.Dataset:
        """Create a coordinate-only Dataset of the grid, one dimension per axis.

        Args:
            dims: Name of every axis.

        Returns:
            A dataset with the node vectors as coordinates. Contains no data variables.
        """
        if len(dims) != self.n_dims:
            msg = f"Expected {self.n_dims} dimension names, got {len(dims)}"
            raise InputShapeError(msg, field="dims", constraint=f"length == {self.n_dims}")
        return xr.Dataset(coords={dim: ([dim], np.array(vector)) for dim, vector in zip(dims, self.nodes)})


def grid_dims_of(ds: xr.Dataset) -> list[Hashable]:
    """Names of the 1-D dimension coordinates of ``ds``, in coordinate order."""
    return [name for name, coord in ds.coords.items() if coord.dims == (name,)]
