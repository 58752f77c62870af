"""
Smoothness (regularization) equations.

Each equation is a numerical second derivative along one axis at one grid node
that is interior along that axis. The weights come from differentiating twice
the parabolic Lagrange polynomial through three consecutive nodes
``x1 < x2 < x3``::

    y'' = 2 / [(x1-x2)(x1-x3), (x2-x1)(x2-x3), (x3-x1)(x3-x2)] . [y1, y2, y3]

which also holds for unequally spaced nodes.

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

import logging
from collections.abc import Sequence

import numpy as np
from scipy import sparse

from regularize_nd.grid import GridSpecification
from regularize_nd.indexing import MultiIndexer

logger = logging.getLogger(__name__)


def second_derivative_weights(nodes: np.ndarray) -> np.ndarray:
    """Second derivative weights of every run of three consecutive nodes.

    Args:
        nodes: Strictly increasing node vector of length n.

    Returns:
        (n - 2, 3) array, row j holding the weights of nodes j, j + 1 and j + 2.
    """
    x1 = nodes[:-2]
    x2 = nodes[1:-1]
    x3 = nodes[2:]
    return np.column_stack(
        [
            2.0 / ((x1 - x2) * (x1 - x3)),
            2.0 / ((x2 - x1) * (x2 - x3)),
            2.0 / ((x3 - x1) * (x3 - x2)),
        ]
    )


def n_smoothness_equations(grid: GridSpecification, axis: int) -> int:
    """Number of grid nodes interior along ``axis``."""
    shape = list(grid.shape)
    shape[axis] -= 2
    return int(np.prod(shape))


def build_smoothness_matrix(
    grid: GridSpecification,
    axis: int,
    smoothness: float,
    n_points: int,
) -> sparse.csr_matrix:
    """Build the scaled second derivative equations along one axis.

    The block is scaled by ``smoothness * sqrt(n_points / k) * extent**2`` where k is
    the number of equations. The square root term makes the block weigh as much as
    ``n_points`` fidelity equations whatever the grid resolution; the squared extent
    makes the smoothness independent of the units of the axis.

    Args:
        grid: The grid.
        axis: Axis along which the second derivative is taken.
        smoothness: Non-negative weight of this axis.
        n_points: Number of scattered points.

    Returns:
        (k, N) CSR matrix, or a (0, N) matrix when ``smoothness`` is zero.
    """
    if smoothness == 0:
        return sparse.csr_matrix((0, grid.size), dtype=np.float64)

    indexer = MultiIndexer(grid.shape)
    interior_shape = list(grid.shape)
    interior_shape[axis] -= 2
    interior = MultiIndexer(tuple(interior_shape))
    n_equations = interior.size

    # Subscripts of the centre node of every equation
    subscripts = interior.unravel(np.arange(n_equations, dtype=np.int64))
    position = subscripts[:, axis].copy()
    subscripts[:, axis] += 1
    centre = indexer.ravel(subscripts)
    stride = indexer.strides[axis]
    cols = np.column_stack([centre - stride, centre, centre + stride])

    scale = smoothness * np.sqrt(n_points / n_equations) * grid.extent[axis] ** 2
    data = scale * second_derivative_weights(grid.nodes[axis])[position]
    rows = np.repeat(np.arange(n_equations, dtype=np.int64), 3)

    logger.debug("Axis %d: %d smoothness equations, scale %.6g", axis, n_equations, scale)
    return sparse.csr_matrix((data.ravel(), (rows, cols.ravel())), shape=(n_equations, grid.size))


def build_smoothness_matrices(
    grid: GridSpecification,
    smoothness: Sequence[float] | np.ndarray,
    n_points: int,
) -> list[sparse.csr_matrix]:
    """Build the smoothness block of every axis, in axis order."""
    return [build_smoothness_matrix(grid, axis, float(smoothness[axis]), n_points) for axis in range(grid.n_dims)]
