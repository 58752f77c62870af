"""
Fidelity (data fit) equations.

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

import numpy as np
from scipy import sparse

from regularize_nd.constants import InterpMethod
from regularize_nd.grid import GridSpecification
from regularize_nd.indexing import MultiIndexer
from regularize_nd.locator import CellLocation
from regularize_nd.methods import compute_multilinear_weights, compute_nearest_columns


def build_fidelity_matrix(
    location: CellLocation,
    grid: GridSpecification,
    method: InterpMethod,
) -> sparse.csr_matrix:
    """Build the sparse matrix interpolating grid node values at the scattered points.

    Row ``i`` holds the interpolation weights of point ``i``, so every row sums to one.

    Args:
        location: Cell location of the scattered points.
        grid: The grid.
        method: Interpolation scheme.

    Returns:
        (m, N) CSR matrix, N being the number of grid nodes.
    """
    n_points = location.cell_index.shape[0]
    strides = MultiIndexer(grid.shape).strides
    cell_index = np.ascontiguousarray(location.cell_index, dtype=np.int64)
    fraction = np.ascontiguousarray(location.fraction, dtype=np.float64)

    if method is InterpMethod.NEAREST:
        cols = compute_nearest_columns(cell_index, fraction, strides)
        rows = np.arange(n_points, dtype=np.int64)
        data = np.ones(n_points, dtype=np.float64)
    elif method is InterpMethod.LINEAR:
        cols, data = compute_multilinear_weights(cell_index, fraction, strides)
        rows = np.repeat(np.arange(n_points, dtype=np.int64), cols.shape[1])
        cols = cols.ravel()
        data = data.ravel()
    else:
        msg = f"Unhandled interpolation method: {method!r}"
        raise AssertionError(msg)

    # Duplicate (row, col) pairs from degenerate corners are summed
    return sparse.csr_matrix((data, (rows, cols)), shape=(n_points, grid.size))
