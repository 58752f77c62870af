"""
Numba-optimized kernels for the fidelity equations.

Every point is handled independently, so the loops over points run in parallel.
Columns are flat grid indices (see ``regularize_nd.indexing``).
"""

import numpy as np
from numba import jit, prange


@jit(nopython=True, nogil=True, parallel=True)
def compute_nearest_columns(
    cell_index,  # (n_points, n_dims) int64
    fraction,  # (n_points, n_dims) float64
    strides,  # (n_dims,) int64
):
    """
    Compute the grid node nearest to every point.

    The lower node of a cell is chosen for fractions below 0.5 and the upper
    node otherwise, so a tie at exactly 0.5 rounds up.

    Args:
        cell_index: Cell index of every point along every axis
        fraction: Fractional offset of every point inside its cell
        strides: Flat index stride of every axis

    Returns:
        Flat index of the nearest node for each point (n_points,)
    """
    n_points = cell_index.shape[0]
    n_dims = cell_index.shape[1]

    columns = np.empty(n_points, dtype=np.int64)

    for i in prange(n_points):
        column = 0
        for d in range(n_dims):
            subscript = cell_index[i, d]
            if fraction[i, d] >= 0.5:
                subscript += 1
            column += subscript * strides[d]
        columns[i] = column

    return columns


@jit(nopython=True, nogil=True, parallel=True)
def compute_multilinear_weights(
    cell_index,  # (n_points, n_dims) int64
    fraction,  # (n_points, n_dims) float64
    strides,  # (n_dims,) int64
):
    """
    Compute multilinear weights of the 2**n_dims corners of every point's cell.

    Corner ``c`` takes the upper node along axis ``d`` when bit ``d`` of ``c`` is
    set and the lower node otherwise. Its weight is the product over the axes of
    ``fraction`` (upper node) or ``1 - fraction`` (lower node).

    Args:
        cell_index: Cell index of every point along every axis
        fraction: Fractional offset of every point inside its cell
        strides: Flat index stride of every axis

    Returns:
        Tuple of (columns, weights), both (n_points, 2**n_dims)
    """
    n_points = cell_index.shape[0]
    n_dims = cell_index.shape[1]
    n_corners = 1 << n_dims

    columns = np.empty((n_points, n_corners), dtype=np.int64)
    weights = np.empty((n_points, n_corners), dtype=np.float64)

    for i in prange(n_points):
        for c in range(n_corners):
            column = 0
            weight = 1.0
            for d in range(n_dims):
                upper = (c >> d) & 1
                column += (cell_index[i, d] + upper) * strides[d]
                if upper == 1:
                    weight *= fraction[i, d]
                else:
                    weight *= 1.0 - fraction[i, d]
            columns[i, c] = column
            weights[i, c] = weight

    return columns, weights
