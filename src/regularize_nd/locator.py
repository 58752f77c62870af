"""
Location of scattered points in the cells of a rectilinear grid.

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

from typing import NamedTuple

import numpy as np

from regularize_nd.grid import GridSpecification


class CellLocation(NamedTuple):
    """Cell of every scattered point along every axis.

    Attributes:
        cell_index: (m, n) zero-based index of the interval ``[nodes[i], nodes[i + 1]]``
            holding the point along each axis, in ``[0, shape[d] - 2]``.
        fraction: (m, n) position inside that interval, 0 at the lower node and
            1 at the upper node.
    """

    cell_index: np.ndarray
    fraction: np.ndarray


def locate_cells(x: np.ndarray, grid: GridSpecification) -> CellLocation:
    """Find the containing cell and the fractional offset of each point.

    The points must already be known to lie inside the grid bounds.

    Args:
        x: (m, n) scattered points.
        grid: The grid.

    Returns:
        The cell location of every point.
    """
    n_points = x.shape[0]
    cell_index = np.empty((n_points, grid.n_dims), dtype=np.int64)
    fraction = np.empty((n_points, grid.n_dims), dtype=np.float64)

    for axis, (nodes, dx) in enumerate(zip(grid.nodes, grid.spacing)):
        coords = x[:, axis]
        index = np.searchsorted(nodes, coords, side="right") - 1
        # Points on the last node belong to the last cell
        index = np.clip(index, 0, len(nodes) - 2)
        cell_index[:, axis] = index
        fraction[:, axis] = np.clip((coords - nodes[index]) / dx[index], 0.0, 1.0)

    return CellLocation(cell_index, fraction)
