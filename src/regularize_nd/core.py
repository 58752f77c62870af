"""
Regularized n-dimensional grid fitting.

The fitted grid minimizes, in the least-squares sense, the interpolation error
at the scattered points plus the scaled second derivative of the grid along
every axis. It is meant to be evaluated with a multilinear or nearest grid
interpolator, e.g. ``scipy.interpolate.RegularGridInterpolator(grid.nodes, values)``.

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
import warnings
from collections.abc import Sequence
from typing import Any, NamedTuple

import numpy as np
from scipy import sparse

from regularize_nd.assembly import build_fidelity_matrix, build_smoothness_matrices
from regularize_nd.constants import (
    DEFAULT_INTERP_METHOD,
    DEFAULT_SMOOTHNESS,
    DEFAULT_SOLVER,
    InterpMethod,
    Solver,
)
from regularize_nd.exceptions import InputShapeError
from regularize_nd.indexing import MultiIndexer
from regularize_nd.locator import locate_cells
from regularize_nd.solver import LeastSquaresFactorization, stack_system
from regularize_nd.utils import (
    GridLike,
    as_grid,
    as_values,
    normalize_smoothness,
    validate_points,
)

logger = logging.getLogger(__name__)


class SystemBlocks(NamedTuple):
    """The assembled, unsolved equation blocks.

    Attributes:
        fidelity: (m, N) fidelity matrix, its right hand side being the scattered values.
        regularization: One smoothness block per axis, each (k_d, N) with a zero right
            hand side. Axes with zero smoothness have a block with no rows.
    """

    fidelity: sparse.csr_matrix
    regularization: list[sparse.csr_matrix]


class RegularizedGridFitter:
    """Fit smooth gridded surfaces to scattered data on a fixed grid.

    The configuration is validated once, at construction. Each call validates the
    scattered data, assembles the sparse system and solves it.
    """

    def __init__(
        self,
        grid: GridLike,
        smoothness: float | Sequence[float] | np.ndarray = DEFAULT_SMOOTHNESS,
        interp_method: InterpMethod | str = DEFAULT_INTERP_METHOD,
        solver: Solver | str = DEFAULT_SOLVER,
    ):
        """Initialize the fitter.

        Args:
            grid: Node vector of every axis, or a GridSpecification. Unequal spacing
                is allowed; the grid must span all scattered points.
            smoothness: Ratio of smoothness to fidelity, scalar or one value per axis.
                A smoothness of 1 gives equal weight to fidelity and smoothness and
                results in noticeable smoothing. For data with little or no noise use
                0.01. A zero value disables smoothing along that axis.
            interp_method: 'linear' (multilinear, default) or 'nearest'.
            solver: 'normal' (default) factorizes the normal equations, which is fast
                but squares the condition number of the system. 'direct' solves the
                least-squares problem without forming them and is more robust for very
                small smoothness values.
        """
        self.grid = as_grid(grid)
        self.interp_method = InterpMethod.parse(interp_method)
        self.solver = Solver.parse(solver)
        self.smoothness = normalize_smoothness(smoothness, self.grid.n_dims)
        self.grid.require_min_points(self.interp_method)
        self.indexer = MultiIndexer(self.grid.shape)

        if not np.any(self.smoothness):
            warnings.warn(
                "Smoothness is zero along every axis. The fit is unregularized and the system is "
                "singular unless the scattered points determine every grid node.",
                stacklevel=2,
            )

    def __call__(self, x: Any, y: Any) -> np.ndarray:
        """Fit the grid to scattered data.

        Args:
            x: (m, n) scattered points, one row per point. A 1-D array is accepted
                for one-dimensional grids.
            y: (m,) or (m, 1) values at the scattered points.

        Returns:
            Array of shape ``grid.shape`` with the fitted node values, or a flat vector
            for a one-dimensional grid.
        """
        points = validate_points(x, self.grid)
        values = as_values(y, len(points))
        return self.fit_many(points, values[:, np.newaxis])[0]

    def fit_many(self, x: Any, ys: Any) -> list[np.ndarray]:
        """Fit several responses measured at the same scattered points.

        The system is assembled and factorized once for all responses.

        Args:
            x: (m, n) scattered points.
            ys: (m, k) values, one column per response.

        Returns:
            One fitted grid per response.
        """
        points = validate_points(x, self.grid)
        ys = np.asarray(ys, dtype=np.float64)
        if ys.ndim not in (1, 2):
            msg = f"ys must be a 1-D or 2-D array of values, got an array with shape {ys.shape}"
            raise InputShapeError(msg, field="y", constraint="shape (m,) or (m, k)")
        if ys.ndim == 1:
            ys = ys[:, np.newaxis]
        columns = [as_values(ys[:, k], len(points)) for k in range(ys.shape[1])]

        A, n_fidelity = self._system_matrix(points)
        factorization = LeastSquaresFactorization(A, self.solver)
        rhs = np.zeros(A.shape[0], dtype=np.float64)
        results = []
        for values in columns:
            rhs[:n_fidelity] = values
            results.append(self._reshape(factorization.solve(rhs)))
        return results

    def build_system(self, x: Any) -> SystemBlocks:
        """Assemble the fidelity and smoothness blocks without solving.

        Useful to add constraint rows and solve with an external solver.
        """
        return self._assemble(validate_points(x, self.grid))

    def _system_matrix(self, points: np.ndarray) -> tuple[sparse.csr_matrix, int]:
        blocks = self._assemble(points)
        A, _ = stack_system(blocks.fidelity, np.zeros(len(points)), blocks.regularization)
        return A, len(points)

    def _assemble(self, points: np.ndarray) -> SystemBlocks:
        location = locate_cells(points, self.grid)
        fidelity = build_fidelity_matrix(location, self.grid, self.interp_method)
        regularization = build_smoothness_matrices(self.grid, self.smoothness, len(points))
        logger.debug(
            "Assembled %d fidelity and %s smoothness equations for %d grid nodes (%s interpolation)",
            fidelity.shape[0],
            [block.shape[0] for block in regularization],
            self.grid.size,
            self.interp_method.value,
        )
        return SystemBlocks(fidelity, regularization)

    def _reshape(self, z: np.ndarray) -> np.ndarray:
        if self.grid.n_dims == 1:
            return z
        return self.indexer.to_grid(z)

    def info(self) -> dict[str, Any]:
        """Get information about the fitter configuration.

        Returns:
            Dictionary containing the fitter metadata and configuration
        """
        return {
            "type": "RegularizedGridFitter",
            "interp_method": self.interp_method.value,
            "solver": self.solver.value,
            "smoothness": self.smoothness.tolist(),
            "grid_shape": list(self.grid.shape),
            "grid_bounds": [[float(lo), float(hi)] for lo, hi in zip(self.grid.mins, self.grid.maxs)],
        }


def regularize_nd(
    x: Any,
    y: Any,
    grid: GridLike,
    smoothness: float | Sequence[float] | np.ndarray = DEFAULT_SMOOTHNESS,
    interp_method: InterpMethod | str = DEFAULT_INTERP_METHOD,
    solver: Solver | str = DEFAULT_SOLVER,
) -> np.ndarray:
    """Produce a smooth n-dimensional gridded surface from scattered data.

    Example:
        >>> rng = np.random.default_rng(0)
        >>> x = rng.random((100, 2))
        >>> y = np.exp(x[:, 0] + 2 * x[:, 1])
        >>> grid = [np.linspace(0, 1, 11), np.linspace(0, 1, 11)]
        >>> regularize_nd(x, y, grid).shape
        (11, 11)

    Args:
        x: (m, n) scattered points, one row per point.
        y: (m,) values at the scattered points.
        grid: Node vector of every axis. Each must be strictly increasing, have at
            least three nodes and span the corresponding column of ``x``.
        smoothness: Ratio of smoothness to fidelity, scalar or one value per axis.
        interp_method: 'linear' or 'nearest'.
        solver: 'normal' or 'direct'.

    Returns:
        Array of shape ``(len(grid[0]), ..., len(grid[n-1]))`` (a flat vector when n is 1).
    """
    return RegularizedGridFitter(grid, smoothness, interp_method, solver)(x, y)


def build_system(
    x: Any,
    grid: GridLike,
    smoothness: float | Sequence[float] | np.ndarray = DEFAULT_SMOOTHNESS,
    interp_method: InterpMethod | str = DEFAULT_INTERP_METHOD,
) -> SystemBlocks:
    """Assemble the fidelity matrix and the per-axis smoothness matrices without solving.

    Callers can stack extra constraint rows and solve ``[fidelity; *regularization] z = [y; 0]``
    themselves. Columns follow the ``MultiIndexer`` ordering, axis 0 varying fastest.
    """
    return RegularizedGridFitter(grid, smoothness, interp_method).build_system(x)
