"""
Stacking and solving the regularized least-squares system.

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
from scipy.sparse.linalg import splu

from regularize_nd.constants import Solver
from regularize_nd.exceptions import InputShapeError, SingularSystemError

logger = logging.getLogger(__name__)


def stack_system(
    fidelity: sparse.spmatrix,
    y: np.ndarray,
    regularization: Sequence[sparse.spmatrix],
) -> tuple[sparse.csr_matrix, np.ndarray]:
    """Stack the fidelity block on top of the smoothness blocks.

    Args:
        fidelity: (m, N) fidelity matrix.
        y: (m,) scattered values.
        regularization: Smoothness blocks, each (k_d, N).

    Returns:
        The (m + sum k_d, N) system matrix and the right hand side ``[y; 0]``.
    """
    if fidelity.shape[0] != len(y):
        msg = f"The fidelity matrix has {fidelity.shape[0]} rows but y has {len(y)} values"
        raise InputShapeError(msg, field="y", constraint="len(y) == number of fidelity equations")
    A = sparse.vstack([fidelity, *regularization], format="csr")
    rhs = np.zeros(A.shape[0], dtype=np.float64)
    rhs[: len(y)] = y
    return A, rhs


class LeastSquaresFactorization:
    """Sparse LU factorization of a least-squares problem ``A z ~= b``.

    Factorize once, then solve for any number of right hand sides.

    With ``Solver.NORMAL`` the square system ``A^T A z = A^T b`` is factorized.
    It is small and fast to factorize, but its condition number is the square of
    the condition number of A, so very small smoothness values lose accuracy.

    With ``Solver.DIRECT`` the augmented system::

        [ I    A ] [ r ]   [ b ]
        [ A^T  0 ] [ z ] = [ 0 ]

    is factorized instead, which solves the least-squares problem without
    squaring the condition number at the cost of a larger factorization.
    """

    def __init__(self, A: sparse.spmatrix, solver: Solver):
        self.solver = solver
        self.shape = A.shape
        self._A = sparse.csr_matrix(A)
        n_rows = self.shape[0]

        if solver is Solver.NORMAL:
            system = (self._A.T @ self._A).tocsc()
        elif solver is Solver.DIRECT:
            system = sparse.bmat(
                [[sparse.identity(n_rows, format="csr"), self._A], [self._A.T, None]],
                format="csc",
            )
        else:
            msg = f"Unhandled solver: {solver!r}"
            raise AssertionError(msg)

        logger.debug("Factorizing %s system of size %d with %d nonzeros", solver.value, system.shape[0], system.nnz)
        try:
            self._lu = splu(system)
        except RuntimeError as e:
            msg = f"The {solver.value} system is singular and cannot be solved: {e}"
            raise SingularSystemError(msg, field="A", constraint="full column rank") from e
        self._check_pivots()

    def _check_pivots(self) -> None:
        pivots = np.abs(self._lu.U.diagonal())
        largest = pivots.max() if pivots.size else 0.0
        if not np.isfinite(largest) or pivots.min() <= np.finfo(np.float64).eps * largest * pivots.size:
            msg = f"The {self.solver.value} system is numerically singular (smallest LU pivot {pivots.min():.3g})"
            raise SingularSystemError(msg, field="A", constraint="full column rank")

    def solve(self, rhs: np.ndarray) -> np.ndarray:
        """Least-squares solution for one right hand side of length ``shape[0]``."""
        n_rows, n_cols = self.shape
        rhs = np.asarray(rhs, dtype=np.float64)
        if rhs.shape != (n_rows,):
            msg = f"Expected a right hand side of length {n_rows}, got shape {rhs.shape}"
            raise InputShapeError(msg, field="rhs", constraint=f"shape ({n_rows},)")

        if self.solver is Solver.NORMAL:
            z = self._lu.solve(self._A.T @ rhs)
        elif self.solver is Solver.DIRECT:
            z = self._lu.solve(np.concatenate([rhs, np.zeros(n_cols)]))[n_rows:]
        else:
            msg = f"Unhandled solver: {self.solver!r}"
            raise AssertionError(msg)

        if not np.all(np.isfinite(z)):
            msg = f"The {self.solver.value} solver produced non-finite values"
            raise SingularSystemError(msg, field="A", constraint="finite solution")
        return z


def solve_system(A: sparse.spmatrix, rhs: np.ndarray, solver: Solver) -> np.ndarray:
    """Solve ``A z ~= rhs`` in the least-squares sense.

    Args:
        A: Stacked (M, N) system matrix.
        rhs: (M,) right hand side.
        solver: Solution strategy.

    Returns:
        (N,) flat solution.

    Raises:
        SingularSystemError: If the system has no unique finite solution.
    """
    return LeastSquaresFactorization(A, solver).solve(rhs)
