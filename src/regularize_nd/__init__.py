"""
regularize-nd: smooth n-dimensional lookup tables from scattered data.

A regularized least-squares fit of the node values of a rectilinear grid to
scattered measurements, with a per-axis second derivative penalty.

Quick start:
    import numpy as np
    from regularize_nd import regularize_nd

    rng = np.random.default_rng(0)
    x = rng.random((100, 2))
    y = np.exp(x[:, 0] + 2 * x[:, 1])
    grid = [np.linspace(0, 1, 11), np.linspace(0, 1, 11)]
    values = regularize_nd(x, y, grid, smoothness=0.01)

Importing the package also registers the ``.regularize`` accessor on xarray
DataArrays and Datasets.
"""

__version__ = "0.1.0"

from regularize_nd import accessor  # noqa: F401
from regularize_nd.assembly import (
    build_fidelity_matrix,
    build_smoothness_matrices,
    build_smoothness_matrix,
    n_smoothness_equations,
    second_derivative_weights,
)
from regularize_nd.constants import DEFAULT_INTERP_METHOD, DEFAULT_SMOOTHNESS, DEFAULT_SOLVER, InterpMethod, Solver
from regularize_nd.core import RegularizedGridFitter, SystemBlocks, build_system, regularize_nd
from regularize_nd.exceptions import (
    DomainBoundsError,
    InputShapeError,
    InsufficientGridSizeError,
    InvalidSmoothnessError,
    NonFiniteValueError,
    NonMonotonicGridError,
    RegularizeError,
    RegularizeValidationError,
    SingularSystemError,
    UnsupportedMethodError,
    UnsupportedSolverError,
)
from regularize_nd.grid import GridSpecification
from regularize_nd.indexing import MultiIndexer
from regularize_nd.locator import CellLocation, locate_cells
from regularize_nd.solver import LeastSquaresFactorization, solve_system, stack_system

__all__ = [
    # Fitting
    "regularize_nd",
    "build_system",
    "RegularizedGridFitter",
    "SystemBlocks",
    # Options
    "InterpMethod",
    "Solver",
    "DEFAULT_SMOOTHNESS",
    "DEFAULT_INTERP_METHOD",
    "DEFAULT_SOLVER",
    # Grid and indexing
    "GridSpecification",
    "MultiIndexer",
    "CellLocation",
    "locate_cells",
    # Assembly and solve
    "build_fidelity_matrix",
    "build_smoothness_matrix",
    "build_smoothness_matrices",
    "n_smoothness_equations",
    "second_derivative_weights",
    "stack_system",
    "solve_system",
    "LeastSquaresFactorization",
    # Errors
    "RegularizeError",
    "RegularizeValidationError",
    "InputShapeError",
    "DomainBoundsError",
    "NonMonotonicGridError",
    "InsufficientGridSizeError",
    "InvalidSmoothnessError",
    "NonFiniteValueError",
    "UnsupportedMethodError",
    "UnsupportedSolverError",
    "SingularSystemError",
]
