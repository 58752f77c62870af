"""
Assembly of the fidelity and smoothness equations.
"""

from regularize_nd.assembly.fidelity import build_fidelity_matrix
from regularize_nd.assembly.smoothness import (
    build_smoothness_matrices,
    build_smoothness_matrix,
    n_smoothness_equations,
    second_derivative_weights,
)

__all__ = [
    "build_fidelity_matrix",
    "build_smoothness_matrices",
    "build_smoothness_matrix",
    "n_smoothness_equations",
    "second_derivative_weights",
]
