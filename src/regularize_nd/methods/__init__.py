"""
Compiled kernels used during equation assembly.
"""

from regularize_nd.methods._numba_kernels import compute_multilinear_weights, compute_nearest_columns

__all__ = [
    "compute_multilinear_weights",
    "compute_nearest_columns",
]
