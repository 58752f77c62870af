"""
Tests for the smoothness equations.
"""

import numpy as np

from regularize_nd.assembly import (
    build_smoothness_matrices,
    build_smoothness_matrix,
    n_smoothness_equations,
    second_derivative_weights,
)
from regularize_nd.grid import GridSpecification


def test_second_derivative_weights_uniform():
    """Test the classic [1, -2, 1] stencil on unit spacing."""
    weights = second_derivative_weights(np.array([0.0, 1.0, 2.0, 3.0]))
    np.testing.assert_allclose(weights, [[1.0, -2.0, 1.0], [1.0, -2.0, 1.0]])


def test_second_derivative_weights_unequal():
    """Test the stencil on unequal spacing and that it is exact for parabolas."""
    nodes = np.array([0.0, 1.0, 3.0])
    weights = second_derivative_weights(nodes)
    np.testing.assert_allclose(weights, [[2.0 / 3.0, -1.0, 1.0 / 3.0]])
    np.testing.assert_allclose(weights @ (nodes**2), [2.0])
    np.testing.assert_allclose(weights.sum(axis=1), [0.0], atol=1e-15)


def test_equation_count():
    """Test that every axis has one equation per interior node along it."""
    grid = GridSpecification.uniform([0.0, 0.0, 0.0], [1.0, 1.0, 1.0], [5, 6, 3])
    assert n_smoothness_equations(grid, 0) == 3 * 6 * 3
    assert n_smoothness_equations(grid, 1) == 5 * 4 * 3
    assert n_smoothness_equations(grid, 2) == 5 * 6 * 1
    blocks = build_smoothness_matrices(grid, np.array([0.1, 0.1, 0.1]), 10)
    assert [block.shape for block in blocks] == [(54, 90), (60, 90), (30, 90)]


def test_zero_smoothness_gives_empty_block():
    """Test that an axis with zero smoothness contributes no rows."""
    grid = GridSpecification.uniform([0.0, 0.0], [1.0, 1.0], [5, 6])
    blocks = build_smoothness_matrices(grid, np.array([0.01, 0.0]), 20)
    assert blocks[0].shape == (18, 30)
    assert blocks[1].shape == (0, 30)


def test_stencil_columns_and_scale():
    """Test columns and values of the equations along both axes."""
    grid = GridSpecification(([0.0, 1.0, 2.0, 3.0], [0.0, 1.0, 2.0]))

    R0 = build_smoothness_matrix(grid, 0, 1.0, 6).toarray()
    assert R0.shape == (6, 12)
    scale = np.sqrt(6 / 6) * 3.0**2
    np.testing.assert_array_equal(np.flatnonzero(R0[0]), [0, 1, 2])
    np.testing.assert_array_equal(np.flatnonzero(R0[1]), [1, 2, 3])
    np.testing.assert_array_equal(np.flatnonzero(R0[2]), [4, 5, 6])
    np.testing.assert_allclose(R0[0, [0, 1, 2]], scale * np.array([1.0, -2.0, 1.0]))

    R1 = build_smoothness_matrix(grid, 1, 1.0, 6).toarray()
    assert R1.shape == (4, 12)
    scale = np.sqrt(6 / 4) * 2.0**2
    np.testing.assert_array_equal(np.flatnonzero(R1[0]), [0, 4, 8])
    np.testing.assert_allclose(R1[0, [0, 4, 8]], scale * np.array([1.0, -2.0, 1.0]))


def test_rows_annihilate_linear_fields():
    """Test that a field linear along the axis has zero second derivative."""
    grid = GridSpecification(([0.0, 0.5, 2.0, 2.5, 4.0], [1.0, 2.0, 4.0]))
    g0, g1 = np.meshgrid(grid.nodes[0], grid.nodes[1], indexing="ij")
    field = (3.0 * g0 + g1**2).reshape(-1, order="F")
    R0 = build_smoothness_matrix(grid, 0, 0.5, 10)
    np.testing.assert_allclose(R0 @ field, 0.0, atol=1e-12)


def test_weights_shared_across_other_axes():
    """Test that the weights only depend on the position along the axis."""
    grid = GridSpecification(([0.0, 1.0, 3.0, 4.0], [0.0, 1.0, 2.0]))
    R0 = build_smoothness_matrix(grid, 0, 1.0, 5).toarray()
    # Rows 0 and 2 are position 0 along axis 0, at index 0 and 1 along axis 1
    np.testing.assert_allclose(R0[0, [0, 1, 2]], R0[2, [4, 5, 6]])
    np.testing.assert_allclose(R0[1, [1, 2, 3]], R0[3, [5, 6, 7]])
    assert not np.allclose(R0[0, [0, 1, 2]], R0[1, [1, 2, 3]])


def test_scale_proportional_to_smoothness():
    """Test that the block scales linearly with the smoothness."""
    grid = GridSpecification.uniform([0.0], [10.0], [8])
    R1 = build_smoothness_matrix(grid, 0, 1.0, 12)
    R2 = build_smoothness_matrix(grid, 0, 2.5, 12)
    np.testing.assert_allclose(R2.toarray(), 2.5 * R1.toarray())
