"""
Tests for locating scattered points in grid cells.
"""

import numpy as np

from regularize_nd.grid import GridSpecification
from regularize_nd.locator import locate_cells


def test_interval_and_fraction():
    """Test cell index and fraction for points inside unequal cells."""
    grid = GridSpecification(([0.0, 1.0, 3.0, 4.0],))
    x = np.array([[0.5], [1.0], [2.5], [3.9]])
    location = locate_cells(x, grid)
    np.testing.assert_array_equal(location.cell_index[:, 0], [0, 1, 1, 2])
    np.testing.assert_allclose(location.fraction[:, 0], [0.5, 0.0, 0.75, 0.9])


def test_point_on_grid_bounds():
    """Test that points on the first and last nodes are in the first and last cells."""
    grid = GridSpecification(([0.0, 1.0, 2.0, 3.0],))
    location = locate_cells(np.array([[0.0], [3.0]]), grid)
    np.testing.assert_array_equal(location.cell_index[:, 0], [0, 2])
    np.testing.assert_array_equal(location.fraction[:, 0], [0.0, 1.0])


def test_multiple_dimensions():
    """Test that every axis is located independently."""
    grid = GridSpecification(([0.0, 1.0, 2.0], [10.0, 20.0, 30.0, 40.0]))
    location = locate_cells(np.array([[1.5, 40.0], [0.0, 12.5]]), grid)
    np.testing.assert_array_equal(location.cell_index, [[1, 2], [0, 0]])
    np.testing.assert_allclose(location.fraction, [[0.5, 1.0], [0.0, 0.25]])


def test_fraction_within_unit_interval():
    """Test that fractions always lie in [0, 1]."""
    nodes = np.cumsum(np.random.default_rng(3).random(20)) + 0.1
    grid = GridSpecification((nodes,))
    x = np.concatenate([nodes, np.linspace(nodes[0], nodes[-1], 101)])[:, np.newaxis]
    location = locate_cells(x, grid)
    assert np.all(location.fraction >= 0.0)
    assert np.all(location.fraction <= 1.0)
    assert np.all(location.cell_index >= 0)
    assert np.all(location.cell_index <= len(nodes) - 2)
