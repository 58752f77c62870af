"""
Tests for the xarray accessor.
"""

import numpy as np
import pytest
import xarray as xr

import regularize_nd  # noqa: F401
from regularize_nd.exceptions import InputShapeError

from helpers import create_samples, create_target_grid


@pytest.fixture
def target():
    return create_target_grid(np.linspace(0, 1, 11), np.linspace(0, 1, 9))


def test_fit_dataarray(target):
    """Test fitting a DataArray of scattered samples onto the target grid."""
    samples = create_samples(400, lambda lat, lon: lat + 2.0 * lon)
    samples.attrs["units"] = "K"

    result = samples.regularize.fit(target, smoothness=0.01)

    assert isinstance(result, xr.DataArray)
    assert result.dims == ("lat", "lon")
    assert result.shape == (11, 9)
    assert result.name == "data"
    assert result.attrs["units"] == "K"
    np.testing.assert_array_equal(result["lat"].values, target["lat"].values)
    expected = target["lat"].values[:, np.newaxis] + 2.0 * target["lon"].values[np.newaxis, :]
    np.testing.assert_allclose(result.values, expected, atol=1e-6)


def test_fit_grid_dims_order(target):
    """Test that grid_dims sets the order of the result axes."""
    samples = create_samples(300, lambda lat, lon: lat - lon)
    result = samples.regularize.fit(target, grid_dims=["lon", "lat"], solver="direct")
    assert result.dims == ("lon", "lat")
    assert result.shape == (9, 11)


def test_fit_dataset(target):
    """Test that every variable along the sample dimension is fitted."""
    first = create_samples(300, lambda lat, lon: lat * lon, name="first")
    second = create_samples(300, lambda lat, lon: 3.0 * lat, name="second")
    ds = xr.Dataset({"first": first, "second": second, "constant": xr.DataArray(1.0)})
    ds.attrs["title"] = "test"

    result = ds.regularize.fit(target, smoothness=0.1, interp_method="nearest")

    assert isinstance(result, xr.Dataset)
    assert set(result.data_vars) == {"first", "second"}
    assert result["first"].dims == ("lat", "lon")
    assert result.attrs["title"] == "test"
    single = first.regularize.fit(target, smoothness=0.1, interp_method="nearest")
    np.testing.assert_allclose(result["first"].values, single.values, rtol=1e-12, atol=1e-12)


def test_missing_sample_coordinate(target):
    """Test that samples without a coordinate for a grid axis are rejected."""
    samples = create_samples(50, lambda lat, lon: lat).drop_vars("lon")
    with pytest.raises(InputShapeError, match="lon"):
        samples.regularize.fit(target)


def test_data_with_extra_dimension(target):
    """Test that a DataArray varying along another dimension is rejected."""
    samples = create_samples(50, lambda lat, lon: lat)
    stacked = samples.expand_dims(time=2)
    with pytest.raises(InputShapeError):
        stacked.regularize.fit(target)


def test_dataset_without_sample_variables(target):
    """Test that a Dataset with nothing to fit is rejected."""
    samples = create_samples(50, lambda lat, lon: lat)
    ds = xr.Dataset(coords=samples.coords)
    with pytest.raises(InputShapeError):
        ds.regularize.fit(target)
