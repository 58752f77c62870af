"""
xarray accessor for fitting gridded surfaces to scattered samples.

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

from collections.abc import Hashable, Sequence

import numpy as np
import xarray as xr

from regularize_nd.constants import DEFAULT_INTERP_METHOD, DEFAULT_SMOOTHNESS, DEFAULT_SOLVER, InterpMethod, Solver
from regularize_nd.core import RegularizedGridFitter
from regularize_nd.exceptions import InputShapeError
from regularize_nd.grid import GridSpecification, grid_dims_of
from regularize_nd.utils import update_history


@xr.register_dataarray_accessor("regularize")
@xr.register_dataset_accessor("regularize")
class RegularizeAccessor:
    """Fit scattered xarray data onto a rectilinear target grid.

    The scattered samples lie along a single dimension. Their position along grid
    axis ``name`` is the coordinate ``name`` of that dimension, e.g.::

        samples = xr.DataArray(
            values,
            dims=["obs"],
            coords={"lat": ("obs", lats), "lon": ("obs", lons)},
        )
        target = xr.Dataset(coords={"lat": lat_nodes, "lon": lon_nodes})
        fitted = samples.regularize.fit(target, smoothness=0.05)
    """

    def __init__(self, xarray_obj: xr.DataArray | xr.Dataset):
        self._obj = xarray_obj

    def fit(
        self,
        target_grid: xr.Dataset,
        smoothness: float | Sequence[float] = DEFAULT_SMOOTHNESS,
        interp_method: InterpMethod | str = DEFAULT_INTERP_METHOD,
        solver: Solver | str = DEFAULT_SOLVER,
        grid_dims: Sequence[Hashable] | None = None,
    ) -> xr.DataArray | xr.Dataset:
        """Fit a smooth surface on the coords of the target dataset.

        Args:
            target_grid: Dataset whose 1-D dimension coordinates are the grid nodes.
            smoothness: Ratio of smoothness to fidelity, scalar or one value per grid axis.
            interp_method: 'linear' or 'nearest'.
            solver: 'normal' or 'direct'.
            grid_dims: Grid axes, in order. Defaults to all dimension coordinates of
                ``target_grid``.

        Returns:
            Data on the target grid, with the same type as the input. For a Dataset,
            every data variable along the sample dimension is fitted.
        """
        dims = list(grid_dims) if grid_dims is not None else grid_dims_of(target_grid)
        grid = GridSpecification.from_dataset(target_grid, dims)
        sample_dim = self._sample_dim(dims)
        x = np.column_stack([self._obj[dim].to_numpy() for dim in dims])

        fitter = RegularizedGridFitter(grid, smoothness, interp_method, solver)
        coords = {dim: target_grid[dim] for dim in dims}
        history_message = (
            f"Fitted using RegularizedGridFitter with interp_method='{fitter.interp_method.value}', "
            f"solver='{fitter.solver.value}'"
        )

        if isinstance(self._obj, xr.DataArray):
            if self._obj.dims != (sample_dim,):
                msg = f"The data must only vary along the sample dimension '{sample_dim}', got dims {self._obj.dims}"
                raise InputShapeError(msg, field="data", constraint=f"dims == ('{sample_dim}',)")
            values = fitter(x, self._obj.to_numpy())
            result = xr.DataArray(values, dims=dims, coords=coords, name=self._obj.name, attrs=dict(self._obj.attrs))
            update_history(result.attrs, history_message)
            return result

        names = [name for name, var in self._obj.data_vars.items() if var.dims == (sample_dim,)]
        if not names:
            msg = f"No data variable of the dataset lies along the sample dimension '{sample_dim}'"
            raise InputShapeError(msg, field="data_vars", constraint=f"dims == ('{sample_dim}',)")
        fitted = fitter.fit_many(x, np.column_stack([self._obj[name].to_numpy() for name in names]))
        result_ds = xr.Dataset(
            {
                name: xr.DataArray(values, dims=dims, coords=coords, attrs=dict(self._obj[name].attrs))
                for name, values in zip(names, fitted)
            },
            attrs=dict(self._obj.attrs),
        )
        update_history(result_ds.attrs, history_message)
        return result_ds

    def _sample_dim(self, dims: Sequence[Hashable]) -> Hashable:
        """The single dimension shared by the sample coordinates of every grid axis."""
        missing = [dim for dim in dims if dim not in self._obj.coords]
        if missing:
            msg = f"Sample coordinates {missing} not found. Each grid axis needs a coordinate of the same name."
            raise InputShapeError(msg, field="coords", constraint="one coordinate per grid axis")
        sample_dims = {self._obj[dim].dims for dim in dims}
        if len(sample_dims) != 1 or len(next(iter(sample_dims))) != 1:
            msg = f"The sample coordinates {list(dims)} must all be 1-D along the same dimension, got {sample_dims}"
            raise InputShapeError(msg, field="coords", constraint="1-D along a shared sample dimension")
        return next(iter(sample_dims))[0]
