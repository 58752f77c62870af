import numpy as np
import xarray as xr


def uniform_nodes(*counts, lower=0.0, upper=1.0):
    """Evenly spaced node vectors on [lower, upper], one per count."""
    return [np.linspace(lower, upper, n) for n in counts]


def random_points(n_points, grid, seed=0):
    """Uniformly distributed points inside the bounds of a list of node vectors."""
    rng = np.random.default_rng(seed)
    lows = np.array([nodes[0] for nodes in grid])
    highs = np.array([nodes[-1] for nodes in grid])
    return lows + (highs - lows) * rng.random((n_points, len(grid)))


def create_target_grid(lat_nodes, lon_nodes):
    """Creates an xarray Dataset representing a latitude/longitude target grid."""
    return xr.Dataset(coords={"lat": lat_nodes, "lon": lon_nodes})


def create_samples(n_points, func, seed=0, name="data"):
    """Scattered samples along an 'obs' dimension with lat/lon coordinates in [0, 1]."""
    rng = np.random.default_rng(seed)
    lat = rng.random(n_points)
    lon = rng.random(n_points)
    return xr.DataArray(
        func(lat, lon),
        dims=["obs"],
        coords={"lat": ("obs", lat), "lon": ("obs", lon)},
        name=name,
    )
