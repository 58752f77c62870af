"""
Conversion between per-axis grid subscripts and flat node indices.

Axis 0 varies fastest, so the flat index of the zero-based subscripts
``(i_0, i_1, ..., i_{n-1})`` is ``i_0 + i_1 * s_0 + i_2 * s_0 * s_1 + ...`` where
``s_d`` is the node count of axis ``d``. Matrix columns and the final reshape of
the solution both go through this module.

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

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from regularize_nd.exceptions import InputShapeError


@dataclass(frozen=True, eq=False)
class MultiIndexer:
    """Mixed-radix index arithmetic for an array of the given shape."""

    shape: tuple[int, ...]
    strides: np.ndarray = field(init=False, repr=False)
    size: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        shape = tuple(int(n) for n in self.shape)
        strides = np.cumprod((1, *shape[:-1]), dtype=np.int64)
        strides.flags.writeable = False
        object.__setattr__(self, "shape", shape)
        object.__setattr__(self, "strides", strides)
        object.__setattr__(self, "size", int(np.prod(shape, dtype=np.int64)))

    @property
    def n_dims(self) -> int:
        return len(self.shape)

    def ravel(self, subscripts: np.ndarray | Sequence[int]) -> np.ndarray:
        """Flat indices of zero-based subscripts.

        Args:
            subscripts: Array whose last axis holds one subscript per dimension.

        Returns:
            Integer array with the last axis reduced.
        """
        subscripts = np.asarray(subscripts, dtype=np.int64)
        if subscripts.shape[-1:] != (self.n_dims,):
            msg = f"Expected subscripts with a trailing axis of length {self.n_dims}, got shape {subscripts.shape}"
            raise InputShapeError(msg, field="subscripts", constraint=f"shape (..., {self.n_dims})")
        return subscripts @ self.strides

    def unravel(self, flat: np.ndarray | int) -> np.ndarray:
        """Zero-based subscripts of flat indices, stacked along a new last axis."""
        flat = np.asarray(flat, dtype=np.int64)
        return np.stack([(flat // stride) % count for stride, count in zip(self.strides, self.shape)], axis=-1)

    def to_grid(self, vector: np.ndarray) -> np.ndarray:
        """Reshape a flat vector of node values into a grid-shaped array."""
        vector = np.asarray(vector)
        if vector.shape != (self.size,):
            msg = f"Expected a vector of length {self.size}, got shape {vector.shape}"
            raise InputShapeError(msg, field="vector", constraint=f"shape ({self.size},)")
        return vector.reshape(self.shape, order="F")

    def to_flat(self, array: np.ndarray) -> np.ndarray:
        """Inverse of :meth:`to_grid`."""
        array = np.asarray(array)
        if array.shape != self.shape:
            msg = f"Expected an array with shape {self.shape}, got {array.shape}"
            raise InputShapeError(msg, field="array", constraint=f"shape {self.shape}")
        return array.reshape(-1, order="F")
