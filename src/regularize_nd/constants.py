"""
Enumerated options and defaults for regularize-nd.

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

from enum import Enum

from regularize_nd.exceptions import UnsupportedMethodError, UnsupportedSolverError


class InterpMethod(str, Enum):
    """Interpolation scheme used to express a scattered point in grid node values."""

    NEAREST = "nearest"
    LINEAR = "linear"

    @classmethod
    def parse(cls, value: InterpMethod | str) -> InterpMethod:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            msg = f"'{value}' is not a supported interpolation method. Supported methods are: {choices}"
            raise UnsupportedMethodError(msg, field="interp_method", constraint=f"one of {choices}") from None


class Solver(str, Enum):
    """Solver for the stacked fidelity and smoothness system.

    NORMAL factorizes A^T A, which is fast but squares the condition number of A.
    DIRECT factorizes the augmented least-squares system and keeps the
    conditioning of A, at the cost of a larger factorization.
    """

    DIRECT = "direct"
    NORMAL = "normal"

    @classmethod
    def parse(cls, value: Solver | str) -> Solver:
        if isinstance(value, cls):
            return value
        name = str(value).lower()
        if name in _SOLVER_ALIASES:
            return _SOLVER_ALIASES[name]
        try:
            return cls(name)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            msg = f"'{value}' is not a supported solver. Supported solvers are: {choices}"
            raise UnsupportedSolverError(msg, field="solver", constraint=f"one of {choices}") from None


# Names used by the backslash-operator based tools this package replaces
_SOLVER_ALIASES = {
    "\\": Solver.DIRECT,
    "backslash": Solver.DIRECT,
}

DEFAULT_SMOOTHNESS = 0.01
DEFAULT_INTERP_METHOD = InterpMethod.LINEAR
DEFAULT_SOLVER = Solver.NORMAL

# A numerical second derivative needs three nodes along every axis
MIN_GRID_POINTS = {
    InterpMethod.NEAREST: 3,
    InterpMethod.LINEAR: 3,
}
