"""
Errors raised by regularize-nd.

Validation errors are raised before any matrix is assembled. A
SingularSystemError can only come out of the final solve.

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

__all__ = [
    "DomainBoundsError",
    "InputShapeError",
    "InsufficientGridSizeError",
    "InvalidSmoothnessError",
    "NonFiniteValueError",
    "NonMonotonicGridError",
    "RegularizeError",
    "RegularizeValidationError",
    "SingularSystemError",
    "UnsupportedMethodError",
    "UnsupportedSolverError",
]


class RegularizeError(Exception):
    """Base class for all regularize-nd errors.

    Args:
        message: Human readable description.
        field: Name of the offending argument, e.g. ``"x"`` or ``"grid[1]"``.
        constraint: The constraint that was violated.
    """

    def __init__(self, message: str, field: str | None = None, constraint: str | None = None):
        super().__init__(message)
        self.field = field
        self.constraint = constraint


class RegularizeValidationError(RegularizeError, ValueError):
    """Invalid input detected before assembly."""


class InputShapeError(RegularizeValidationError): ...


class DomainBoundsError(RegularizeValidationError): ...


class NonMonotonicGridError(RegularizeValidationError): ...


class InsufficientGridSizeError(RegularizeValidationError): ...


class InvalidSmoothnessError(RegularizeValidationError): ...


class NonFiniteValueError(RegularizeValidationError): ...


class UnsupportedMethodError(RegularizeValidationError): ...


class UnsupportedSolverError(RegularizeValidationError): ...


class SingularSystemError(RegularizeError, ArithmeticError):
    """The assembled system could not be solved to a finite result."""
