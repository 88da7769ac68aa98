# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Custom type definitions for MCMCStorage.

This module provides type aliases for the values passed between the parsing,
schema and chain components of the package.

All imports are conditional on TYPE_CHECKING to avoid circular imports while
maintaining proper type hints for development and documentation tools.
"""

from typing import TYPE_CHECKING, Union

# Everything in this file is only imported if TYPE_CHECKING is True.
if TYPE_CHECKING:

    import numpy as np
    import numpy.typing as npt

    from mcmcstorage.chains import schema

# Scalar types
Integer = Union[int, "np.integer"]
"""Type alias for integer values.

Accepts both Python's built-in int and NumPy integer types.

:type: Union[int, np.integer]
"""

Float = Union[float, "np.floating"]
"""Type alias for floating-point values.

:type: Union[float, np.floating]
"""

# Names and indices
IndexTuple = tuple[int, ...]
"""1-based indices of a single column within its variable. The empty tuple
denotes a scalar.

:type: tuple[int, ...]
"""

ParsedName = tuple[str, IndexTuple]
"""A column name split into the variable name and its indices.

:type: tuple[str, IndexTuple]
"""

# Shapes
ShapeLike = Union["schema.Scalar", "schema.Array", tuple[Integer, ...]]
"""Anything that can be interpreted as the shape of a variable: one of the
tagged shape classes, or a tuple of dimension sizes where ``()`` denotes a
scalar.

:type: Union[schema.Scalar, schema.Array, tuple[Integer, ...]]
"""

# Views
ViewType = Union["np.floating", "npt.NDArray[np.floating]"]
"""Type returned when viewing a single variable of a row or matrix.

:type: Union[np.floating, npt.NDArray[np.floating]]
"""

# Type for selecting iterations
IterationSelector = Union[slice, range]
"""Type alias for selections of iterations within a chain.

:type: Union[slice, range]
"""

ArrayLike = Union["npt.ArrayLike", "npt.NDArray"]
"""Type alias for anything NumPy can convert to an array.

:type: Union[npt.ArrayLike, npt.NDArray]
"""
