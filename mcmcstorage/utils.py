# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Utility functions for the MCMCStorage package.

This module provides small helpers shared by the schema, chain and CSV
components of MCMCStorage:

    - Lazy importing of subpackages to keep the top-level import light
    - Enumeration of array indices in column-major order
    - Size computations for variable shapes

Users will not typically need to interact with this module directly--it is designed
to be used internally by MCMCStorage.
"""

from __future__ import annotations

import importlib.util
import itertools
import math
import sys

from types import ModuleType
from typing import Iterator, TYPE_CHECKING

if TYPE_CHECKING:
    from mcmcstorage import custom_types


def lazy_import(name: str) -> ModuleType:
    """Import a module only when one of its attributes is first accessed.

    :param name: The fully qualified module name to import
    :type name: str

    :returns: The (possibly not yet executed) module
    :rtype: ModuleType

    :raises ImportError: If the specified module cannot be found

    Example:
        >>> stan_csv = lazy_import("mcmcstorage.stan_csv")
        >>> # The module body runs here, on first attribute access
        >>> chain = stan_csv.load_chain("output_1.csv")

    .. note::
        Modules that are already imported are returned from ``sys.modules``
        unchanged.
    """
    # Nothing to do if the module is already loaded
    if name in sys.modules:
        return sys.modules[name]

    # Follows https://docs.python.org/3/library/importlib.html#implementing-lazy-imports
    spec = importlib.util.find_spec(name)
    if spec is None:
        raise ImportError(f"Module '{name}' not found.")

    # Wrap the loader so that execution is deferred until first use
    spec.loader = importlib.util.LazyLoader(spec.loader)
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    spec.loader.exec_module(module)
    return module


def column_major_indices(
    dims: tuple[custom_types.Integer, ...],
) -> Iterator[tuple[int, ...]]:
    """Enumerate the 1-based indices of an array in column-major order.

    The first dimension varies fastest, matching the order in which samplers
    write the columns of an array-valued variable.

    :param dims: Size of each dimension. The empty tuple yields a single empty
        index.
    :type dims: tuple[custom_types.Integer, ...]

    :returns: Iterator over index tuples
    :rtype: Iterator[tuple[int, ...]]

    Example:
        >>> list(column_major_indices((2, 2)))
        [(1, 1), (2, 1), (1, 2), (2, 2)]
    """
    # `itertools.product` varies the last iterable fastest, so we enumerate the
    # reversed dimensions and flip each index back
    ranges = [range(1, int(dimsize) + 1) for dimsize in reversed(dims)]
    for reversed_index in itertools.product(*ranges):
        yield reversed_index[::-1]


def n_elements(dims: tuple[custom_types.Integer, ...]) -> int:
    """Number of elements of an array with the given dimensions.

    :param dims: Size of each dimension
    :type dims: tuple[custom_types.Integer, ...]

    :returns: Product of the dimension sizes (1 for the empty tuple)
    :rtype: int
    """
    return math.prod(int(dimsize) for dimsize in dims)
