# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Chains of MCMC draws with named, shaped variables.

A :py:class:`Chain` pairs an :py:class:`~mcmcstorage.chains.schema.IndexSchema`
with a matrix holding one row per iteration and one column per schema column,
together with the metadata needed to interpret the rows: how many leading rows
are warmup, the thinning interval of the run (if known), and whether the rows
are in the order in which they were drawn.

Chains are immutable. The sample matrix is copied on construction and stored
read-only, and all accessors return views of it rather than copies where NumPy
allows.

Example:
    >>> schema = IndexSchema({"a": (), "b": (2,)})
    >>> chain = Chain(schema, np.arange(30.0).reshape(10, 3), warmup=3)
    >>> len(chain)
    7
    >>> chain[:2, "b"].to_array()
    array([[10., 11.],
           [13., 14.]])
"""

from __future__ import annotations

import warnings

from collections.abc import Sequence
from typing import Any, Iterator, Optional, TYPE_CHECKING, Union

import numpy as np
import numpy.typing as npt

from mcmcstorage.chains.schema import IndexSchema
from mcmcstorage.defaults import SAMPLE_DTYPE
from mcmcstorage.exceptions import DimensionMismatch, SchemaMismatch

if TYPE_CHECKING:
    from mcmcstorage import custom_types


def _select_rows(
    rows: npt.NDArray, iterations: custom_types.IterationSelector
) -> npt.NDArray:
    """Selects rows by slice or range. Slices give views, ranges give copies."""
    if isinstance(iterations, slice):
        return rows[iterations]

    # Ranges are interpreted literally, so every position must exist
    for position in (iterations[0], iterations[-1]) if len(iterations) > 0 else ():
        if not 0 <= position < len(rows):
            raise IndexError(
                f"Iteration {position} out of bounds for {len(rows)} iterations."
            )
    return rows[np.asarray(iterations, dtype=np.intp)]


class ChainSlice(Sequence):
    """Lazy sequence over selected iterations of a chain.

    Elements are produced on access by viewing the corresponding row through the
    schema, so iterating does not copy the underlying data. The sequence may be
    iterated any number of times.

    :param schema: Schema of the rows
    :type schema: IndexSchema
    :param rows: Selected rows of the sample matrix
    :type rows: npt.NDArray
    :param variable: Name of the variable to view, or None to view whole draws.
        Defaults to None.
    :type variable: Optional[str]

    Users will not typically build slices directly. They are returned by
    :py:meth:`Chain.slice` and by indexing a chain.
    """

    def __init__(
        self, schema: IndexSchema, rows: npt.NDArray, variable: Optional[str] = None
    ):
        # Fail on unknown variables now rather than on first access
        if variable is not None:
            schema.column_range(variable)

        self.schema = schema
        self.variable = variable
        self._rows = rows

    def __len__(self) -> int:
        return self._rows.shape[0]

    def __getitem__(self, index):
        # Slicing a slice gives another lazy slice
        if isinstance(index, slice):
            return ChainSlice(self.schema, self._rows[index], self.variable)

        row = self._rows[index]
        if self.variable is None:
            return self.schema.view_all(row)
        return self.schema.view(row, self.variable)

    def __iter__(self) -> Iterator[Any]:
        for row in self._rows:
            if self.variable is None:
                yield self.schema.view_all(row)
            else:
                yield self.schema.view(row, self.variable)

    def __repr__(self) -> str:
        target = "all variables" if self.variable is None else repr(self.variable)
        return f"ChainSlice({target}, {len(self)} iterations)"

    def to_array(self) -> custom_types.ViewType:
        """Stack the selected values of a single variable.

        :returns: Array with a leading iteration axis followed by the variable's
            dimensions
        :rtype: custom_types.ViewType

        :raises ValueError: If the slice covers all variables
        """
        if self.variable is None:
            raise ValueError(
                "Only slices of a single variable can be stacked into an array."
            )
        return self.schema.view(self._rows, self.variable)


class Chain:
    """Draws of a single sampler run.

    :param schema: Schema describing the columns of ``matrix``
    :type schema: IndexSchema
    :param matrix: Sample matrix with one row per iteration, including warmup
        iterations if any, and ``schema.width`` columns. It is copied, so later
        changes to it do not affect the chain.
    :type matrix: custom_types.ArrayLike
    :param warmup: Number of leading rows that are warmup iterations. Defaults
        to 0.
    :type warmup: custom_types.Integer
    :param thinning: Thinning interval of the run, or None if unknown. Defaults
        to None.
    :type thinning: Optional[custom_types.Integer]
    :param is_ordered: Whether rows are in the order in which they were drawn.
        Defaults to False.
    :type is_ordered: bool

    :raises DimensionMismatch: If ``matrix`` is not 2-D or its number of columns
        differs from the width of the schema
    :raises ValueError: If ``warmup`` is negative or exceeds the number of rows,
        or if ``thinning`` is not positive

    Chains can be indexed with an iteration selector and a variable name. A
    slice in place of the variable name selects all variables:

        >>> chain[:, "theta"]   # all post-warmup values of theta
        >>> chain[10:20, :]     # dictionaries of all variables for 10 iterations
    """

    def __init__(
        self,
        schema: IndexSchema,
        matrix: custom_types.ArrayLike,
        warmup: custom_types.Integer = 0,
        thinning: Optional[custom_types.Integer] = None,
        is_ordered: bool = False,
    ):
        # Take a private copy so that the caller cannot modify the chain
        matrix = np.array(matrix, dtype=SAMPLE_DTYPE, copy=True)
        if matrix.ndim != 2:
            raise DimensionMismatch(
                f"Sample matrix must be 2-D, got {matrix.ndim} dimensions."
            )
        if matrix.shape[1] != schema.width:
            raise DimensionMismatch(
                f"Sample matrix has {matrix.shape[1]} columns, but the schema has "
                f"width {schema.width}."
            )

        # Check the metadata
        if not 0 <= warmup <= matrix.shape[0]:
            raise ValueError(
                f"Warmup must be between 0 and the number of rows ({matrix.shape[0]}), "
                f"got {warmup}."
            )
        if thinning is not None and thinning < 1:
            raise ValueError(f"Thinning must be positive, got {thinning}.")

        # Nothing may write to the copy once stored
        self._matrix = matrix
        self._matrix.flags.writeable = False

        self._schema = schema
        self._warmup = int(warmup)
        self._thinning = None if thinning is None else int(thinning)
        self._is_ordered = is_ordered

    @property
    def schema(self) -> IndexSchema:
        """Schema describing the columns of the chain."""
        return self._schema

    @property
    def warmup(self) -> int:
        """Number of leading warmup iterations."""
        return self._warmup

    @property
    def thinning(self) -> Optional[int]:
        """Thinning interval of the run, or None if unknown."""
        return self._thinning

    @property
    def is_ordered(self) -> bool:
        """Whether the iterations are in the order in which they were drawn."""
        return self._is_ordered

    def labels(self) -> list[tuple[Any, ...]]:
        """Column labels of the chain. See :py:meth:`IndexSchema.labels`."""
        return self._schema.labels()

    def num_draws(self, include_warmup: bool = False) -> int:
        """Number of iterations in the chain.

        :param include_warmup: Whether to count warmup iterations. Defaults to
            False.
        :type include_warmup: bool

        :returns: Number of iterations
        :rtype: int
        """
        return self._matrix.shape[0] - (0 if include_warmup else self._warmup)

    def __len__(self) -> int:
        return self.num_draws()

    def __repr__(self) -> str:
        return (
            f"Chain({self.num_draws()} draws, warmup={self._warmup}, "
            f"thinning={self._thinning}, is_ordered={self._is_ordered}, "
            f"schema={self._schema!r})"
        )

    def sample_matrix(self, include_warmup: bool = False) -> npt.NDArray:
        """Rows of the sample matrix.

        :param include_warmup: Whether to include the warmup rows. Defaults to
            False.
        :type include_warmup: bool

        :returns: Read-only view of the sample matrix
        :rtype: npt.NDArray
        """
        if include_warmup:
            return self._matrix
        return self._matrix[self._warmup :]

    def slice(
        self,
        iterations: custom_types.IterationSelector = slice(None),
        variable: Optional[str] = None,
    ) -> ChainSlice:
        """Select post-warmup iterations and, optionally, a single variable.

        :param iterations: Positions of the iterations to select, counted from
            the first post-warmup iteration. Defaults to all iterations.
        :type iterations: custom_types.IterationSelector
        :param variable: Name of the variable to select, or None to select
            whole draws. Defaults to None.
        :type variable: Optional[str]

        :returns: Lazy sequence with one element per selected iteration. Elements
            are dictionaries of all variables when ``variable`` is None and
            values of the variable otherwise.
        :rtype: ChainSlice

        :raises UnknownVariable: If the variable is not in the schema
        :raises IndexError: If a range selects iterations that do not exist
        """
        return ChainSlice(
            self._schema,
            _select_rows(self.sample_matrix(), iterations),
            variable,
        )

    def __getitem__(
        self, key: tuple[custom_types.IterationSelector, Union[str, slice]]
    ) -> ChainSlice:
        iterations, variable = key
        if isinstance(variable, slice):
            if variable != slice(None):
                raise TypeError("Variables can only be selected by name or with ':'.")
            variable = None
        return self.slice(iterations, variable)


def concat(*chains: Chain, is_ordered: bool = False) -> Chain:
    """Stack the post-warmup draws of several chains.

    :param chains: Chains to combine. All must have equal schemas.
    :type chains: Chain
    :param is_ordered: Whether the combined rows should be flagged as ordered.
        Defaults to False.
    :type is_ordered: bool

    :returns: Chain with the post-warmup rows of every input in argument order
        and no warmup. Its thinning is the thinning shared by all inputs, or None
        if they do not all agree.
    :rtype: Chain

    :raises ValueError: If no chains are given
    :raises SchemaMismatch: If the schemas of the chains differ

    Example:
        >>> combined = concat(chain_1, chain_2)
        >>> len(combined) == len(chain_1) + len(chain_2)
        True
    """
    if len(chains) == 0:
        raise ValueError("At least one chain is required.")

    # All schemas must match the first
    schema = chains[0].schema
    for chain_ind, chain in enumerate(chains[1:], start=1):
        if chain.schema != schema:
            raise SchemaMismatch(
                f"Schema of chain {chain_ind} ({chain.schema!r}) differs from the "
                f"schema of chain 0 ({schema!r})."
            )

    # Only keep the thinning if everyone agrees on it
    thinnings = {chain.thinning for chain in chains}
    thinning = next(iter(thinnings)) if len(thinnings) == 1 else None
    if len(known_thinnings := sorted(thinnings - {None})) > 1:
        warnings.warn(
            f"Combining chains with different thinning intervals {known_thinnings}. "
            "Thinning of the combined chain is unknown."
        )

    return Chain(
        schema,
        np.concatenate([chain.sample_matrix() for chain in chains], axis=0),
        warmup=0,
        thinning=thinning,
        is_ordered=is_ordered,
    )
