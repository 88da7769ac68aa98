# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Inference of variable shapes from parsed header columns.

Samplers flatten array-valued variables into one column per element, writing the
elements in column-major order (the first index varies fastest). Given the parsed
column names of a header, this module recovers the shape of every variable by
checking that the columns of each variable form one contiguous block that
enumerates a complete array in that order.

Example:
    >>> parsed = [("a", ()), ("b", (1, 1)), ("b", (2, 1)), ("b", (1, 2)), ("b", (2, 2))]
    >>> parse_schema(parsed)
    IndexSchema({a: (), b: (2, 2)})
"""

from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

from mcmcstorage import utils
from mcmcstorage.chains.schema import IndexSchema, Scalar
from mcmcstorage.exceptions import MalformedHeader, MalformedIndices

if TYPE_CHECKING:
    from mcmcstorage import custom_types


def collapse_contiguous_dimensions(
    parsed: Sequence[custom_types.ParsedName], start: int = 0
) -> tuple[str, tuple[int, ...], int]:
    """Infer the shape of the array whose columns begin at ``start``.

    The run of entries sharing the name of ``parsed[start]`` is consumed. The last
    index of the run is taken as the shape, and the indices of the run must match,
    one by one, a counter that starts at all ones and is incremented with the
    first dimension varying fastest.

    :param parsed: Parsed column names, as returned by
        :py:func:`~mcmcstorage.stan_csv.variable_names.parse_variable_name`
    :type parsed: Sequence[custom_types.ParsedName]
    :param start: Position of the first column of the array. Defaults to 0.
    :type start: int

    :returns: The variable name, its shape, and the position just past its last
        column
    :rtype: tuple[str, tuple[int, ...], int]

    :raises MalformedIndices: If the run does not start at all ones, mixes numbers
        of dimensions, or deviates from the column-major enumeration of its shape

    Example:
        >>> v = [("a", (1, 1)), ("a", (2, 1)), ("a", (1, 2)), ("a", (2, 2))]
        >>> collapse_contiguous_dimensions(v)
        ('a', (2, 2), 4)
    """
    if not 0 <= start < len(parsed):
        raise MalformedIndices(f"No column at position {start}.")

    # The first column must have index (1, 1, ..., 1)
    name, first_index = parsed[start]
    n_dims = len(first_index)
    if n_dims == 0:
        raise MalformedIndices(f"Column {start} of {name!r} has no indices.")
    if first_index != (1,) * n_dims:
        raise MalformedIndices(
            f"Indices of {name!r} start at {first_index}, expected {(1,) * n_dims}."
        )

    # Find the end of the run of columns with this name
    stop = start
    while stop < len(parsed) and parsed[stop][0] == name:
        if len(parsed[stop][1]) != n_dims:
            raise MalformedIndices(
                f"Column {stop} of {name!r} has {len(parsed[stop][1])} indices, "
                f"expected {n_dims}."
            )
        stop += 1

    # The last column holds the extent of every dimension
    shape = parsed[stop - 1][1]
    if stop - start != utils.n_elements(shape):
        raise MalformedIndices(
            f"{name!r} has {stop - start} columns, but its last index {shape} "
            f"implies {utils.n_elements(shape)}."
        )

    # Walk an odometer through the expected indices, first dimension fastest
    counter = [1] * n_dims
    for position in range(start, stop):
        if tuple(counter) != parsed[position][1]:
            raise MalformedIndices(
                f"Column {position} of {name!r} has index {parsed[position][1]}, "
                f"expected {tuple(counter)} in column-major order."
            )
        for dimind in range(n_dims):
            if counter[dimind] < shape[dimind]:
                counter[dimind] += 1
                break
            counter[dimind] = 1

    return name, shape, stop


def parse_schema(parsed: Sequence[custom_types.ParsedName]) -> IndexSchema:
    """Build a schema from the parsed column names of a header.

    Columns sharing a name must be contiguous. A single column without indices
    defines a scalar; every other run of columns is collapsed into an array with
    :py:func:`collapse_contiguous_dimensions`.

    :param parsed: Parsed column names in header order
    :type parsed: Sequence[custom_types.ParsedName]

    :returns: Schema with variables in the order of their first column
    :rtype: IndexSchema

    :raises MalformedHeader: If a variable's columns are not contiguous, a scalar
        is repeated, or the indices of an array are malformed
    """
    named_shapes = []
    seen = set()
    position = 0
    while position < len(parsed):

        # A name may only start one run
        name, index = parsed[position]
        if name in seen:
            raise MalformedHeader(
                f"Columns of {name!r} are repeated or not contiguous "
                f"(column {position})."
            )
        seen.add(name)

        # Scalars occupy exactly one column
        if index == ():
            named_shapes.append((name, Scalar()))
            position += 1
            continue

        # Otherwise, collapse the run into an array
        try:
            name, shape, position = collapse_contiguous_dimensions(parsed, position)
        except MalformedIndices as err:
            raise MalformedHeader(f"Malformed indices for {name!r}: {err}") from err
        named_shapes.append((name, shape))

    return IndexSchema(named_shapes)
