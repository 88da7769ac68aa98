# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Index schemas describing the column layout of sampler output.

A sampler writes every draw as one flat row of numbers. The schema records which
named variable each column belongs to and what shape the variable has, so that
the flat rows can be viewed as named, multi-dimensional values.

Variables are either scalars, described by :py:class:`Scalar`, or arrays,
described by :py:class:`Array`. The two are deliberately distinct: a scalar
variable is not the same as a one-element array, and schemas holding one or the
other do not compare equal.

Within the block of columns belonging to an array, elements are stored in
column-major order (the first dimension varies fastest). Views produced by
:py:meth:`IndexSchema.view` honor this layout without copying data.

Example:
    >>> schema = IndexSchema({"a": (), "b": (2,), "c": (2, 2)})
    >>> schema.width
    7
    >>> schema.column_names()
    ['a', 'b.1', 'b.2', 'c.1.1', 'c.2.1', 'c.1.2', 'c.2.2']
    >>> schema.view(np.arange(7.0), "c")
    array([[3., 5.],
           [4., 6.]])
"""

from __future__ import annotations

import operator

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, TYPE_CHECKING, Union

import numpy as np
import numpy.typing as npt

from mcmcstorage import utils
from mcmcstorage.defaults import DIMENSION_SEPARATOR
from mcmcstorage.exceptions import DimensionMismatch, UnknownVariable

if TYPE_CHECKING:
    from mcmcstorage import custom_types


@dataclass(frozen=True)
class Scalar:
    """Shape of a scalar variable. Occupies a single column."""

    @property
    def dims(self) -> tuple[()]:
        """Dimensions of the variable. Always empty."""
        return ()

    @property
    def size(self) -> int:
        """Number of columns occupied by the variable. Always 1."""
        return 1


@dataclass(frozen=True)
class Array:
    """Shape of an array-valued variable.

    :param dims: Size of each dimension. Must be non-empty and every size must be
        at least 1.
    :type dims: tuple[int, ...]

    :raises ValueError: If ``dims`` is empty or contains sizes below 1
    """

    dims: tuple[int, ...]

    def __post_init__(self):
        # Accept NumPy integers, but nothing that would silently truncate
        try:
            dims = tuple(operator.index(dimsize) for dimsize in self.dims)
        except TypeError as err:
            raise ValueError(
                f"Dimension sizes must be integers, got {self.dims}."
            ) from err
        object.__setattr__(self, "dims", dims)

        if len(self.dims) == 0:
            raise ValueError("Arrays need at least one dimension. Use Scalar().")
        if any(dimsize < 1 for dimsize in self.dims):
            raise ValueError(f"Dimension sizes must be positive, got {self.dims}.")

    @property
    def size(self) -> int:
        """Number of columns occupied by the variable."""
        return utils.n_elements(self.dims)


VariableShape = Union[Scalar, Array]


def as_variable_shape(shape: custom_types.ShapeLike) -> VariableShape:
    """Convert a tuple of dimension sizes to a tagged variable shape.

    :param shape: A :py:class:`Scalar`, an :py:class:`Array`, or a tuple of
        dimension sizes. The empty tuple denotes a scalar.
    :type shape: custom_types.ShapeLike

    :returns: The corresponding tagged shape
    :rtype: VariableShape

    :raises ValueError: If the dimension sizes are not positive integers
    """
    if isinstance(shape, (Scalar, Array)):
        return shape
    if len(shape) == 0:
        return Scalar()
    return Array(tuple(shape))


class IndexSchema:
    """Ordered mapping from variable names to shapes.

    The order of the variables defines the order of their column blocks in a
    sample row. Schemas are immutable once built.

    :param named_shapes: Mapping from variable name to shape, or an iterable of
        ``(name, shape)`` pairs. Shapes may be :py:class:`Scalar`,
        :py:class:`Array`, or tuples of dimension sizes (``()`` for scalars).
    :type named_shapes: Union[Mapping[str, custom_types.ShapeLike],
        Iterable[tuple[str, custom_types.ShapeLike]]]

    :raises ValueError: If a name is repeated, empty, or contains the dimension
        separator, or if a shape is invalid

    Example:
        >>> schema = IndexSchema([("lp__", ()), ("theta", (3,))])
        >>> schema.column_range("theta")
        range(1, 4)
        >>> schema.labels()
        [('lp__',), ('theta', 1), ('theta', 2), ('theta', 3)]
    """

    def __init__(
        self,
        named_shapes: Union[
            Mapping[str, custom_types.ShapeLike],
            Iterable[tuple[str, custom_types.ShapeLike]],
        ],
    ):
        # Normalize to a sequence of pairs
        if isinstance(named_shapes, Mapping):
            named_shapes = named_shapes.items()

        # Record the shape and column block of each variable
        self._shapes: dict[str, VariableShape] = {}
        self._ranges: dict[str, range] = {}
        offset = 0
        for name, shape in named_shapes:

            # Names must be usable as column names
            if not isinstance(name, str) or name == "" or DIMENSION_SEPARATOR in name:
                raise ValueError(f"Invalid variable name: {name!r}")
            if name in self._shapes:
                raise ValueError(f"Duplicate variable name: {name!r}")

            # Each variable occupies the next block of columns
            shape = as_variable_shape(shape)
            self._shapes[name] = shape
            self._ranges[name] = range(offset, offset + shape.size)
            offset += shape.size

        self._width = offset

    @property
    def width(self) -> int:
        """Total number of columns described by the schema."""
        return self._width

    @property
    def names(self) -> tuple[str, ...]:
        """Variable names in column order."""
        return tuple(self._shapes)

    def items(self) -> Iterator[tuple[str, VariableShape]]:
        """Iterate over ``(name, shape)`` pairs in column order."""
        return iter(self._shapes.items())

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._shapes)

    def __contains__(self, name: object) -> bool:
        return name in self._shapes

    def __getitem__(self, name: str) -> VariableShape:
        self._check_name(name)
        return self._shapes[name]

    def __eq__(self, other: object):
        if not isinstance(other, IndexSchema):
            return NotImplemented

        # Order matters, so compare as lists rather than dictionaries
        return list(self._shapes.items()) == list(other._shapes.items())

    def __hash__(self) -> int:
        return hash(tuple(self._shapes.items()))

    def __repr__(self) -> str:
        contents = ", ".join(
            f"{name}: {shape.dims}" for name, shape in self._shapes.items()
        )
        return f"IndexSchema({{{contents}}})"

    def _check_name(self, name: str) -> None:
        """Raises UnknownVariable if the name is not in the schema."""
        if name not in self._shapes:
            raise UnknownVariable(
                f"Unknown variable {name!r}. Known variables: {', '.join(self.names)}"
            )

    def labels(self) -> list[tuple[Any, ...]]:
        """One label per column, in column order.

        Scalars are labeled ``(name,)`` and array elements
        ``(name, i1, i2, ...)`` with 1-based indices in column-major order.

        :returns: Column labels
        :rtype: list[tuple[Any, ...]]
        """
        return [
            (name, *index)
            for name, shape in self._shapes.items()
            for index in utils.column_major_indices(shape.dims)
        ]

    def column_names(self) -> list[str]:
        """Column names in the ``name.i1.i2...`` convention used by sampler
        output, in column order.

        :returns: Column names
        :rtype: list[str]
        """
        return [
            DIMENSION_SEPARATOR.join(str(part) for part in label)
            for label in self.labels()
        ]

    def column_range(self, name: str) -> range:
        """Half-open range of the columns holding a variable.

        :param name: Name of the variable
        :type name: str

        :returns: Column range
        :rtype: range

        :raises UnknownVariable: If the variable is not in the schema
        """
        self._check_name(name)
        return self._ranges[name]

    def _check_container(self, container: custom_types.ArrayLike) -> npt.NDArray:
        """Converts to an array and checks that it can be viewed by the schema."""
        container = np.asarray(container)
        if container.ndim not in {1, 2}:
            raise DimensionMismatch(
                f"Expected a row or a matrix, got an array with {container.ndim} "
                "dimensions."
            )
        if container.shape[-1] != self._width:
            raise DimensionMismatch(
                f"Last axis has length {container.shape[-1]}, but the schema has "
                f"width {self._width}."
            )
        return container

    def _view(self, container: npt.NDArray, name: str) -> custom_types.ViewType:
        """View of a single variable in an already-validated container."""
        # Scalars are a single column
        shape = self._shapes[name]
        columns = self._ranges[name]
        if isinstance(shape, Scalar):
            if container.ndim == 1:
                return container[columns.start]
            return container[:, columns.start]

        # The block is stored column-major. Reshaping with the dimensions reversed
        # and then reversing the trailing axes gives a view without copying.
        block = container[..., columns.start : columns.stop]
        n_leading = block.ndim - 1
        reshaped = block.reshape(block.shape[:-1] + shape.dims[::-1])
        return reshaped.transpose(
            *range(n_leading), *range(reshaped.ndim - 1, n_leading - 1, -1)
        )

    def view(
        self, container: custom_types.ArrayLike, name: str
    ) -> custom_types.ViewType:
        """View a single variable of a row or a matrix of rows.

        :param container: A single row (1-D) or a matrix with one row per
            iteration (2-D). The last axis must have length :py:attr:`width`.
        :type container: custom_types.ArrayLike
        :param name: Name of the variable
        :type name: str

        :returns: For a row, the scalar value or an array with the variable's
            dimensions. For a matrix, the same with a leading iteration axis.
            Arrays share memory with ``container`` when it is a NumPy array.
        :rtype: custom_types.ViewType

        :raises UnknownVariable: If the variable is not in the schema
        :raises DimensionMismatch: If the container cannot be viewed by the schema
        """
        self._check_name(name)
        return self._view(self._check_container(container), name)

    def view_all(
        self, container: custom_types.ArrayLike
    ) -> Union[
        dict[str, custom_types.ViewType], list[dict[str, custom_types.ViewType]]
    ]:
        """View every variable of a row or a matrix of rows.

        :param container: A single row (1-D) or a matrix with one row per
            iteration (2-D). The last axis must have length :py:attr:`width`.
        :type container: custom_types.ArrayLike

        :returns: For a row, a dictionary mapping variable names to views. For a
            matrix, one such dictionary per row.
        :rtype: Union[dict[str, custom_types.ViewType],
            list[dict[str, custom_types.ViewType]]]

        :raises DimensionMismatch: If the container cannot be viewed by the schema
        """
        container = self._check_container(container)
        if container.ndim == 1:
            return {name: self._view(container, name) for name in self._shapes}
        return [
            {name: self._view(row, name) for name in self._shapes}
            for row in container
        ]

