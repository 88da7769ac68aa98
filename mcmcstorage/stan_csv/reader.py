# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Streaming reader for Stan CSV files.

Stan writes the draws of each chain to a CSV file with the following structure:

    - Comment lines, starting with ``#``, holding the sampler configuration
    - A header line naming every column (``lp__``, ``theta.1.2``, ...)
    - One line of comma-separated numbers per iteration, possibly interleaved
      with further comment lines (e.g. adaptation information)
    - Trailing comment lines, e.g. timing information

The reader parses the header into an :py:class:`~mcmcstorage.chains.IndexSchema`
and accumulates the data rows into a sample matrix, validating every line as it
goes. Any malformed line aborts the read; no partial chain is ever returned.

Multiple chains of the same run are conventionally written to files named
``<prefix><chain id>.csv``. :py:func:`matching_files` and :py:func:`load_chains`
locate and read such files.

Example:
    >>> chain = load_chain("output_1.csv")
    >>> chains = load_chains("output_")
"""

from __future__ import annotations

import glob
import os.path
import re
import warnings

from typing import Iterable, Union

import numpy as np
import numpy.typing as npt

from tqdm import tqdm

from mcmcstorage.chains import Chain
from mcmcstorage.defaults import (
    CSV_SUFFIX,
    DEFAULT_COMMENT_MARKER,
    DEFAULT_DELIMITER,
    DEFAULT_INITIAL_ROW_CAPACITY,
    MIN_HEADER_FIELDS,
    SAMPLE_DTYPE,
)
from mcmcstorage.exceptions import (
    MalformedHeader,
    NumberFormatError,
    RowWidthMismatch,
)
from mcmcstorage.stan_csv.schema_parsing import parse_schema
from mcmcstorage.stan_csv.variable_names import parse_variable_name


class RowBuffer:
    """Growable buffer of fixed-width rows.

    Rows are written into a preallocated array whose capacity doubles whenever it
    is exhausted, so appending ``n`` rows costs amortized ``O(n)`` copies.

    :param width: Number of values per row
    :type width: int
    :param initial_capacity: Number of rows to preallocate. Defaults to
        :py:data:`~mcmcstorage.defaults.DEFAULT_INITIAL_ROW_CAPACITY`.
    :type initial_capacity: int
    """

    def __init__(
        self, width: int, initial_capacity: int = DEFAULT_INITIAL_ROW_CAPACITY
    ):
        if initial_capacity < 1:
            raise ValueError("Initial capacity must be positive.")
        self.width = width
        self._data = np.empty((initial_capacity, width), dtype=SAMPLE_DTYPE)
        self._n_rows = 0

    def __len__(self) -> int:
        return self._n_rows

    @property
    def capacity(self) -> int:
        """Number of rows that fit before the buffer grows."""
        return self._data.shape[0]

    def append(self, row: list[float]) -> None:
        """Append a row.

        :param row: Values of the row. Must have :py:attr:`width` entries.
        :type row: list[float]

        :raises RowWidthMismatch: If the row has the wrong number of values
        """
        if len(row) != self.width:
            raise RowWidthMismatch(
                f"Row has {len(row)} values, but the buffer has width {self.width}."
            )

        # Double the capacity when full
        if self._n_rows == self.capacity:
            grown = np.empty((2 * self.capacity, self.width), dtype=SAMPLE_DTYPE)
            grown[: self._n_rows] = self._data
            self._data = grown

        self._data[self._n_rows] = row
        self._n_rows += 1

    def finalize(self) -> npt.NDArray:
        """Matrix holding exactly the appended rows.

        :returns: View of shape ``(len(self), width)`` into the buffer. Rows appended
            later are not part of it.
        :rtype: npt.NDArray
        """
        return self._data[: self._n_rows]


def _decode_line(line: bytes, line_number: int, header_seen: bool) -> str:
    """Decodes a line as UTF-8, reporting failures as malformed input."""
    try:
        return line.decode("utf-8")
    except UnicodeDecodeError as err:
        if not header_seen:
            raise MalformedHeader(
                f"Line {line_number} before the data rows is not valid UTF-8."
            ) from err
        raise NumberFormatError(
            f"Line {line_number} is not valid UTF-8 and cannot hold numbers."
        ) from err


def _is_comment(line: str, comment_marker: str) -> bool:
    """Whether the first non-whitespace content of a line is the comment marker."""
    return line.lstrip().startswith(comment_marker)


def _split_fields(line: str) -> list[str]:
    """Splits a line on the delimiter and trims whitespace around each field."""
    return [field.strip() for field in line.strip().split(DEFAULT_DELIMITER)]


def _parse_row(fields: list[str], width: int, line_number: int) -> list[float]:
    """Converts the fields of a data row to floats."""
    # The row must have exactly one field per column
    if len(fields) < width:
        raise RowWidthMismatch(f"Fewer than {width} fields in line.")
    if len(fields) > width:
        raise RowWidthMismatch(f"More than {width} fields in line.")

    values = []
    for field_ind, field in enumerate(fields):
        try:
            # `float` also accepts digit separators, which are not decimal numbers
            if "_" in field:
                raise ValueError(f"Digit separator in {field!r}.")
            values.append(float(field))
        except ValueError as err:
            raise NumberFormatError(
                f"Could not parse field {field_ind + 1} ({field!r}) on line "
                f"{line_number} as a number."
            ) from err

    return values


def read_chain(
    stream: Iterable[Union[str, bytes]],
    comment_marker: str = DEFAULT_COMMENT_MARKER,
) -> Chain:
    """Read a single chain from a stream of Stan CSV lines.

    :param stream: Lines of the file, e.g. an open file or an ``io.StringIO``.
        Byte lines are decoded as UTF-8.
    :type stream: Iterable[Union[str, bytes]]
    :param comment_marker: Marker identifying comment lines. Defaults to
        :py:data:`~mcmcstorage.defaults.DEFAULT_COMMENT_MARKER`.
    :type comment_marker: str

    :returns: Chain holding every data row, with no warmup, unknown thinning, and
        flagged as ordered
    :rtype: Chain

    :raises MalformedHeader: If there is no header, the header has fewer than
        :py:data:`~mcmcstorage.defaults.MIN_HEADER_FIELDS` fields, or the column
        names do not describe a valid schema. Also raised for lines before the
        first data row that are not valid UTF-8
    :raises InvalidFormat: If a column name is malformed
    :raises RowWidthMismatch: If a data row has a different number of fields
        than the header
    :raises NumberFormatError: If a field of a data row is not a decimal number,
        or a data row is not valid UTF-8

    Example:
        >>> chain = read_chain(io.StringIO("a,b.1,b.2\\n1,2,3\\n4,5,6\\n"))
        >>> chain.schema
        IndexSchema({a: (), b: (2,)})
        >>> chain.sample_matrix()
        array([[1., 2., 3.],
               [4., 5., 6.]])
    """
    schema = None
    buffer = None
    for line_number, line in enumerate(stream, start=1):

        # Decode if needed, then skip comments and blank lines
        if isinstance(line, bytes):
            line = _decode_line(line, line_number, header_seen=schema is not None)
        if _is_comment(line, comment_marker) or line.strip() == "":
            continue

        # The first remaining line is the header
        fields = _split_fields(line)
        if schema is None:
            if len(fields) < MIN_HEADER_FIELDS:
                raise MalformedHeader(
                    f"Fewer than {MIN_HEADER_FIELDS} fields in line."
                )
            schema = parse_schema([parse_variable_name(field) for field in fields])
            buffer = RowBuffer(schema.width)
            continue

        # Every other line is a draw
        buffer.append(_parse_row(fields, schema.width, line_number))

    if schema is None:
        raise MalformedHeader("No header line found.")
    if len(buffer) == 0:
        warnings.warn("No draws found after the header. Returning an empty chain.")

    return Chain(schema, buffer.finalize(), warmup=0, thinning=None, is_ordered=True)


def load_chain(filename: Union[str, os.PathLike]) -> Chain:
    """Read a single chain from a Stan CSV file.

    :param filename: Path to the file
    :type filename: Union[str, os.PathLike]

    :returns: Chain holding every data row of the file
    :rtype: Chain

    See :py:func:`read_chain` for the errors raised on malformed files.
    """
    with open(filename, "r", encoding="utf-8") as csv_file:
        return read_chain(csv_file)


def matching_files(prefix: str) -> list[tuple[int, str]]:
    """Find the per-chain files of a run.

    Files are matched if they are named ``<prefix><n>.csv`` where ``n`` is a
    positive integer. The prefix may include a directory.

    :param prefix: Path prefix shared by the files, e.g. ``"output/model_"``
    :type prefix: str

    :returns: ``(n, path)`` pairs sorted by ``n``
    :rtype: list[tuple[int, str]]

    Example:
        >>> matching_files("output/model_")
        [(1, 'output/model_1.csv'), (2, 'output/model_2.csv')]
    """
    # Glob broadly, then keep only files whose suffix is an integer
    id_re = re.compile(
        re.escape(os.path.basename(prefix)) + r"([0-9]+)" + re.escape(CSV_SUFFIX)
    )
    found = []
    for path in glob.glob(glob.escape(prefix) + "*" + CSV_SUFFIX):
        if (match_obj := id_re.fullmatch(os.path.basename(path))) is None:
            continue
        if (chain_id := int(match_obj.group(1))) > 0:
            found.append((chain_id, path))

    return sorted(found)


def load_chains(prefix: str, progress: bool = True) -> list[Chain]:
    """Read every per-chain file of a run.

    :param prefix: Path prefix shared by the files. See :py:func:`matching_files`.
    :type prefix: str
    :param progress: Whether to display a progress bar. Defaults to True.
    :type progress: bool

    :returns: Chains in the order of their ids
    :rtype: list[Chain]

    :raises FileNotFoundError: If no file matches the prefix
    """
    files = matching_files(prefix)
    if len(files) == 0:
        raise FileNotFoundError(
            f"No files named '{prefix}<n>{CSV_SUFFIX}' were found."
        )

    return [
        load_chain(filename)
        for _, filename in tqdm(files, desc="Reading chains", disable=not progress)
    ]
