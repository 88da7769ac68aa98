# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Reading Stan CSV output into chains.

This submodule turns the CSV files written by Stan into
:py:class:`~mcmcstorage.chains.Chain` objects. It is organized bottom-up:

    1. :py:func:`~mcmcstorage.stan_csv.variable_names.parse_variable_name`
       splits one column name into a variable name and its indices.
    2. :py:func:`~mcmcstorage.stan_csv.schema_parsing.collapse_contiguous_dimensions`
       infers the shape of one array from its contiguous block of columns, and
       :py:func:`~mcmcstorage.stan_csv.schema_parsing.parse_schema` assembles the
       schema of a whole header.
    3. :py:func:`~mcmcstorage.stan_csv.reader.read_chain` streams a file, building
       the schema from its header and the sample matrix from its data rows.

Typical use only needs the reader functions:

    >>> from mcmcstorage import stan_csv
    >>> chain = stan_csv.load_chain("output_1.csv")
    >>> chains = stan_csv.load_chains("output_")  # output_1.csv, output_2.csv, ...
"""

from mcmcstorage.stan_csv.variable_names import parse_variable_name
from mcmcstorage.stan_csv.schema_parsing import (
    collapse_contiguous_dimensions,
    parse_schema,
)
from mcmcstorage.stan_csv.reader import (
    RowBuffer,
    load_chain,
    load_chains,
    matching_files,
    read_chain,
)
