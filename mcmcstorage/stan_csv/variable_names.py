# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Parsing of column names in sampler output.

Columns are named ``name`` for scalars and ``name.i1.i2...`` for elements of
arrays, where the indices are 1-based. Sampler diagnostics such as ``lp__`` or
``stepsize__`` end in a double underscore; the underscores are part of the name.
"""

from __future__ import annotations

import re

from typing import TYPE_CHECKING

from mcmcstorage.defaults import DIMENSION_SEPARATOR
from mcmcstorage.exceptions import InvalidFormat

if TYPE_CHECKING:
    from mcmcstorage import custom_types

# Indices are runs of ASCII digits
_INDEX_RE = re.compile(r"[0-9]+")


def parse_variable_name(token: str) -> custom_types.ParsedName:
    """Split a column name into the variable name and its indices.

    :param token: Column name, without surrounding whitespace
    :type token: str

    :returns: The variable name and a tuple of 1-based indices, which is empty
        for scalars
    :rtype: custom_types.ParsedName

    :raises InvalidFormat: If the token is empty, has an empty variable name, ends
        with a separator, or has an index that is not a positive integer

    Example:
        >>> parse_variable_name("kappa.1.3")
        ('kappa', (1, 3))
        >>> parse_variable_name("stepsize__")
        ('stepsize__', ())
    """
    # The name is everything up to the first separator
    name, *index_tokens = token.split(DIMENSION_SEPARATOR)
    if name == "":
        raise InvalidFormat(f"Missing variable name in column {token!r}.")

    # Every remaining token must be a positive integer. An empty token means
    # repeated or trailing separators.
    indices = []
    for index_token in index_tokens:
        if not _INDEX_RE.fullmatch(index_token) or int(index_token) < 1:
            raise InvalidFormat(
                f"Invalid index {index_token!r} in column {token!r}. Indices must "
                "be positive integers."
            )
        indices.append(int(index_token))

    return name, tuple(indices)
