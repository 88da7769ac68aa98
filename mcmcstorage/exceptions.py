# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Custom exception classes for the MCMCStorage package.

This module defines the hierarchy of exceptions raised while parsing sampler
output and while working with schemas and chains. All custom exceptions inherit
from the base MCMCStorageError class to allow for unified exception handling
when needed. Each exception additionally derives from the builtin exception
that best describes it (``ValueError`` for malformed input, ``LookupError`` for
failed lookups) so that generic handlers keep working.

None of these errors are retried internally. A reader that raises discards the
partially-read chain.
"""


class MCMCStorageError(Exception):
    """Base class for all exceptions in the MCMCStorage package.

    :param message: Error message describing the exception
    :type message: str

    Example:
        >>> try:
        ...     chain = read_chain(stream)
        ... except MCMCStorageError as e:
        ...     print(f"Could not read chain: {e}")
    """


class InvalidFormat(MCMCStorageError, ValueError):
    """Raised when a single column name does not follow the ``name`` or
    ``name.i1.i2...`` convention.

    :param message: Error message naming the offending token
    :type message: str
    """


class MalformedIndices(MCMCStorageError, ValueError):
    """Raised when the indices of a contiguous run of columns do not enumerate
    an array in column-major order.

    :param message: Error message describing the deviation
    :type message: str
    """


class MalformedHeader(MCMCStorageError, ValueError):
    """Raised when a header line cannot be turned into a schema.

    This covers headers with too few fields, variables whose columns are not
    contiguous, repeated scalar names, and runs rejected while collapsing
    dimensions.

    :param message: Error message describing the problem
    :type message: str
    """


class NumberFormatError(MCMCStorageError, ValueError):
    """Raised when a field of a data row cannot be parsed as a floating-point
    number.

    :param message: Error message naming the field
    :type message: str
    """


class RowWidthMismatch(MCMCStorageError, ValueError):
    """Raised when a data row has a different number of fields than the header.

    :param message: Error message describing the mismatch
    :type message: str
    """


class DimensionMismatch(MCMCStorageError, ValueError):
    """Raised when an array does not have the dimensions required by a schema.

    :param message: Error message describing the expected and observed shapes
    :type message: str
    """


class SchemaMismatch(MCMCStorageError, ValueError):
    """Raised when chains with different schemas are combined.

    :param message: Error message describing the mismatch
    :type message: str
    """


class UnknownVariable(MCMCStorageError, LookupError):
    """Raised when a variable name is not part of a schema.

    :param message: Error message naming the missing variable
    :type message: str
    """
