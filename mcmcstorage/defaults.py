# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Default configuration values for MCMCStorage package components.

This module centralizes default values used when parsing sampler output and
building chains, including the syntax of the CSV files, buffering behavior
of the streaming reader, and the naming convention of per-chain output files.

The module is organized into logical groups covering:
    - CSV syntax (comments, delimiters, column names)
    - Header validation
    - Streaming buffer sizes and sample precision
    - Output file naming conventions

Default values cannot be programmatically altered. This documentation serves as a
reference for users and developers to understand the standard configuration used
by MCMCStorage.
"""

import numpy as np

# CSV syntax
DEFAULT_COMMENT_MARKER: str = "#"
"""Marker identifying comment lines.

A line is a comment when its first non-whitespace character is this marker.
Comment lines may appear before the header, between data rows, or at the end
of the file.

:type: str
"""

DEFAULT_DELIMITER: str = ","
"""Field delimiter of header and data lines.

:type: str
"""

DIMENSION_SEPARATOR: str = "."
"""Separator between a variable name and its indices in column names,
e.g. ``kappa.1.3``.

:type: str
"""

# Header validation
MIN_HEADER_FIELDS: int = 2
"""Minimum number of fields a header line must contain.

This is a fixed threshold and is not derived from the width of the schema
described by the header. Files with a single column are rejected.

:type: int
"""

# Streaming
DEFAULT_INITIAL_ROW_CAPACITY: int = 64
"""Number of rows preallocated by the streaming row buffer. The buffer doubles
its capacity whenever it is full.

:type: int
"""

SAMPLE_DTYPE: type = np.float64
"""Data type of the sample matrices built from CSV files.

Values are always parsed as floats, including integer-valued sampler outputs
such as ``treedepth__``.

:type: type
"""

# File naming
CSV_SUFFIX: str = ".csv"
"""Suffix of per-chain output files. Files are expected to be named
``<prefix><chain id><suffix>``.

:type: str
"""
