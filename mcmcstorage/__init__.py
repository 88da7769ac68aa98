# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
MCMCStorage: Structured, named storage for MCMC sampler output.

MCMCStorage reads the flat, column-oriented CSV files written by Stan (and
samplers following the same naming convention) and turns them into chains of
named, multi-dimensional draws backed by NumPy arrays. Array-valued variables
are recognized purely from their column names (``name.i1.i2...``) and reshaped
following the column-major layout used by the sampler.

Key Features:
    - Inference of variable shapes from flattened column names
    - Zero-copy views of individual variables or whole draws
    - Slicing chains by variable name and by iteration range
    - Streaming, comment-tolerant CSV reader with strict validation
    - Type-safe interfaces with runtime type checking

Global Variables:
    __version__: Package version string

Example:
    >>> import mcmcstorage as mcs
    >>> chain = mcs.stan_csv.load_chain("output_1.csv")
    >>> chain.schema["theta"]
    Array(dims=(2, 3))
    >>> thetas = chain.slice(variable="theta").to_array()
"""

from typeguard import install_import_hook

# Define the version
__version__ = "0.1.0"

# Set up type checking
install_import_hook("mcmcstorage")

# Import objects that should be easily accessible from the package level
# pylint: disable=wrong-import-position
from mcmcstorage import utils

from mcmcstorage.chains import Array, Chain, IndexSchema, Scalar, concat

# Lazy imports to keep the package import light
stan_csv = utils.lazy_import("mcmcstorage.stan_csv")
