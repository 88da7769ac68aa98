# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Schemas and chains of named MCMC draws.

This submodule holds the in-memory representation of sampler output:

    1. :py:class:`~mcmcstorage.chains.schema.IndexSchema`, an ordered mapping
       from variable names to shapes that defines the flat column layout of a
       draw and provides reshaped views of rows and matrices.
    2. :py:class:`~mcmcstorage.chains.chain.Chain`, which pairs a schema with a
       sample matrix and the warmup, thinning and ordering metadata of a run.

Chains are typically built by :py:func:`mcmcstorage.stan_csv.read_chain`, but can
also be constructed directly:

    >>> import numpy as np
    >>> from mcmcstorage.chains import Chain, IndexSchema, concat
    >>>
    >>> schema = IndexSchema({"mu": (), "theta": (2, 3)})
    >>> chain = Chain(schema, np.zeros((100, 7)), warmup=50, thinning=1)
    >>> theta = chain.slice(variable="theta").to_array()  # shape (50, 2, 3)
    >>> both = concat(chain, chain)
"""

from mcmcstorage.chains.schema import Array, IndexSchema, Scalar, VariableShape
from mcmcstorage.chains.chain import Chain, ChainSlice, concat
