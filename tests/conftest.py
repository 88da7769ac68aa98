"""
Pytest Configuration and Fixtures for MCMCStorage
=================================================

Shared fixtures and helpers for building schemas, parsed headers and Stan CSV
contents.
"""

import numpy as np
import pytest

from mcmcstorage.utils import column_major_indices


def make_parsed_header(named_dims):
    """Generate the parsed ``(name, index)`` pairs of a header describing
    ``named_dims``, in column order."""
    return [
        (name, index)
        for name, dims in named_dims.items()
        for index in column_major_indices(dims)
    ]


def stan_csv_contents(rng, n_draws=10):
    """Stan CSV text for variables ``a``, ``b[2]`` and ``c[2, 2]``, with comments
    at random places and irregular whitespace around fields.

    Draw ``i`` (1-based) holds ``a = i``, ``b = [i + 1, i + 2]`` and
    ``c = (i + 4) + [[1, 3], [2, 4]]``.
    """
    lines = ["# comment"] * int(rng.integers(1, 6))
    lines.append("a, b.1, b.2, c.1.1, c.2.1, c.1.2, c.2.2")
    lines.extend(["# comment"] * int(rng.integers(1, 4)))
    for i in range(1, n_draws + 1):
        f = float(i)
        fields = [f"{f}, {f + 1} ,{f + 2}"] + [str(i + j + 4.0) for j in range(1, 5)]
        lines.append(",".join(fields))
        if rng.random() < 0.5:
            lines.append("  # comment")
    lines.extend(["# comment"] * int(rng.integers(1, 5)))
    return "\n".join(lines) + "\n"


@pytest.fixture
def rng():
    """Seeded random number generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def layout_schema_dims():
    """Named dimensions with a scalar, a matrix, and a 3-D array."""
    return {"a": (), "b": (1, 2), "c": (2, 3, 4)}
