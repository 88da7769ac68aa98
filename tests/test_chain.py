"""Tests for chains: metadata, slicing and concatenation."""

import numpy as np
import pytest

from mcmcstorage.chains import Chain, ChainSlice, IndexSchema, concat
from mcmcstorage.exceptions import DimensionMismatch, SchemaMismatch, UnknownVariable


@pytest.fixture
def sample():
    """Ten iterations of a scalar ``a = i`` and a vector ``b = [2i, 3i]``."""
    iterations = np.arange(1, 11)
    return np.column_stack([iterations, 2 * iterations, 3 * iterations]).astype(float)


@pytest.fixture
def schema():
    return IndexSchema({"a": (), "b": (2,)})


@pytest.fixture
def chain(schema, sample):
    return Chain(schema, sample, warmup=3, is_ordered=True, thinning=2)


class TestChain:
    """Tests for Chain construction and accessors."""

    def test_metadata(self, chain, schema):
        assert chain.schema == schema
        assert chain.labels() == schema.labels()
        assert chain.warmup == 3
        assert chain.thinning == 2
        assert chain.is_ordered
        assert len(chain) == 7
        assert chain.num_draws(include_warmup=True) == 10

    def test_defaults(self, schema, sample):
        chain = Chain(schema, sample)
        assert chain.warmup == 0
        assert chain.thinning is None
        assert not chain.is_ordered

    def test_sample_matrix(self, chain, sample):
        """Warmup rows are only included on request."""
        np.testing.assert_array_equal(chain.sample_matrix(), sample[3:])
        np.testing.assert_array_equal(chain.sample_matrix(include_warmup=True), sample)

    def test_sample_matrix_is_read_only(self, chain, sample):
        """Neither the chain nor the caller's matrix can change the draws."""
        with pytest.raises(ValueError):
            chain.sample_matrix()[0, 0] = -1.0
        assert sample.flags.writeable

        sample[0, 0] = -1.0
        assert chain.sample_matrix(include_warmup=True)[0, 0] == 1.0

    def test_width_mismatch(self, sample):
        with pytest.raises(DimensionMismatch):
            Chain(IndexSchema({"a": (), "b": (3,)}), sample)

    def test_not_a_matrix(self, schema):
        with pytest.raises(DimensionMismatch):
            Chain(schema, np.zeros(3))

    @pytest.mark.parametrize("warmup", [-1, 11])
    def test_invalid_warmup(self, schema, sample, warmup):
        with pytest.raises(ValueError):
            Chain(schema, sample, warmup=warmup)

    def test_invalid_thinning(self, schema, sample):
        with pytest.raises(ValueError):
            Chain(schema, sample, thinning=0)

    def test_all_warmup(self, schema, sample):
        chain = Chain(schema, sample, warmup=10)
        assert len(chain) == 0
        assert list(chain[:, :]) == []


class TestSlicing:
    """Tests for slicing chains by iteration and variable."""

    def test_all_variables(self, chain):
        """Each post-warmup iteration is viewed as a record."""
        records = list(chain[:, :])
        assert len(records) == 7
        for i, record in zip(range(4, 11), records):
            assert record["a"] == i
            np.testing.assert_array_equal(record["b"], [2 * i, 3 * i])

    def test_scalar_variable(self, chain):
        assert list(chain[:, "a"]) == [float(i) for i in range(4, 11)]

    def test_array_variable(self, chain):
        values = list(chain[:, "b"])
        assert len(values) == 7
        for i, value in zip(range(4, 11), values):
            np.testing.assert_array_equal(value, [2 * i, 3 * i])

    def test_restartable(self, chain):
        """Slices can be iterated more than once."""
        values = chain.slice(variable="a")
        assert list(values) == list(values)
        assert isinstance(values, ChainSlice)

    def test_iteration_slice(self, chain):
        """Iterations are counted from the end of warmup."""
        assert list(chain[1:3, "a"]) == [5.0, 6.0]
        assert list(chain[::3, "a"]) == [4.0, 7.0, 10.0]

    def test_iteration_range(self, chain):
        assert list(chain.slice(range(2, 4), "a")) == [6.0, 7.0]
        assert list(chain.slice(range(0), "a")) == []

    def test_iteration_range_out_of_bounds(self, chain):
        with pytest.raises(IndexError):
            chain.slice(range(5, 8), "a")

    def test_sequence_access(self, chain):
        values = chain[:, "b"]
        assert len(values) == 7
        np.testing.assert_array_equal(values[-1], [20.0, 30.0])
        assert list(values[1:3].to_array()[:, 0]) == [10.0, 12.0]

    def test_to_array(self, chain, sample):
        stacked = chain[:, "b"].to_array()
        assert stacked.shape == (7, 2)
        np.testing.assert_array_equal(stacked, sample[3:, 1:])

    def test_to_array_requires_variable(self, chain):
        with pytest.raises(ValueError):
            chain[:, :].to_array()

    def test_unknown_variable(self, chain):
        with pytest.raises(UnknownVariable):
            chain[:, "c"]

    def test_partial_variable_slice(self, chain):
        with pytest.raises(TypeError):
            chain[:, 0:1]


class TestConcat:
    """Tests for concatenating chains."""

    def test_self_concatenation(self, chain, sample):
        """Post-warmup rows are stacked and warmup is reset."""
        combined = concat(chain, chain)
        np.testing.assert_array_equal(
            combined.sample_matrix(), np.vstack([sample[3:], sample[3:]])
        )
        assert len(combined) == 2 * len(chain)
        assert combined.warmup == 0
        assert not combined.is_ordered

    def test_unknown_thinning(self, schema, sample):
        chain = Chain(schema, sample, warmup=3)
        combined = concat(chain, chain)
        assert combined.thinning is None
        assert len(combined) == 14

    def test_agreeing_thinning(self, chain):
        """A thinning shared by every input is kept.

        Combining a chain with itself therefore keeps its thinning rather than
        making it unknown. Only disagreeing or unknown inputs give None.
        """
        assert concat(chain, chain).thinning == 2

    def test_partially_unknown_thinning(self, chain, schema, sample):
        other = Chain(schema, sample)
        assert concat(chain, other).thinning is None

    def test_conflicting_thinning(self, chain, schema, sample):
        other = Chain(schema, sample, thinning=5)
        with pytest.warns(UserWarning, match="thinning"):
            combined = concat(chain, other)
        assert combined.thinning is None

    def test_argument_order(self, schema, sample):
        first = Chain(schema, sample[:2])
        second = Chain(schema, sample[5:6])
        np.testing.assert_array_equal(
            concat(first, second).sample_matrix(), sample[[0, 1, 5]]
        )

    def test_is_ordered_override(self, chain):
        assert concat(chain, is_ordered=True).is_ordered

    def test_schema_mismatch(self, chain):
        other = Chain(IndexSchema({"a": (), "c": (2,)}), np.zeros((1, 3)))
        with pytest.raises(SchemaMismatch):
            concat(chain, other)

    def test_no_chains(self):
        with pytest.raises(ValueError):
            concat()
