"""Tests for parsing column names into variable names and indices."""

import pytest

from mcmcstorage.exceptions import InvalidFormat, MCMCStorageError
from mcmcstorage.stan_csv import parse_variable_name


class TestParseVariableName:
    """Tests for parse_variable_name."""

    def test_scalar(self):
        """Names without separators are scalars."""
        assert parse_variable_name("a") == ("a", ())

    def test_indices(self):
        """Dot-separated indices are parsed as integers."""
        assert parse_variable_name("kappa.1.3") == ("kappa", (1, 3))
        assert parse_variable_name("theta.10.2.7") == ("theta", (10, 2, 7))

    def test_double_underscore_suffix(self):
        """Trailing double underscores belong to the name."""
        assert parse_variable_name("stepsize__") == ("stepsize__", ())
        assert parse_variable_name("lp__") == ("lp__", ())

    @pytest.mark.parametrize("token", ["b.", "b.12.", "", ".1", "b..1"])
    def test_malformed_separators(self, token):
        """Empty names and empty index tokens are rejected."""
        with pytest.raises(InvalidFormat):
            parse_variable_name(token)

    @pytest.mark.parametrize("token", ["b.0", "b.x", "b.1.-2", "b.1a"])
    def test_non_positive_indices(self, token):
        """Indices must be positive integers."""
        with pytest.raises(InvalidFormat, match="positive integers"):
            parse_variable_name(token)

    def test_error_hierarchy(self):
        """Format errors can be caught generically."""
        with pytest.raises(MCMCStorageError):
            parse_variable_name("b.")
        with pytest.raises(ValueError):
            parse_variable_name("b.")
