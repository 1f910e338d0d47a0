"""
Unit tests for exception hierarchy.
"""

import pytest
from merklevec.exceptions import (
    ConfigurationError,
    ConfigurationLoadError,
    EmptyInputError,
    IndexOutOfBoundsError,
    InvalidConfigurationError,
    InvalidRangeError,
    MerkleTreeError,
    MerklevecError,
    RangeTooSmallError,
)


class TestExceptionHierarchy:
    """Test that exception hierarchy is correctly defined."""

    def test_base_exception(self):
        """Test that MerklevecError is the base exception."""
        error = MerklevecError("test error")
        assert isinstance(error, Exception)
        assert str(error) == "test error"

    def test_tree_errors_inherit_from_base(self):
        """Test that tree errors inherit from MerkleTreeError."""
        assert issubclass(MerkleTreeError, MerklevecError)
        for error_cls in (EmptyInputError, IndexOutOfBoundsError, InvalidRangeError, RangeTooSmallError):
            assert issubclass(error_cls, MerkleTreeError)

    def test_tree_errors_map_to_builtins(self):
        """Tree errors can be caught as the matching builtin exception."""
        assert issubclass(EmptyInputError, ValueError)
        assert issubclass(IndexOutOfBoundsError, IndexError)
        assert issubclass(InvalidRangeError, ValueError)
        assert issubclass(RangeTooSmallError, ValueError)

    def test_configuration_errors_inherit_from_base(self):
        """Test that configuration errors inherit from ConfigurationError."""
        assert issubclass(ConfigurationError, MerklevecError)
        assert issubclass(InvalidConfigurationError, ConfigurationError)
        assert issubclass(ConfigurationLoadError, ConfigurationError)


class TestExceptionRaising:
    """Test that exceptions can be raised and caught."""

    def test_catch_specific_exception(self):
        with pytest.raises(RangeTooSmallError):
            raise RangeTooSmallError("range too small")

    def test_catch_base_exception(self):
        with pytest.raises(MerklevecError):
            raise IndexOutOfBoundsError("index out of bounds")

    def test_catch_tree_error(self):
        with pytest.raises(MerkleTreeError):
            raise EmptyInputError("no elements")

    def test_exception_with_message(self):
        message = "Invalid range [3, 1) for 8 leaves"
        with pytest.raises(InvalidRangeError, match=r"Invalid range \[3, 1\)"):
            raise InvalidRangeError(message)
