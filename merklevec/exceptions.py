"""
Exception hierarchy for Merklevec.

All custom exceptions inherit from MerklevecError base class.
"""


class MerklevecError(Exception):
    """Base exception for all Merklevec errors."""
    pass


# Tree Errors
class MerkleTreeError(MerklevecError):
    """Base exception for Merkle tree operation errors."""
    pass


class EmptyInputError(MerkleTreeError, ValueError):
    """Raised when a tree is built from an empty element sequence."""
    pass


class IndexOutOfBoundsError(MerkleTreeError, IndexError):
    """Raised when a leaf index is outside the tree's leaf range."""
    pass


class InvalidRangeError(MerkleTreeError, ValueError):
    """Raised when an element range is reversed, empty or exceeds the leaf count."""
    pass


class RangeTooSmallError(MerkleTreeError, ValueError):
    """Raised when an element range is narrower than the configured minimum width."""
    pass


# Configuration Errors
class ConfigurationError(MerklevecError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass


class ConfigurationLoadError(ConfigurationError):
    """Raised when loading configuration fails."""
    pass
