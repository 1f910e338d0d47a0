"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklevec, a product of Garudex Labs

Hash strategies for Merkle tree construction.

A tree is built with one Hasher, which supplies the leaf-hash function
(applied to raw element bytes) and the node-hash function (applied to two
child digests). Three strategies ship with Merklevec:

- sha256: leaf = SHA-256(element), node = SHA-256(left || right)
- sha256-hex: as sha256, but node hashing concatenates the lowercase hex
  text of both digests; roots match trees that commit to hex strings
- rfc6962: leaf = SHA-256(0x00 || element), node = SHA-256(0x01 || left || right)

The sha256 strategies do not domain-separate leaf and node hashing, so a
64-byte element can collide with an internal node. Use rfc6962 where that
matters.
"""

import hashlib
from abc import ABC, abstractmethod
from typing import Dict, List, Type, Union

from merklevec.exceptions import InvalidConfigurationError

Element = Union[bytes, bytearray, memoryview, str]

# Padding element for leaf slots beyond the original element count
EMPTY_ELEMENT = b""

_WORD_BITS = 64


def to_bytes(element: Element) -> bytes:
    """
    Normalize an element to bytes.

    Args:
        element: Raw bytes, a bytes-like object, or a str (UTF-8 encoded)

    Returns:
        Element as immutable bytes

    Raises:
        TypeError: If element is not bytes-like or str
    """
    if isinstance(element, bytes):
        return element
    if isinstance(element, (bytearray, memoryview)):
        return bytes(element)
    if isinstance(element, str):
        return element.encode("utf-8")
    raise TypeError(
        f"Merkle elements must be bytes or str, got {type(element).__name__}"
    )


def next_power_of_two(n: int) -> int:
    """
    Return the smallest power of two >= n, or 1 when n <= 0.

    Smears the highest set bit of n - 1 into every lower position, then
    adds one.

    Args:
        n: Requested count

    Returns:
        Power of two
    """
    if n <= 0:
        return 1
    if n.bit_length() > _WORD_BITS:
        return 1 << (n - 1).bit_length()

    v = n - 1
    v |= v >> 1
    v |= v >> 2
    v |= v >> 4
    v |= v >> 8
    v |= v >> 16
    v |= v >> 32
    return v + 1


class Hasher(ABC):
    """
    Abstract base class for Merkle hash strategies.

    Implementations must be deterministic and return fixed-size digests.
    """

    name: str = ""
    digest_size: int = 32

    @abstractmethod
    def hash_leaf(self, element: bytes) -> bytes:
        """
        Hash one element into a leaf digest.

        Args:
            element: Raw element bytes

        Returns:
            Leaf digest
        """
        pass

    @abstractmethod
    def hash_node(self, left: bytes, right: bytes) -> bytes:
        """
        Hash two child digests into their parent digest.

        Args:
            left: Left child digest
            right: Right child digest

        Returns:
            Parent digest
        """
        pass

    def empty_leaf(self) -> bytes:
        """Digest used for padding leaves."""
        return self.hash_leaf(EMPTY_ELEMENT)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Sha256Hasher(Hasher):
    """SHA-256 over raw element bytes and raw concatenated child digests."""

    name = "sha256"

    def hash_leaf(self, element: bytes) -> bytes:
        return hashlib.sha256(element).digest()

    def hash_node(self, left: bytes, right: bytes) -> bytes:
        return hashlib.sha256(left + right).digest()


class HexSha256Hasher(Sha256Hasher):
    """SHA-256 where node hashing consumes the lowercase hex text of both children."""

    name = "sha256-hex"

    def hash_node(self, left: bytes, right: bytes) -> bytes:
        h = hashlib.sha256()
        h.update(left.hex().encode("ascii"))
        h.update(right.hex().encode("ascii"))
        return h.digest()


class Rfc6962Hasher(Hasher):
    """Certificate Transparency style hashing with 0x00 / 0x01 domain prefixes."""

    name = "rfc6962"

    LEAF_PREFIX = b"\x00"
    NODE_PREFIX = b"\x01"

    def hash_leaf(self, element: bytes) -> bytes:
        return hashlib.sha256(self.LEAF_PREFIX + element).digest()

    def hash_node(self, left: bytes, right: bytes) -> bytes:
        return hashlib.sha256(self.NODE_PREFIX + left + right).digest()


_HASHERS: Dict[str, Type[Hasher]] = {
    Sha256Hasher.name: Sha256Hasher,
    HexSha256Hasher.name: HexSha256Hasher,
    Rfc6962Hasher.name: Rfc6962Hasher,
}

DEFAULT_HASHER: Hasher = Sha256Hasher()


def available_hashers() -> List[str]:
    """Names accepted by get_hasher()."""
    return sorted(_HASHERS)


def get_hasher(name: str) -> Hasher:
    """
    Factory function to create a hash strategy by name.

    Args:
        name: Strategy name ("sha256", "sha256-hex" or "rfc6962")

    Returns:
        Hasher instance

    Raises:
        InvalidConfigurationError: If name is not a known strategy
    """
    key = (name or "").strip().lower()
    if key not in _HASHERS:
        raise InvalidConfigurationError(
            f"Invalid hash_algorithm: {name!r}, expected one of {available_hashers()}"
        )
    return _HASHERS[key]()
