"""
Merkle tree implementation for vector commitments.

This module provides Merkle tree construction, membership and range proofs,
proof verification and in-place element updates.
"""

from merklevec.merkle.hashing import (
    EMPTY_ELEMENT,
    Hasher,
    HexSha256Hasher,
    Rfc6962Hasher,
    Sha256Hasher,
    available_hashers,
    get_hasher,
    next_power_of_two,
)
from merklevec.merkle.proof import (
    AggregatedMerkleProof,
    MerkleProof,
    verify_aggregated_proof,
    verify_proof,
)
from merklevec.merkle.tree import MerkleTree, MerkleTreeBuilder, Node, build

__all__ = [
    "EMPTY_ELEMENT",
    "Hasher",
    "HexSha256Hasher",
    "Rfc6962Hasher",
    "Sha256Hasher",
    "available_hashers",
    "get_hasher",
    "next_power_of_two",
    "AggregatedMerkleProof",
    "MerkleProof",
    "verify_aggregated_proof",
    "verify_proof",
    "MerkleTree",
    "MerkleTreeBuilder",
    "Node",
    "build",
]
