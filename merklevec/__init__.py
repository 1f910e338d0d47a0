"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklevec, a product of Garudex Labs

Merklevec - Binary Merkle tree vector commitments.

Merklevec builds a balanced binary Merkle tree over an ordered list of
elements and provides membership proofs, start-anchored range proofs and
in-place element updates.
"""

from merklevec._version import __version__
from merklevec.merkle import (
    AggregatedMerkleProof,
    MerkleProof,
    MerkleTree,
    MerkleTreeBuilder,
    build,
    verify_aggregated_proof,
    verify_proof,
)

__all__ = [
    "__version__",
    "AggregatedMerkleProof",
    "MerkleProof",
    "MerkleTree",
    "MerkleTreeBuilder",
    "build",
    "verify_aggregated_proof",
    "verify_proof",
]
