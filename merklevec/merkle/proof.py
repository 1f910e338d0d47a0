"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklevec, a product of Garudex Labs

Merkle proof types and verification.

A proof is the list of sibling digests met on the walk from a leaf to the
root, together with one direction flag per sibling:

- True: the sibling is the left operand, parent = H(sibling, current)
- False: the sibling is the right operand, parent = H(current, sibling)

Verification never raises. Any mismatch, malformed proof or out-of-range
aggregated bounds yields False.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence, Tuple

from merklevec.logging_config import get_logger, log_proof_verification
from merklevec.merkle.hashing import DEFAULT_HASHER, Hasher

if TYPE_CHECKING:
    from merklevec.merkle.tree import MerkleTree

logger = get_logger(__name__)


def _decode_hashes(values: Any, name: str) -> Tuple[bytes, ...]:
    if not isinstance(values, (list, tuple)):
        raise ValueError(f"'{name}' must be a list of hex strings")
    return tuple(bytes.fromhex(v) for v in values)


def _decode_directions(values: Any) -> Tuple[bool, ...]:
    if not isinstance(values, (list, tuple)) or not all(isinstance(v, bool) for v in values):
        raise ValueError("'directions' must be a list of booleans")
    return tuple(values)


@dataclass(frozen=True)
class MerkleProof:
    """
    Proof that a single element is included in a Merkle tree.

    Attributes:
        element_hash: Leaf digest of the proven element
        siblings: Sibling digests from leaf to root
        directions: One flag per sibling, True when the sibling is the left child
    """
    element_hash: bytes
    siblings: Tuple[bytes, ...] = field(default_factory=tuple)
    directions: Tuple[bool, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Hex-encoded dictionary form of the proof."""
        return {
            "element_hash": self.element_hash.hex(),
            "siblings": [s.hex() for s in self.siblings],
            "directions": list(self.directions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MerkleProof":
        """
        Rebuild a proof from its dictionary form.

        Raises:
            ValueError: If a field is missing or badly encoded
        """
        try:
            return cls(
                element_hash=bytes.fromhex(data["element_hash"]),
                siblings=_decode_hashes(data["siblings"], "siblings"),
                directions=_decode_directions(data["directions"]),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed Merkle proof: {e}") from e


@dataclass(frozen=True)
class AggregatedMerkleProof:
    """
    Proof for the contiguous element range [start, end).

    Only the path of the leaf at ``start`` is carried, so verification needs
    the tree to recover that leaf's digest and says nothing about the other
    leaves of the range.

    Attributes:
        start: First index of the range (inclusive)
        end: End of the range (exclusive)
        siblings: Sibling digests along the start leaf's path
        directions: One flag per sibling, True when the sibling is the left child
    """
    start: int
    end: int
    siblings: Tuple[bytes, ...] = field(default_factory=tuple)
    directions: Tuple[bool, ...] = field(default_factory=tuple)

    @property
    def width(self) -> int:
        """Number of elements in the range."""
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        """Hex-encoded dictionary form of the proof."""
        return {
            "start": self.start,
            "end": self.end,
            "siblings": [s.hex() for s in self.siblings],
            "directions": list(self.directions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AggregatedMerkleProof":
        """
        Rebuild an aggregated proof from its dictionary form.

        Raises:
            ValueError: If a field is missing or badly encoded
        """
        try:
            start, end = data["start"], data["end"]
            if isinstance(start, bool) or isinstance(end, bool) or \
                    not isinstance(start, int) or not isinstance(end, int):
                raise ValueError("'start' and 'end' must be integers")
            return cls(
                start=start,
                end=end,
                siblings=_decode_hashes(data["siblings"], "siblings"),
                directions=_decode_directions(data["directions"]),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed aggregated Merkle proof: {e}") from e


def fold_path(
    hasher: Hasher,
    current: bytes,
    siblings: Sequence[bytes],
    directions: Sequence[bool],
) -> Optional[bytes]:
    """
    Recompute a root by replaying a sibling/direction path.

    Args:
        hasher: Hash strategy used by the tree
        current: Starting leaf digest
        siblings: Sibling digests from leaf to root
        directions: Direction flags matching siblings

    Returns:
        Recomputed root, or None if the path is malformed
    """
    if not isinstance(siblings, (list, tuple)) or not isinstance(directions, (list, tuple)):
        return None
    if len(siblings) != len(directions):
        return None

    for sibling, direction in zip(siblings, directions):
        if not isinstance(sibling, (bytes, bytearray)):
            return None
        if direction:
            current = hasher.hash_node(bytes(sibling), current)
        else:
            current = hasher.hash_node(current, bytes(sibling))

    return current


def verify_proof(root: bytes, proof: MerkleProof, hasher: Optional[Hasher] = None) -> bool:
    """
    Verify a single-element Merkle proof against a known root.

    Pure function: needs only the root and the proof, plus the hash strategy
    the tree was built with (SHA-256 by default).

    Args:
        root: Expected root digest
        proof: Proof to verify
        hasher: Hash strategy, defaults to Sha256Hasher

    Returns:
        True if the proof recomputes to root, False otherwise
    """
    hasher = hasher or DEFAULT_HASHER

    if not isinstance(proof, MerkleProof) or not isinstance(proof.element_hash, (bytes, bytearray)):
        log_proof_verification(logger, "single", False, failure_reason="malformed_proof")
        return False

    computed = fold_path(hasher, bytes(proof.element_hash), proof.siblings, proof.directions)
    if computed is None:
        log_proof_verification(logger, "single", False, failure_reason="malformed_path")
        return False

    if computed != root:
        log_proof_verification(logger, "single", False, failure_reason="root_mismatch")
        return False

    log_proof_verification(logger, "single", True, depth=len(proof.siblings))
    return True


def verify_aggregated_proof(
    root: bytes,
    proof: AggregatedMerkleProof,
    tree: "MerkleTree",
) -> bool:
    """
    Verify an aggregated (range) proof against a known root.

    The starting digest is read from ``tree`` at ``proof.start`` and the
    sibling path is replayed with the tree's hash strategy. The bounds are
    re-checked against the tree's leaf count.

    Args:
        root: Expected root digest
        proof: Aggregated proof to verify
        tree: Tree the proof was generated from

    Returns:
        True if the start leaf's path recomputes to root, False otherwise
    """
    if not isinstance(proof, AggregatedMerkleProof):
        log_proof_verification(logger, "aggregated", False, failure_reason="malformed_proof")
        return False

    from merklevec.merkle.tree import MerkleTree  # Lazy import to avoid circular dependency

    if not isinstance(tree, MerkleTree):
        log_proof_verification(logger, "aggregated", False, failure_reason="malformed_tree")
        return False

    start, end = proof.start, proof.end
    if isinstance(start, bool) or isinstance(end, bool) or \
            not isinstance(start, int) or not isinstance(end, int) or \
            start < 0 or start >= end or end > tree.leaf_count:
        log_proof_verification(
            logger, "aggregated", False,
            failure_reason="range_out_of_bounds", start=start, end=end,
        )
        return False

    computed = fold_path(tree.hasher, tree.leaf_hash(start), proof.siblings, proof.directions)
    if computed is None:
        log_proof_verification(logger, "aggregated", False, failure_reason="malformed_path")
        return False

    if computed != root:
        log_proof_verification(
            logger, "aggregated", False,
            failure_reason="root_mismatch", start=start, end=end,
        )
        return False

    log_proof_verification(logger, "aggregated", True, start=start, end=end)
    return True
