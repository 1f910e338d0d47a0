"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklevec, a product of Garudex Labs

Merkle tree implementation for vector commitments.

This module implements a balanced binary Merkle tree over an ordered list of
elements. It supports:
- Tree construction, padding the leaf level to the next power of two
- Merkle proof generation for any leaf
- Start-anchored proofs for contiguous element ranges
- In-place element updates that rehash only the leaf-to-root path
- Parallel leaf hashing for large inputs
- Builder pattern for convenient tree construction

Nodes live in a flat arena (``MerkleTree.nodes``). Children and parents are
stored as arena indices: leaves occupy slots ``0..leaf_count - 1`` and the
root is the last slot.

Trees are not thread-safe. ``update_element`` rewrites hashes in place, so
callers must not run it concurrently with any other operation on the same
tree.
"""

import concurrent.futures
import time
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from merklevec.config.settings import MerkleConfig
from merklevec.exceptions import (
    EmptyInputError,
    IndexOutOfBoundsError,
    InvalidRangeError,
    RangeTooSmallError,
)
from merklevec.logging_config import (
    correlation_scope,
    get_logger,
    log_element_update,
    log_tree_build,
)
from merklevec.merkle.hashing import (
    Element,
    Hasher,
    get_hasher,
    next_power_of_two,
    to_bytes,
)
from merklevec.merkle.proof import AggregatedMerkleProof, MerkleProof

logger = get_logger(__name__)


@dataclass
class Node:
    """
    One position in the tree.

    Attributes:
        hash: Digest of this node
        left: Arena index of the left child (None for leaves)
        right: Arena index of the right child (None for leaves)
        parent: Arena index of the parent (None for the root)
    """
    hash: bytes
    left: Optional[int] = None
    right: Optional[int] = None
    parent: Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


def _check_int(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


class MerkleTree:
    """
    Binary Merkle tree with power-of-two leaf count.

    Leaves beyond the supplied elements are padding leaves holding the hash
    of the empty element. Every internal node holds
    ``hasher.hash_node(left.hash, right.hash)``, including right after an
    update.

    Example:
        >>> from merklevec.merkle.proof import verify_proof
        >>> tree = MerkleTree([b"some", b"test", b"elements"])
        >>> proof = tree.get_proof(1)
        >>> verify_proof(tree.root(), proof)
        True
    """

    def __init__(
        self,
        elements: Sequence[Element],
        hasher: Optional[Hasher] = None,
        config: Optional[MerkleConfig] = None,
    ):
        """
        Build Merkle tree from element data.

        Args:
            elements: Ordered element data (bytes, or str encoded as UTF-8)
            hasher: Hash strategy; defaults to the one named in config
            config: Merkle configuration (defaults to MerkleConfig())

        Raises:
            EmptyInputError: If elements is empty
            TypeError: If an element is not bytes-like or str
        """
        payloads = [to_bytes(element) for element in elements]
        if not payloads:
            raise EmptyInputError("Cannot create Merkle tree from empty element list")

        self.config = config or MerkleConfig()
        self.hasher = hasher or get_hasher(self.config.hash_algorithm)

        started = time.perf_counter()

        self.element_count = len(payloads)
        self.leaf_count = next_power_of_two(self.element_count)
        self.use_parallel = (
            self.config.use_parallel
            and self.element_count >= self.config.parallel_threshold
        )

        with correlation_scope():
            self.nodes: List[Node] = self._build_nodes(payloads)
            self.root_index = len(self.nodes) - 1

            log_tree_build(
                logger,
                element_count=self.element_count,
                leaf_count=self.leaf_count,
                root=self.root_hex(),
                hash_algorithm=self.hasher.name,
                duration_ms=(time.perf_counter() - started) * 1000,
                parallel=self.use_parallel,
            )

    def _hash_leaves(self, payloads: List[bytes]) -> List[bytes]:
        """
        Hash leaf payloads, in parallel for large inputs.

        Args:
            payloads: Element bytes

        Returns:
            Leaf digests in input order
        """
        if self.use_parallel:
            with concurrent.futures.ThreadPoolExecutor(
                max_workers=self.config.max_workers
            ) as executor:
                return list(executor.map(self.hasher.hash_leaf, payloads))
        return [self.hasher.hash_leaf(payload) for payload in payloads]

    def _build_nodes(self, payloads: List[bytes]) -> List[Node]:
        """
        Build the node arena bottom-up.

        Leaf level is padded to leaf_count with empty-element leaves, then
        adjacent pairs are combined left to right until one node remains.

        Returns:
            Arena of 2 * leaf_count - 1 nodes, root last
        """
        leaf_hashes = self._hash_leaves(payloads)
        padding = self.leaf_count - len(leaf_hashes)
        if padding:
            leaf_hashes.extend([self.hasher.empty_leaf()] * padding)

        nodes = [Node(hash=leaf_hash) for leaf_hash in leaf_hashes]
        level = list(range(self.leaf_count))

        while len(level) > 1:
            next_level = []
            for i in range(0, len(level), 2):
                left, right = level[i], level[i + 1]
                parent = len(nodes)
                nodes.append(Node(
                    hash=self.hasher.hash_node(nodes[left].hash, nodes[right].hash),
                    left=left,
                    right=right,
                ))
                nodes[left].parent = parent
                nodes[right].parent = parent
                next_level.append(parent)
            level = next_level

        return nodes

    def __len__(self) -> int:
        return self.leaf_count

    def __repr__(self) -> str:
        return (
            f"MerkleTree(elements={self.element_count}, leaves={self.leaf_count}, "
            f"hasher={self.hasher.name!r}, root={self.root_hex()})"
        )

    @property
    def height(self) -> int:
        """Number of edges between a leaf and the root."""
        return self.leaf_count.bit_length() - 1

    @property
    def min_aggregated_range(self) -> int:
        return self.config.min_aggregated_range

    @property
    def leaves(self) -> List[bytes]:
        """
        Snapshot of leaf digests in index order, padding leaves included.

        Builds a new list on every access and does not follow later
        updates. Use ``leaf_hash(index)`` for single lookups.
        """
        return [node.hash for node in self.nodes[:self.leaf_count]]

    def root(self) -> bytes:
        """
        Get the Merkle root hash.

        Returns:
            Root digest
        """
        return self.nodes[self.root_index].hash

    get_root = root

    def root_hex(self) -> str:
        """Root digest as lowercase hex."""
        return self.root().hex()

    def _check_index(self, index: int) -> None:
        _check_int(index, "index")
        if index < 0 or index >= self.leaf_count:
            raise IndexOutOfBoundsError(
                f"Leaf index {index} out of range [0, {self.leaf_count})"
            )

    def leaf_hash(self, index: int) -> bytes:
        """
        Get the digest stored at a leaf.

        Raises:
            IndexOutOfBoundsError: If index is outside [0, leaf_count)
        """
        self._check_index(index)
        return self.nodes[index].hash

    def _walk_to_root(self, node_index: int) -> Iterator[Tuple[bytes, bool]]:
        """
        Walk parent links from a node up to the root.

        Yields one ``(sibling_hash, direction)`` pair per level, leaf to root.
        Direction is True when the sibling is the left child. The walk stops
        on index identity with the root, never on hash equality.
        """
        nodes = self.nodes
        current = node_index
        while current != self.root_index:
            parent_index = nodes[current].parent
            parent = nodes[parent_index]
            if parent.left == current:
                yield nodes[parent.right].hash, False
            else:
                yield nodes[parent.left].hash, True
            current = parent_index

    def _collect_path(self, node_index: int) -> Tuple[Tuple[bytes, ...], Tuple[bool, ...]]:
        siblings = []
        directions = []
        for sibling_hash, direction in self._walk_to_root(node_index):
            siblings.append(sibling_hash)
            directions.append(direction)
        return tuple(siblings), tuple(directions)

    def get_proof(self, index: int) -> MerkleProof:
        """
        Generate Merkle proof for the leaf at the given index.

        Example, proof for index 2 (``h``) collects the ``*`` nodes:

            d0:              [ R ]
            d1:      [ * ]           [   ]
            d2:   [   ]   [ * ]   [   ]   [   ]
            d3:  [ ] [ ] [h] [*] [ ] [ ] [ ] [ ]

        gives siblings (d3-3, d2-0, d1-1) and directions (False, True, False).

        Args:
            index: Leaf index (0-based); padding leaves are addressable

        Returns:
            MerkleProof with the leaf digest and its sibling path

        Raises:
            IndexOutOfBoundsError: If index is outside [0, leaf_count)
        """
        self._check_index(index)

        siblings, directions = self._collect_path(index)
        return MerkleProof(
            element_hash=self.nodes[index].hash,
            siblings=siblings,
            directions=directions,
        )

    generate_proof = get_proof

    def get_aggregated_proof(self, start: int, end: int) -> AggregatedMerkleProof:
        """
        Generate a proof for the element range [start, end).

        Only the path of the leaf at ``start`` is recorded.

        Args:
            start: First index of the range (inclusive)
            end: End of the range (exclusive)

        Returns:
            AggregatedMerkleProof anchored at start

        Raises:
            InvalidRangeError: If start >= end, start < 0 or end > leaf_count
            RangeTooSmallError: If end - start < min_aggregated_range
        """
        _check_int(start, "start")
        _check_int(end, "end")

        if start < 0 or start >= end or end > self.leaf_count:
            raise InvalidRangeError(
                f"Invalid range [{start}, {end}) for {self.leaf_count} leaves"
            )

        if end - start < self.min_aggregated_range:
            raise RangeTooSmallError(
                f"Range [{start}, {end}) spans {end - start} element(s), "
                f"an aggregated proof needs at least {self.min_aggregated_range}"
            )

        siblings, directions = self._collect_path(start)
        return AggregatedMerkleProof(
            start=start,
            end=end,
            siblings=siblings,
            directions=directions,
        )

    def update_element(self, index: int, element: Element) -> None:
        """
        Replace the element at index and rehash its path to the root.

        The leaf node is kept, only its hash changes. Sibling subtrees are
        not touched.

        Args:
            index: Leaf index (0-based); padding leaves are addressable
            element: New element data

        Raises:
            IndexOutOfBoundsError: If index is outside [0, leaf_count)
            TypeError: If element is not bytes-like or str
        """
        self._check_index(index)
        payload = to_bytes(element)
        old_root = self.root_hex()

        nodes = self.nodes
        with correlation_scope():
            nodes[index].hash = self.hasher.hash_leaf(payload)

            current = index
            while current != self.root_index:
                parent_index = nodes[current].parent
                parent = nodes[parent_index]
                parent.hash = self.hasher.hash_node(nodes[parent.left].hash, nodes[parent.right].hash)
                current = parent_index

            log_element_update(logger, index=index, old_root=old_root, new_root=self.root_hex())


class MerkleTreeBuilder:
    """
    Builder class for constructing Merkle trees from element batches.

    Example:
        >>> builder = MerkleTreeBuilder()
        >>> root = builder.build_tree([b"a", b"b", b"c"]).get_root()
        >>> proof = builder.get_proof(1)
    """

    def __init__(self, hasher: Optional[Hasher] = None, config: Optional[MerkleConfig] = None):
        """
        Initialize the Merkle tree builder.

        Args:
            hasher: Hash strategy passed to every built tree
            config: Merkle configuration passed to every built tree
        """
        self.hasher = hasher
        self.config = config
        self._tree: Optional[MerkleTree] = None

    @property
    def tree(self) -> MerkleTree:
        if self._tree is None:
            raise RuntimeError("Tree has not been built yet. Call build_tree() first.")
        return self._tree

    def build(self, elements: Sequence[Element]) -> MerkleTree:
        """
        Build and return a tree from elements.

        Raises:
            EmptyInputError: If elements is empty
        """
        self._tree = MerkleTree(elements, hasher=self.hasher, config=self.config)
        return self._tree

    def build_tree(self, elements: Sequence[Element]) -> 'MerkleTreeBuilder':
        """
        Build Merkle tree from an element batch.

        Returns:
            Self for method chaining
        """
        self.build(elements)
        return self

    def get_root(self) -> bytes:
        """
        Get the Merkle root hash.

        Raises:
            RuntimeError: If tree has not been built yet
        """
        return self.tree.root()

    def get_proof(self, index: int) -> MerkleProof:
        """
        Generate Merkle proof for the element at index.

        Raises:
            RuntimeError: If tree has not been built yet
            IndexOutOfBoundsError: If index is out of range
        """
        return self.tree.get_proof(index)


def build(
    elements: Sequence[Element],
    hasher: Optional[Hasher] = None,
    config: Optional[MerkleConfig] = None,
) -> MerkleTree:
    """
    Build a Merkle tree from an ordered, non-empty element sequence.

    Args:
        elements: Ordered element data
        hasher: Hash strategy; defaults to the one named in config (sha256)
        config: Merkle configuration

    Returns:
        MerkleTree

    Raises:
        EmptyInputError: If elements is empty
    """
    return MerkleTreeBuilder(hasher=hasher, config=config).build(elements)
