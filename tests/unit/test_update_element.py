"""
Unit tests for in-place element updates.
"""

import hashlib

import pytest

from merklevec.exceptions import IndexOutOfBoundsError
from merklevec.merkle.hashing import Rfc6962Hasher
from merklevec.merkle.proof import verify_proof
from merklevec.merkle.tree import build


def h_leaf(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


class TestUpdateElement:
    """Test update_element."""

    def test_update_changes_root_and_proof(self):
        tree = build([b"some", b"test", b"elements"])
        old_root = tree.root()

        tree.update_element(1, b"updated")
        proof = tree.get_proof(1)

        assert proof.element_hash == h_leaf(b"updated")
        assert verify_proof(tree.root(), proof)
        assert tree.root() != old_root

    def test_update_matches_fresh_build(self, sample_elements):
        tree = build(sample_elements)
        tree.update_element(4, b"replacement")

        expected = list(sample_elements)
        expected[4] = b"replacement"
        assert tree.root() == build(expected).root()

    def test_all_proofs_valid_after_update(self, sample_elements):
        tree = build(sample_elements)
        tree.update_element(0, b"first")
        tree.update_element(6, b"last")

        for index in range(tree.leaf_count):
            assert verify_proof(tree.root(), tree.get_proof(index))

    def test_old_proofs_fail_after_update(self, sample_elements):
        tree = build(sample_elements)
        old_proof = tree.get_proof(0)

        tree.update_element(3, b"changed")

        assert not verify_proof(tree.root(), old_proof)

    def test_same_value_keeps_root(self, sample_elements):
        tree = build(sample_elements)
        old_root = tree.root()

        tree.update_element(2, sample_elements[2])

        assert tree.root() == old_root

    def test_update_back_restores_root(self, sample_elements):
        tree = build(sample_elements)
        old_root = tree.root()

        tree.update_element(2, b"temporary")
        tree.update_element(2, sample_elements[2])

        assert tree.root() == old_root

    def test_leaf_node_identity_is_kept(self, sample_elements):
        tree = build(sample_elements)
        leaf_node = tree.nodes[3]
        node_count = len(tree.nodes)

        tree.update_element(3, b"new")

        assert tree.nodes[3] is leaf_node
        assert leaf_node.hash == h_leaf(b"new")
        assert len(tree.nodes) == node_count

    def test_only_path_nodes_change(self):
        tree = build([f"leaf{i}".encode() for i in range(8)])
        before = [node.hash for node in tree.nodes]

        tree.update_element(5, b"changed")

        path = {5}
        current = 5
        while current != tree.root_index:
            current = tree.nodes[current].parent
            path.add(current)

        for index, node in enumerate(tree.nodes):
            if index in path:
                assert node.hash != before[index]
            else:
                assert node.hash == before[index]

    def test_update_padding_leaf(self):
        tree = build([b"some", b"test", b"elements"])

        tree.update_element(3, b"for")

        assert tree.root() == build([b"some", b"test", b"elements", b"for"]).root()
        assert tree.element_count == 3

    def test_update_single_leaf_tree(self):
        tree = build([b"one"])
        tree.update_element(0, b"two")

        assert tree.root() == h_leaf(b"two")
        assert verify_proof(tree.root(), tree.get_proof(0))

    def test_update_with_str(self):
        tree = build([b"a", b"b"])
        tree.update_element(0, "c")

        assert tree.root() == build([b"c", b"b"]).root()

    def test_update_uses_tree_hasher(self):
        hasher = Rfc6962Hasher()
        tree = build([b"a", b"b", b"c"], hasher=hasher)

        tree.update_element(1, b"x")

        assert tree.root() == build([b"a", b"x", b"c"], hasher=hasher).root()

    @pytest.mark.parametrize("index", [4, 8, -1])
    def test_out_of_bounds_leaves_tree_untouched(self, index):
        tree = build([b"some", b"test", b"elements"])
        before = [node.hash for node in tree.nodes]

        with pytest.raises(IndexOutOfBoundsError):
            tree.update_element(index, b"x")

        assert [node.hash for node in tree.nodes] == before

    def test_bad_element_leaves_tree_untouched(self):
        tree = build([b"a", b"b"])
        before = [node.hash for node in tree.nodes]

        with pytest.raises(TypeError):
            tree.update_element(0, 12)

        assert [node.hash for node in tree.nodes] == before
