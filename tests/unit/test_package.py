"""
Unit tests for the top-level package surface.
"""

import merklevec
from merklevec import build, verify_aggregated_proof, verify_proof
from merklevec._version import get_version


class TestPackage:
    """Test package exports and version."""

    def test_version_matches_version_file(self):
        assert merklevec.__version__ == get_version()
        assert merklevec.__version__ != ""

    def test_top_level_workflow(self):
        tree = build([b"some", b"test", b"elements"])

        assert verify_proof(tree.root(), tree.get_proof(2))
        assert verify_aggregated_proof(tree.root(), tree.get_aggregated_proof(0, 2), tree)

        tree.update_element(2, b"changed")
        assert verify_proof(tree.root(), tree.get_proof(2))

    def test_exports(self):
        for name in merklevec.__all__:
            assert hasattr(merklevec, name)
