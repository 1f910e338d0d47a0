"""
Setup script for Merklevec.
"""

from pathlib import Path
from setuptools import find_packages, setup

# Read version from VERSION file
version_file = Path(__file__).parent / "VERSION"
version = version_file.read_text().strip()

setup(
    name="merklevec",
    version=version,
    description="Binary Merkle tree vector commitments with proofs and in-place updates",
    author="Garudex Labs",
    packages=find_packages(include=["merklevec", "merklevec.*"]),
    python_requires=">=3.9",
    install_requires=[
        "structlog>=23.1.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "hypothesis>=6.82.0",
        ],
    },
)
