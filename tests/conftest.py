"""
Pytest configuration and shared fixtures for Merklevec tests.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest
import structlog


SAMPLE_ELEMENTS = [b"some", b"test", b"elements", b"for", b"testing", b"aggregated", b"proofs"]


def create_test_config_content(temp_dir: Path, **merkle_overrides) -> str:
    """
    Generate test configuration YAML content.

    Args:
        temp_dir: Temporary directory for the log file.
        **merkle_overrides: Values written into the merkle section.

    Returns:
        YAML configuration content as string.
    """
    merkle_section = {
        "hash_algorithm": "sha256",
        "min_aggregated_range": 1,
        "use_parallel": True,
        "parallel_threshold": 1024,
        "max_workers": 4,
    }
    merkle_section.update(merkle_overrides)
    merkle_lines = "\n".join(f"  {key}: {value}" for key, value in merkle_section.items())

    return f"""
merkle:
{merkle_lines}

logging:
  level: INFO
  file: {temp_dir}/merklevec.log
  json_format: true
"""


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Give every test a fresh structlog configuration and root logger."""
    root_logger = logging.getLogger()
    saved_level = root_logger.level
    structlog.reset_defaults()

    yield

    structlog.reset_defaults()
    # Drop handlers installed by setup_logging(); pytest's capture handlers are subclasses
    for handler in list(root_logger.handlers):
        if type(handler) in (logging.FileHandler, logging.StreamHandler):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(saved_level)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_elements() -> list:
    """Seven elements, padded to an eight-leaf tree."""
    return list(SAMPLE_ELEMENTS)


@pytest.fixture
def sample_config_path(temp_dir: Path) -> Path:
    """
    Create a sample configuration file for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path to sample config file.
    """
    config_path = temp_dir / "config.yaml"
    config_path.write_text(create_test_config_content(temp_dir))
    return config_path


@pytest.fixture
def make_config_yaml(temp_dir: Path):
    """
    Factory fixture that writes a config file with merkle overrides.

    Usage:
        def test_something(make_config_yaml):
            config_path = make_config_yaml(hash_algorithm="rfc6962")
    """
    def _make_config(**merkle_overrides) -> Path:
        config_path = temp_dir / "config.yaml"
        config_path.write_text(create_test_config_content(temp_dir, **merkle_overrides))
        return config_path
    return _make_config


# Hypothesis settings for property-based tests
from hypothesis import settings, Verbosity

settings.register_profile("merklevec", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("merklevec-ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("merklevec-dev", max_examples=10, verbosity=Verbosity.verbose)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "merklevec"))
