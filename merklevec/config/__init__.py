"""
Configuration management for Merklevec.

Handles loading and validation of configuration files.
"""

from merklevec.config.settings import (
    LoggingConfig,
    MerkleConfig,
    MerklevecConfig,
    configure,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "LoggingConfig",
    "MerkleConfig",
    "MerklevecConfig",
    "configure",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
