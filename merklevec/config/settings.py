"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Merklevec, a product of Garudex Labs

Configuration management for Merklevec.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from merklevec.exceptions import ConfigurationLoadError, InvalidConfigurationError
from merklevec.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


_ENV_VAR_PATTERN = re.compile(r'\$\{([^}:]+)(?::([^}]*))?\}')

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${MERKLEVEC_HASH}" -> value of MERKLEVEC_HASH env var
        "${MERKLEVEC_HASH:sha256}" -> value of MERKLEVEC_HASH or "sha256" if not set
    """
    if isinstance(value, str):
        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return _ENV_VAR_PATTERN.sub(replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


def _as_int(name: str, value: Any) -> int:
    """Coerce an integer setting, accepting numeric strings from env expansion."""
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")


def _as_bool(name: str, value: Any) -> bool:
    """Coerce a boolean setting, accepting yes/no style strings from env expansion."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise InvalidConfigurationError(f"{name} must be a boolean, got {value!r}")


@dataclass
class MerkleConfig:
    """Merkle tree configuration."""

    hash_algorithm: str = "sha256"  # "sha256", "sha256-hex" or "rfc6962"
    min_aggregated_range: int = 1  # Narrowest range accepted by get_aggregated_proof
    use_parallel: bool = True  # Hash leaves on a thread pool for large inputs
    parallel_threshold: int = 1024  # Element count at which parallel hashing starts
    max_workers: int = 4


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    json_format: bool = True


@dataclass
class MerklevecConfig:
    """Main Merklevec configuration."""

    merkle: MerkleConfig = field(default_factory=MerkleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.merklevec/config.yaml")


def get_default_config() -> MerklevecConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        MerklevecConfig: Default configuration object
    """
    return MerklevecConfig()


def load_config(config_path: Optional[str] = None) -> MerklevecConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises ConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        MerklevecConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
        ConfigurationLoadError: If the configuration file cannot be read
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(str(config_path))

    if not os.path.exists(config_path):
        logger.info(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}", exc_info=True)
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}", exc_info=True)
        raise ConfigurationLoadError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    if config_data is None:
        logger.info(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping, "
            f"got {type(config_data).__name__}"
        )

    config_data = _expand_env_vars(config_data)
    logger.debug("Expanded environment variables in configuration")

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    logger.info(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"'{name}' section must be a mapping")
    return section


def _build_config_from_dict(config_data: Dict[str, Any]) -> MerklevecConfig:
    """
    Build MerklevecConfig from dictionary loaded from YAML.

    Merges user configuration with defaults.

    Args:
        config_data: Dictionary loaded from YAML file

    Returns:
        MerklevecConfig: Configuration object

    Raises:
        InvalidConfigurationError: If a value has the wrong type
    """
    default_config = get_default_config()

    merkle_data = _section(config_data, 'merkle')
    merkle = MerkleConfig(
        hash_algorithm=str(
            merkle_data.get('hash_algorithm', default_config.merkle.hash_algorithm)
        ).strip().lower(),
        min_aggregated_range=_as_int(
            'min_aggregated_range',
            merkle_data.get('min_aggregated_range', default_config.merkle.min_aggregated_range),
        ),
        use_parallel=_as_bool(
            'use_parallel',
            merkle_data.get('use_parallel', default_config.merkle.use_parallel),
        ),
        parallel_threshold=_as_int(
            'parallel_threshold',
            merkle_data.get('parallel_threshold', default_config.merkle.parallel_threshold),
        ),
        max_workers=_as_int(
            'max_workers',
            merkle_data.get('max_workers', default_config.merkle.max_workers),
        ),
    )

    logging_data = _section(config_data, 'logging')
    logging = LoggingConfig(
        level=str(logging_data.get('level', default_config.logging.level)),
        file=os.path.expanduser(
            str(logging_data.get('file', default_config.logging.file) or "")
        ),
        json_format=_as_bool(
            'json_format',
            logging_data.get('json_format', default_config.logging.json_format),
        ),
    )

    return MerklevecConfig(merkle=merkle, logging=logging)


def _validate_config(config: MerklevecConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    # Lazy import to avoid circular dependency
    from merklevec.merkle.hashing import available_hashers

    valid_algorithms = available_hashers()
    if config.merkle.hash_algorithm not in valid_algorithms:
        raise InvalidConfigurationError(
            f"hash_algorithm must be one of {valid_algorithms}, "
            f"got '{config.merkle.hash_algorithm}'"
        )

    if config.merkle.min_aggregated_range < 1:
        raise InvalidConfigurationError(
            f"min_aggregated_range must be at least 1, "
            f"got {config.merkle.min_aggregated_range}"
        )

    if config.merkle.parallel_threshold < 1:
        raise InvalidConfigurationError(
            f"parallel_threshold must be at least 1, "
            f"got {config.merkle.parallel_threshold}"
        )

    if config.merkle.max_workers < 1:
        raise InvalidConfigurationError(
            f"max_workers must be at least 1, got {config.merkle.max_workers}"
        )

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"logging level must be one of {valid_log_levels}, "
            f"got '{config.logging.level}'"
        )


def configure(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
) -> MerklevecConfig:
    """
    Load configuration and apply its logging section.

    Args:
        config_path: Path to configuration file. If None, uses default path.
        log_level: Overrides the configured log level when given.

    Returns:
        MerklevecConfig: The loaded configuration, ready to hand to trees
        via ``config.merkle``

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
        ConfigurationLoadError: If the configuration file cannot be read
    """
    config = load_config(config_path)

    effective_log_level = log_level.upper() if log_level else config.logging.level
    log_file = Path(config.logging.file) if config.logging.file else None
    setup_logging(
        level=effective_log_level,
        log_file=log_file,
        json_format=config.logging.json_format,
    )

    logger.debug(
        "configuration_applied",
        config_path=config_path or get_default_config_path(),
        log_level=effective_log_level,
    )
    return config
