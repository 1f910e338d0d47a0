"""
Logging configuration for Merklevec.

Provides centralized structured logging setup with JSON output for production
and human-readable output for development. Supports correlation IDs so that
log lines from a single caller operation can be grouped together.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import structlog
from structlog.types import EventDict


# Context variable for correlation ID
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add correlation ID to log events if present in context.

    Args:
        logger: Logger instance
        method_name: Name of the logging method
        event_dict: Event dictionary to modify

    Returns:
        Modified event dictionary with correlation_id if available
    """
    correlation_id = correlation_id_var.get()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set correlation ID for the current context.

    Args:
        correlation_id: Optional correlation ID. If None, generates a new UUID.

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    """Clear correlation ID from the current context."""
    correlation_id_var.set(None)


def get_correlation_id() -> Optional[str]:
    """
    Get the current correlation ID from context.

    Returns:
        Current correlation ID or None if not set
    """
    return correlation_id_var.get()


@contextmanager
def correlation_scope() -> Iterator[str]:
    """
    Ensure a correlation ID is set for the duration of the block.

    An ID already set by the caller is kept. Otherwise a fresh one is set and
    removed again on exit, so every log line of one tree operation shares it.

    Yields:
        The correlation ID in effect inside the block
    """
    current = correlation_id_var.get()
    if current:
        yield current
        return

    token = correlation_id_var.set(str(uuid.uuid4()))
    try:
        yield correlation_id_var.get()
    finally:
        correlation_id_var.reset(token)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Configure structured logging for Merklevec.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs only to stderr.
        json_format: If True, use JSON format. If False, use human-readable format.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)
    else:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(stderr_handler)

    processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Structured logger instance.
    """
    if name.startswith("merklevec"):
        return structlog.get_logger(name)
    return structlog.get_logger(f"merklevec.{name}")


# Convenience functions for common logging patterns

def log_tree_build(
    logger: structlog.stdlib.BoundLogger,
    element_count: int,
    leaf_count: int,
    root: str,
    hash_algorithm: str,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log a Merkle tree construction.

    Args:
        logger: Logger instance
        element_count: Number of elements supplied by the caller
        leaf_count: Number of leaves after padding
        root: Computed root (hex encoded)
        hash_algorithm: Name of the hash strategy used
        duration_ms: Build duration in milliseconds
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_tree_build",
        "element_count": element_count,
        "leaf_count": leaf_count,
        "root": root,
        "hash_algorithm": hash_algorithm,
        "duration_ms": duration_ms,
    }

    log_data.update(kwargs)

    logger.debug("merkle_tree_build", **log_data)


def log_element_update(
    logger: structlog.stdlib.BoundLogger,
    index: int,
    old_root: str,
    new_root: str,
    **kwargs: Any,
) -> None:
    """
    Log an in-place element update.

    Args:
        logger: Logger instance
        index: Leaf index that was rewritten
        old_root: Root before the update (hex encoded)
        new_root: Root after the update (hex encoded)
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_element_update",
        "index": index,
        "old_root": old_root,
        "new_root": new_root,
    }

    log_data.update(kwargs)

    logger.debug("merkle_element_update", **log_data)


def log_proof_verification(
    logger: structlog.stdlib.BoundLogger,
    proof_type: str,
    success: bool,
    failure_reason: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a proof verification.

    Args:
        logger: Logger instance
        proof_type: Kind of proof verified ("single" or "aggregated")
        success: Whether verification succeeded
        failure_reason: Reason for failure if not successful
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_proof_verification",
        "proof_type": proof_type,
        "success": success,
    }

    if failure_reason is not None:
        log_data["failure_reason"] = failure_reason

    log_data.update(kwargs)

    if success:
        logger.debug("merkle_proof_verification", **log_data)
    else:
        logger.warning("merkle_proof_verification_failed", **log_data)
