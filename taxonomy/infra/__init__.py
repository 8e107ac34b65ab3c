"""Infrastructure - Logging."""

from taxonomy.infra.logging import get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
]
