"""polycache logging: structlog setup driven by ``polycache.logging.*``."""

from polycache.logging.structlog_adapter import StructlogAdapter, configure_logging

__all__ = ["StructlogAdapter", "configure_logging"]
