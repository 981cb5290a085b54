"""Fan-out service structured logging module.

Compatibility entry point; the structlog setup lives in infrastructure.logging.
"""

from infrastructure.logging import configure_logging, get_logger, get_module_logger

__all__ = ["configure_logging", "get_logger", "get_module_logger"]
