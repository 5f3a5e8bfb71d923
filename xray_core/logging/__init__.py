"""Logging for X-Ray Core.

@public

Example:
    >>> from xray_core.logging import get_xray_logger
    >>>
    >>> logger = get_xray_logger(__name__)
    >>> logger.info("Trace persisted")
"""

from .logging_config import get_xray_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_xray_logger",
]
