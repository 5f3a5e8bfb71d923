"""Logging setup for xray_core.

Loggers come from Prefect's logging system, so ``get_xray_logger("xray_core.x")``
returns the ``prefect.xray_core.x`` logger and trace diagnostics show up next to
flow and task logs when a Prefect pipeline is instrumented.

Only the ``xray_core`` branch of the logger tree is configured; the root logger
and other libraries are left alone.

Environment variables:
    XRAY_LOGGING_CONFIG: Path to a YAML file in ``logging.config.dictConfig`` format
    XRAY_LOG_LEVEL: Level for xray_core loggers under the built-in config (default INFO)
"""

import logging
import logging.config
import os
from pathlib import Path
from typing import Any

import yaml
from prefect.logging import get_logger

PACKAGE_LOGGER = "xray_core"
CONFIG_PATH_ENV = "XRAY_LOGGING_CONFIG"
LOG_LEVEL_ENV = "XRAY_LOG_LEVEL"

_configured = False


def default_config() -> dict[str, Any]:
    """Console output for xray_core loggers only."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "xray": {
                "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                "datefmt": "%H:%M:%S",
            },
        },
        "handlers": {
            "xray_console": {
                "class": "logging.StreamHandler",
                "formatter": "xray",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            get_logger(PACKAGE_LOGGER).name: {
                "level": os.environ.get(LOG_LEVEL_ENV, "INFO"),
                "handlers": ["xray_console"],
                "propagate": False,
            },
        },
    }


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Read the dictConfig mapping from ``config_path``, ``$XRAY_LOGGING_CONFIG`` or the defaults.

    A configured path that does not exist raises ``FileNotFoundError``.
    """
    path = config_path or os.environ.get(CONFIG_PATH_ENV)
    if not path:
        return default_config()
    with open(path, encoding="utf-8") as f:
        config = yaml.safe_load(f)
    if not isinstance(config, dict):
        raise ValueError(f"Logging config {path} must contain a YAML mapping")
    return config


def setup_logging(config_path: Path | str | None = None, level: str | None = None) -> None:
    """Apply the logging configuration.

    @public

    Args:
        config_path: YAML file in dictConfig format. Defaults to
                     ``$XRAY_LOGGING_CONFIG``, then the built-in console config.
        level: Level override for every xray_core logger.
    """
    global _configured

    logging.config.dictConfig(load_config(config_path))
    if level:
        get_logger(PACKAGE_LOGGER).setLevel(level.upper())
    _configured = True


def get_xray_logger(name: str) -> logging.Logger:
    """Get a logger for an xray_core module, configuring logging on first use.

    @public
    """
    if not _configured:
        setup_logging()
    return get_logger(name)
