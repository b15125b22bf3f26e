"""
F5OS Client - Logging Setup

The log level follows the Terraform conventions of the F5OS provider:
``TF_LOG`` first, then ``TF_LOG_PROVIDER_F5OS``, else INFO.
"""

import logging
import os
from typing import Optional

LOGGER_NAME = "f5os-client"
LOG_LEVEL_ENV_VARS = ("TF_LOG", "TF_LOG_PROVIDER_F5OS")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Terraform level names without a logging equivalent
_LEVEL_ALIASES = {"TRACE": "DEBUG", "WARN": "WARNING", "OFF": "CRITICAL"}


def resolve_log_level(environ: Optional[dict] = None) -> int:
    """Return the logging level selected by the environment."""
    environ = os.environ if environ is None else environ
    for name in LOG_LEVEL_ENV_VARS:
        value = environ.get(name, "").strip().upper()
        if not value:
            continue
        value = _LEVEL_ALIASES.get(value, value)
        level = logging.getLevelName(value)
        if isinstance(level, int):
            return level
    return logging.INFO


def configure_logging(environ: Optional[dict] = None) -> logging.Logger:
    """Configure the package logger and return it."""
    level = resolve_log_level(environ)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    return log
