"""Logging setup for speedlog runs."""

import logging
import os
import sys

LEVEL_ENV_VAR = "SPEEDLOG_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(name: str | None, default: int = logging.INFO) -> int:
    """Map a level name such as "debug" or "WARNING" to its logging constant.

    Unknown or empty names resolve to ``default``. Numeric strings are not
    accepted; only the registered level names are.
    """
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(level: str | None = None, env_var: str = LEVEL_ENV_VAR) -> int:
    """Send log records to stderr at the requested level.

    An explicit ``level`` wins over the environment; otherwise ``env_var`` is
    consulted. Existing root handlers are replaced.

    Returns:
        The numeric level that was applied
    """
    requested = level if level is not None else os.environ.get(env_var)
    applied = resolve_level(requested)

    logging.basicConfig(
        level=applied,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    if requested and applied == logging.INFO and requested.strip().upper() != "INFO":
        logging.getLogger(__name__).warning("Unknown log level %r, using INFO", requested)
    return applied
