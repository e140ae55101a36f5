"""Logging setup for the CLI and the HTTP API."""

import logging
import sys
from pathlib import Path
from typing import List

from autologin.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Per-request chatter from the HTTP client and server
QUIET_LOGGERS = ('httpx', 'httpcore', 'uvicorn.access')


def setup_logging(config: Config) -> List[logging.Handler]:
    """Configure the root logger from the service configuration.

    Logs go to stdout, and also to ``config.log_file`` when set. An
    unrecognized ``config.log_level`` falls back to INFO with a warning.

    Args:
        config: Configuration providing ``log_level`` and ``log_file``

    Returns:
        The handlers installed on the root logger
    """
    level_name = (config.log_level or "INFO").upper()
    numeric_level = logging.getLevelName(level_name)
    unknown_level = not isinstance(numeric_level, int)
    if unknown_level:
        numeric_level = logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    if unknown_level:
        logger.warning(f"Unknown log level '{config.log_level}', using INFO")
    logger.debug(f"Configuration: {config.to_dict()}")

    return handlers
