"""
Logging setup shared by the web app and the CLI.
"""

import logging
from typing import Optional

from .config import LOG_LEVEL


LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once with a stream handler."""
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=(level or LOG_LEVEL), format=LOG_FORMAT)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger, configuring the root logger first if nothing has yet.

    Args:
        name: Logger name. Defaults to "leaguesim".
    """
    configure_logging()
    return logging.getLogger(name if name is not None else "leaguesim")
