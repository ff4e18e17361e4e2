"""Shared logging setup for the pet store services.

Services call `configure_logging()` once from their entrypoint so every
component emits the same line format. Modules log through the standard
`logging.getLogger(__name__)`; nothing here replaces that.
"""

import logging

HANDLER_NAME = "petstore"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level="INFO"):
    """Install a single stream handler on the root logger.

    Calling this more than once only updates the level, so tests and the
    application factory can both invoke it safely.

    Args:
        level: Level name (e.g. "INFO", "debug") or numeric level.

    Returns:
        logging.Logger: The configured root logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
    return root
