"""Logging configuration for the resize cache."""

import logging

_LOGGER_NAME = 'resize'
_FORMAT = '[%(levelname)s] %(name)s: %(message)s'


def setup_logging(level='INFO'):
    """
    Configure and return the resize logger.

    Every module logs through a child of this logger (resize.cache,
    resize.pipeline, ...). Calling this again only changes the level.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)

    return logger
