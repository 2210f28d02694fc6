"""Logging setup for the planner package.

Selection and normalization log through module loggers under
``nutrition_planner``; this module owns the single handler they share.
"""

import logging

PACKAGE_LOGGER = "nutrition_planner"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(level: str | int) -> int:
    """Turn a level name such as "debug" or a numeric level into an int."""
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    levels = logging.getLevelNamesMapping()
    if name not in levels:
        raise ValueError(f"Unknown log level: {level!r}")
    return levels[name]


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the package logger and set its level.

    Calling it again only changes the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolve_level(level))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
