# logs.py - logger setup for the library, rendered through the environment console

from __future__ import annotations

import logging

from rich.logging import RichHandler

from symbolic_expr.env import environment

ROOT_LOGGER = 'symbolic_expr'


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Returns the logger for a module of this library.

    Module names outside the package are nested under the package logger,
    so that `setup_logging` governs them too.

    """
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')

def setup_logging(level: str | None = None) -> logging.Logger:
    """Attaches a rich handler to the package logger and sets its level.

    Parameters:
    ----------
      level [None] - a level name; defaults to environment.log_level

    Repeated calls only update the level; the handler is installed once.
    Returns the package logger.

    """
    if level is not None:
        environment.set_log_level(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(environment.log_level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=environment.console, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter('%(name)s: %(message)s'))
        logger.addHandler(handler)

    return logger
