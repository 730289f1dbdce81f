"""Debug tracing setup for ``--debug``."""

from __future__ import annotations

import logging

__all__ = ["configure_logging"]

_FORMAT = "%(name)s: %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Route ``pkgmap`` loggers to stderr through rich.

    Debug mode lowers the level to DEBUG; otherwise only warnings show.
    Calling it again replaces the handler installed earlier.
    """
    from rich.console import Console
    from rich.logging import RichHandler

    logger = logging.getLogger("pkgmap")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False
