"""Logging configuration."""
import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single stderr handler.

    Call once at startup. Calling again replaces the handler instead of
    stacking duplicates.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, "_taskbell", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler._taskbell = True
    root.addHandler(handler)

    # SQL echo is controlled by settings.debug, keep the pool quiet otherwise
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
