"""
Console-only logging setup.

The library modules only create loggers; handlers are installed here, by
the CLI. Logs go to stderr and are never written to files.
"""

import logging
import sys

LOG_FORMAT = "[sonicstate] %(levelname)s %(name)s: %(message)s"


class ConsoleHandler(logging.StreamHandler):
    """stderr handler owned by configure_logging()."""

    def __init__(self):
        super().__init__(sys.stderr)
        self.setFormatter(logging.Formatter(LOG_FORMAT))


def configure_logging(verbose: bool = False) -> None:
    """
    Attach a ConsoleHandler to the package logger, at most once.

    Args:
        verbose: DEBUG level when True, WARNING otherwise
    """
    root = logging.getLogger("sonicstate")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if not any(isinstance(h, ConsoleHandler) for h in root.handlers):
        root.addHandler(ConsoleHandler())
