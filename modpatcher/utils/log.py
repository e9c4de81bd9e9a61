from __future__ import annotations
import logging
from rich.console import Console
from rich.logging import RichHandler

err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("modpatcher")
    logger.handlers.clear()
    handler = RichHandler(console=err_console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger
