"""Bot Detector - Logging setup"""

import logging

from rich.logging import RichHandler


def setup_logging(verbose: bool = False, console=None):
    """Route all log records through a RichHandler on the root logger."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
