"""
Logging setup for the step.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "vdtesting"


def setup_basic_logging(
    level: int = logging.INFO,
    console_output: bool = True,
    logger_instance: Optional[logging.Logger] = None,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure console logging for the package logger.

    Args:
        level: Log level for the package logger
        console_output: Attach a rich console handler
        logger_instance: Logger to configure (defaults to the package logger)
        console: Console the handler writes to

    Returns:
        The configured logger
    """
    target = logger_instance or logging.getLogger(PACKAGE_LOGGER)
    target.setLevel(level)

    for handler in target.handlers[:]:
        target.removeHandler(handler)

    if console_output:
        handler = RichHandler(console=console, show_path=level <= logging.DEBUG, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        target.addHandler(handler)
        target.propagate = False

    return target
