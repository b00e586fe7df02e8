"""Centralized logging configuration.
Call setup_logging() once at application startup.
"""

from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the pricing engine and its entry points."""
    root = logging.getLogger()
    # Avoid duplicate handlers on repeated calls
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper()))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    formatter = logging.Formatter(
        fmt=(
            "\n%(asctime)s │ %(levelname)-8s │ %(name)s │ %(funcName)s:%(lineno)d\n"
            "  %(message)s"
        ),
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # Quiet the driver; resolution logging stays at the requested level
    logging.getLogger("pymongo").setLevel(logging.WARNING)
