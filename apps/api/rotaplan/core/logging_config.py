"""
Logging setup for the API process.

One stream handler on the root logger; every module logs through
``logging.getLogger(__name__)``.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None) -> None:
    """Install the stream handler once and set the root level."""
    if level is None:
        from rotaplan.core.config import settings
        level = settings.log_level

    root = logging.getLogger()
    root.setLevel(level.upper())

    if any(getattr(h, "_rotaplan", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._rotaplan = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # SQL echo is far too chatty at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
