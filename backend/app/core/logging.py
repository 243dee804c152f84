"""
Logging setup. Importing this module configures the root logger once.
"""

import logging
import sys
from typing import Optional

from app.core.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    global _configured
    root = logging.getLogger()
    root.setLevel(level or get_settings().log_level)

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


configure_logging()
