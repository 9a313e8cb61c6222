from __future__ import annotations

import logging
from typing import Optional

from fieldpath.config import settings

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once for the API process."""
    resolved = (level or settings.log_level or "INFO").upper()
    logging.basicConfig(level=resolved, format=_LOG_FORMAT)
    logging.getLogger("fieldpath").setLevel(resolved)
    # uvicorn's access log is noisy at 50 ticks/s
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
