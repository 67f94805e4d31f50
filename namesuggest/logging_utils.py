from __future__ import annotations

import sys
from typing import Optional

from loguru import logger

from . import config

_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}"


def configure_logging(level: Optional[str] = None, to_file: Optional[bool] = None) -> None:
    """
    Reset loguru to a single stderr sink, plus a rotating file sink under
    LOG_DIR when NAMESUGGEST_LOG_FILE=1. Entry points call this once; library
    modules only emit.
    """
    level = (level or config.LOG_LEVEL).upper()
    if to_file is None:
        to_file = config.LOG_TO_FILE

    logger.remove()
    logger.add(sys.stderr, level=level, format=_FORMAT)
    if to_file:
        config.LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(
            config.LOG_DIR / "namesuggest.log",
            level=level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )
    logger.debug("Logging configured at {} (file sink: {})", level, to_file)
