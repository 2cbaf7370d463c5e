from __future__ import annotations

import logging
from typing import Dict, Optional

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_LOG_DATEFMT = "%H:%M:%S"

# Third-party loggers and the lowest level they may log at.
_QUIET_LOGGERS: Dict[str, int] = {
    "streamlit.watcher": logging.INFO,
    "watchdog": logging.WARNING,
}


def _raise_floor(name: str, floor: int) -> None:
    logger = logging.getLogger(name)
    if logger.level == logging.NOTSET or logger.level < floor:
        logger.setLevel(floor)


def configure_logging(level: Optional[int]) -> None:
    """Set the root level for the CLI and the Streamlit app.

    ``None`` means WARNING. Streamlit installs its own handlers before our
    script runs, so in that case only the level is changed.
    """
    lvl = logging.WARNING if level is None else level
    root = logging.getLogger()

    if root.handlers:
        root.setLevel(lvl)
    else:
        logging.basicConfig(level=lvl, format=_LOG_FORMAT, datefmt=_LOG_DATEFMT)

    for name, floor in _QUIET_LOGGERS.items():
        _raise_floor(name, floor)
