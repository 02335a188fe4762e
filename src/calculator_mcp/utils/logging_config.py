# utils/logging_config.py
from __future__ import annotations
import logging
import sys
from typing import Optional, TextIO, Union

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("urllib3", "httpx")


def setup_logging(
    *,
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
    force: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure root logging once for the whole app.

    - Call this exactly once in your *entry point*.
    - In libraries/modules, only use logging.getLogger(__name__).
    - `level` may be a logging constant or a name such as "DEBUG".
    - `stream` defaults to stdout; stdio MCP servers must pass sys.stderr.
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    handlers = [logging.StreamHandler(stream or sys.stdout)]
    logging.basicConfig(
        level=level,
        format=fmt,
        datefmt=datefmt,
        handlers=handlers,
        force=force,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
