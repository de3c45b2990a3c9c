"""
Logging configuration for the application.

``setup_logging`` attaches a console handler and, if requested, a file
handler to the root logger.  Modules log through
``logging.getLogger(__name__)`` and never log passwords or tokens.

Uvicorn's per-request access log repeats every ``x-auth`` protected
path the service handles; it is kept at ``WARNING`` unless the
application runs with ``DEBUG`` enabled.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ACCESS_LOGGER = "uvicorn.access"


def configure_access_log(enabled: bool) -> None:
    """Show uvicorn access lines only when ``enabled``."""
    logging.getLogger(ACCESS_LOGGER).setLevel(logging.INFO if enabled else logging.WARNING)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, access_log: bool = False) -> None:
    """Configure logging for the service.

    The access log level is applied on every call.  Handlers are added
    to the root logger only the first time; later calls (tests build
    several apps per process, and uvicorn may have installed its own
    handlers) leave them alone.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to additionally log to.
    access_log : bool
        Whether uvicorn's per-request access lines are emitted.
    """
    configure_access_log(access_log)

    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
