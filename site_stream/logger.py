# === FILE: site_stream/logger.py ===
"""Project-wide logging for **SiteStream**.

Highlights
----------
* One project logger, ``SiteStream``: console output plus an optional
  rotating log file.
* Level comes from :class:`~site_stream.config.Settings` (``log_level``,
  fed by ``SITE_STREAM_LOG_LEVEL``) unless the CLI overrides it.
* Crawl sessions log through :func:`session_logger`, which tags every record
  with a session number and the crawled host, so interleaved sessions stay
  readable::

      2026-01-01 12:00:00 | INFO     | SiteStream | [crawl#3 a.example] Обход URL: https://a.example/
"""
from __future__ import annotations

import itertools
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, MutableMapping, Optional, Tuple, Union
from urllib.parse import urlsplit

if TYPE_CHECKING:  # pragma: no cover
    from site_stream.config import Settings

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteStream"

_LevelT = Union[int, str]
_session_ids = itertools.count(1)


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """(Re)configure the project logger, replacing its handlers.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Path to a logfile. *None* → console-only output; otherwise rotated
        at 5 MiB with three backups.
    log_format
        Format string for :class:`logging.Formatter`.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    lg.handlers.clear()

    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)

    lg.propagate = False
    return lg


def init_logging(
    settings: Settings,
    *,
    level: Optional[_LevelT] = None,
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Configure logging for a process started with *settings*; *level* wins over ``settings.log_level``."""
    return configure(level=level or settings.log_level, log_file=log_file, log_format=log_format)


class SessionLogAdapter(logging.LoggerAdapter):
    """Prefixes messages with ``[crawl#<n> <host>]``."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"[crawl#{self.extra['session_id']} {self.extra['host']}] {msg}", kwargs


def session_logger(seed_url: str) -> SessionLogAdapter:
    """Logger for one crawl session; every call hands out a new session number."""
    host = urlsplit(seed_url).hostname or seed_url
    return SessionLogAdapter(
        logging.getLogger(LOGGER_NAME),
        {"session_id": next(_session_ids), "host": host},
    )


# Console output at INFO until the CLI applies the configured settings
logger: logging.Logger = configure()

__all__ = ["logger", "configure", "init_logging", "session_logger", "SessionLogAdapter", "LOGGER_NAME"]
