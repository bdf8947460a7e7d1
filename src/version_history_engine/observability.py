"""Structured logging for the version history engine.

Modules obtain a logger with ``get_logger(__name__)`` and log a short event
message with key-value context::

    logger.info("Version appended", document_id=doc_id, sequence=7)

Keyword arguments land in the record's ``extra`` dict. The text sink prints
it after the message and the JSON sink serializes it alongside the message.
"""

from __future__ import annotations

import sys

from loguru import logger as _root_logger

from version_history_engine.settings import Settings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} | {message} | {extra}"


def get_logger(name: str):  # type: ignore[no-untyped-def]
    """Return a loguru logger bound to a module name.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A bound loguru logger.
    """
    return _root_logger.bind(logger_name=name)


def configure_logging(settings: Settings) -> None:
    """Install the single stderr sink described by settings.

    Removes any previously installed sinks so repeated calls (tests, app
    factories) do not duplicate output.

    Args:
        settings: Service settings providing log_level and log_json.
    """
    _root_logger.remove()
    _root_logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        serialize=settings.log_json,
        backtrace=False,
        diagnose=False,
    )
