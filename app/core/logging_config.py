"""
Logging setup for the job board.

One stdout handler on the root logger. Production uses JSON lines (one
object per record, with the request's job id when a caller passes it in
`extra`); local development uses a plain single-line format.
"""

import logging
import sys
from typing import Any, Dict
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger

# Third-party loggers and the level they are capped at
LIBRARY_LOG_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,  # SQL is logged at DEBUG by app.crud
    "uvicorn.access": logging.INFO,
}


class JobBoardJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with a UTC timestamp, level and source location."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z')
        log_record['level'] = record.levelname
        log_record['logger'] = record.name

        if record.levelno >= logging.WARNING:
            log_record['location'] = f"{record.module}:{record.funcName}:{record.lineno}"


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> logging.Handler:
    """
    Install the application's log handler on the root logger.

    Any handlers already on the root logger are replaced, so calling this
    again (e.g. on every test client startup) does not duplicate output.

    Args:
        log_level: Root level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines when True, plain text when False

    Returns:
        The installed handler
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        console_handler.setFormatter(JobBoardJsonFormatter('%(message)s'))
    else:
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(console_handler)

    for name, level in LIBRARY_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(level)

    return console_handler
