"""
Text Sink
=========

Bounded Context: Human-readable Log Output

Writes one formatted text line per accepted log call, independently of the
structured event path. Built on the logging module's handlers so file
rotation comes from logging.handlers.

Supported log devices:
    None                          no text output
    stream (has .write)           StreamHandler
    "path/to/file.log"            FileHandler (append)
    ("file.log", 10, 1048576)     RotatingFileHandler (keep 10, 1 MiB each)
    ("file.log", "daily")         TimedRotatingFileHandler (midnight)
    ("file.log", "weekly")        TimedRotatingFileHandler (Monday)

Line format:
    "<hostname> [<time>#<pid>] <SEVERITY> -- <progname>: <message>\\n"
"""

import logging
import logging.handlers
import os
import socket
import sys
from datetime import datetime
from typing import Any, Optional

from .exceptions import ConfigError

LINE_FORMAT = "%s [%s#%d] %5s -- %s: %s\n"

_TIMED_ROTATION = {
    'daily': 'midnight',
    'weekly': 'W0',
}


class PassThroughFormatter(logging.Formatter):
    """Formatter that emits the message exactly as given."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_handler(log_device: Any) -> logging.Handler:
    """
    Build a logging handler for a log device specification.

    Raises:
        ConfigError: If the log device form is not recognised
    """
    if log_device is None:
        return logging.NullHandler()

    if hasattr(log_device, "write"):
        return logging.StreamHandler(log_device)

    if isinstance(log_device, (str, os.PathLike)):
        return logging.FileHandler(log_device, encoding="utf-8")

    if isinstance(log_device, (list, tuple)) and log_device:
        if len(log_device) == 1:
            return create_handler(log_device[0])

        filename, shift_age = log_device[0], log_device[1]

        if isinstance(shift_age, str):
            when = _TIMED_ROTATION.get(shift_age.lower())
            if when is None:
                raise ConfigError(
                    f"Invalid shift_age: {shift_age!r}. "
                    f"Must be an integer or one of {sorted(_TIMED_ROTATION)}"
                )
            return logging.handlers.TimedRotatingFileHandler(filename, when=when, encoding="utf-8")

        shift_size = int(log_device[2]) if len(log_device) > 2 else 1048576
        return logging.handlers.RotatingFileHandler(
            filename,
            maxBytes=shift_size,
            backupCount=int(shift_age),
            encoding="utf-8"
        )

    raise ConfigError(f"Unsupported log_device: {log_device!r}")


class TextSink:
    """
    Human-readable log writer.

    Attributes:
        handler: Underlying logging handler
        hostname: Hostname printed on every line
        pid: Process id printed on every line
        datetime_format: strftime pattern for the line timestamp

    Example:
        >>> sink = TextSink(sys.stderr)
        >>> sink.write_line("INFO", datetime.now(), "worker", "started")
        web01 [Oct 24 15:30:45#4242]  INFO -- worker: started
    """

    def __init__(
        self,
        log_device: Any = None,
        datetime_format: str = "%b %d %H:%M:%S",
        hostname: Optional[str] = None,
        pid: Optional[int] = None
    ):
        self.log_device = log_device
        self.datetime_format = datetime_format
        self.hostname = hostname if hostname is not None else socket.gethostname()
        self.pid = pid if pid is not None else os.getpid()

        self.handler = create_handler(log_device)
        self.handler.setFormatter(PassThroughFormatter())
        self.handler.terminator = ""
        self.handler.handleError = self._raise_write_error

        # Private logger, not registered with the logging manager
        self._logger = logging.Logger(f"lwes_logger.text.{id(self)}", logging.DEBUG)
        self._logger.propagate = False
        self._logger.addHandler(self.handler)

    @property
    def enabled(self) -> bool:
        return not isinstance(self.handler, logging.NullHandler)

    def format_line(self, label: str, time: datetime, progname: Any, message: Any) -> str:
        """Render one log line."""
        return LINE_FORMAT % (
            self.hostname,
            time.strftime(self.datetime_format),
            self.pid,
            label,
            "" if progname is None else progname,
            "" if message is None else message,
        )

    def write_line(self, label: str, time: datetime, progname: Any, message: Any) -> None:
        """Format and write one log line."""
        if self.enabled:
            self._write(self.format_line(label, time, progname, message))

    def write_raw(self, text: Any) -> None:
        """Write text without formatting or a trailing newline."""
        if self.enabled:
            self._write(str(text))

    def _write(self, text: str) -> None:
        record = self._logger.makeRecord(
            self._logger.name, logging.INFO, __file__, 0, "%s", (text,), None
        )
        self._logger.handle(record)
        self.handler.flush()

    def _raise_write_error(self, record: logging.LogRecord) -> None:
        """Propagate handler failures instead of printing them to stderr."""
        error = sys.exc_info()[1]
        if error is not None:
            raise error

    def close(self) -> None:
        self._logger.removeHandler(self.handler)
        if hasattr(self.log_device, "write"):
            # Caller owns the stream
            self.handler.flush()
        else:
            self.handler.close()
