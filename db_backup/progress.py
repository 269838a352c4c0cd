"""
Console progress reporting.
"""

import logging
import sys
from datetime import datetime
from typing import Callable, Optional, TextIO


class ProgressReporter:
    """
    Writes timestamped progress lines to a console stream and mirrors each
    message into a logger, whose handlers provide the durable log file.

    The reporter keeps no state between calls; the stream and logger are
    passed in explicitly.
    """

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.stream = stream if stream is not None else sys.stdout
        self.logger = logger if logger is not None else logging.getLogger("db_backup")
        self.clock = clock

    def report(
        self,
        message: str,
        lines_before: int = 0,
        lines_after: int = 1,
        level: int = logging.INFO
    ) -> bool:
        """Print ``message`` with blank-line padding. Returns False for an empty message."""
        if not message:
            return False

        line = f"{self.clock().strftime(self.TIMESTAMP_FORMAT)} - {message}"
        self.stream.write("\n" * lines_before + line + "\n" * lines_after)
        self.stream.flush()
        self.logger.log(level, message)
        return True

    def error(self, message: str, lines_before: int = 0, lines_after: int = 1) -> bool:
        return self.report(message, lines_before, lines_after, level=logging.ERROR)
