"""
UTC timestamp logging formatter for the presence agent.

Every record is prefixed with a bracketed UTC timestamp so that log lines from
hosts in different timezones can be compared directly.
"""

import datetime
import logging


class UTCTimestampFormatter(logging.Formatter):
    """
    Logging formatter that prefixes records with a UTC timestamp.

    Format: [YYYY-MM-DD HH:MM:SS.sss UTC] <formatted record>
    """

    def formatTime(self, record, datefmt=None):  # noqa: N802
        created = datetime.datetime.fromtimestamp(
            record.created, tz=datetime.timezone.utc
        )
        if datefmt:
            return created.strftime(datefmt)
        return created.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

    def format(self, record):
        original_message = super().format(record)
        return f"[{self.formatTime(record)} UTC] {original_message}"
