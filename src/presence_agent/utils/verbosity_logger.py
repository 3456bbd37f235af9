"""
Flexible logging utility for the presence agent.

The ``logging.level`` setting accepts a pipe-separated list of level names,
so operators can enable e.g. only ``INFO|ERROR`` without the warnings in
between.
"""

import logging
from typing import Set

DEFAULT_LEVELS = "INFO|WARNING|ERROR|CRITICAL"


def parse_levels(level_config: str) -> Set[int]:
    """Parse a pipe-separated level string into logging level constants."""
    enabled_levels = set()
    for level_name in str(level_config).split("|"):
        level = logging.getLevelName(level_name.strip().upper())
        if isinstance(level, int):
            enabled_levels.add(level)
    return enabled_levels


class FlexibleLogger:
    """
    Logger that filters records against an explicit set of enabled levels.

    Examples:
    - "DEBUG" - Only debug messages
    - "INFO|ERROR" - Only info and error messages
    - "INFO|WARNING|ERROR|CRITICAL" - Standard operational logging
    """

    def __init__(self, name: str, config_manager=None):
        self.logger = logging.getLogger(name)
        self.name = name
        self.config_manager = config_manager
        self.enabled_levels = self._parse_enabled_levels()

        # Handlers are owned by the agent's setup_logging; only filter here
        self.logger.setLevel(logging.DEBUG)

    def _parse_enabled_levels(self) -> Set[int]:
        level_config = (
            self.config_manager.get_log_level()
            if self.config_manager
            else DEFAULT_LEVELS
        )
        enabled_levels = parse_levels(level_config)
        if not enabled_levels:
            return parse_levels(DEFAULT_LEVELS)
        return enabled_levels

    def is_enabled_for(self, level: int) -> bool:
        """Check if records at ``level`` pass the configured filter."""
        return level in self.enabled_levels

    def debug(self, msg: str, *args, **kwargs):
        if self.is_enabled_for(logging.DEBUG):
            self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        if self.is_enabled_for(logging.INFO):
            self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        if self.is_enabled_for(logging.WARNING):
            self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        if self.is_enabled_for(logging.ERROR):
            self.logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs):
        if self.is_enabled_for(logging.CRITICAL):
            self.logger.critical(msg, *args, **kwargs)


def get_logger(name: str, config_manager=None) -> FlexibleLogger:
    """Get a flexible logger instance with granular level control."""
    return FlexibleLogger(name, config_manager)
