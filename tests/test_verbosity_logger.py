"""
Tests for flexible verbosity logger module.
"""

# pylint: disable=redefined-outer-name

import logging
from unittest.mock import Mock, patch

import pytest

from src.presence_agent.utils.verbosity_logger import (
    FlexibleLogger,
    get_logger,
    parse_levels,
)


def config_with_levels(levels: str) -> Mock:
    config = Mock()
    config.get_log_level = Mock(return_value=levels)
    return config


@pytest.fixture
def logger(mock_config):
    return FlexibleLogger("test_logger", mock_config)


class TestParseLevels:
    """Tests for pipe-separated level parsing."""

    def test_single_level(self):
        assert parse_levels("DEBUG") == {logging.DEBUG}

    def test_multiple_levels_with_whitespace_and_case(self):
        assert parse_levels("  debug | Info  |ERROR ") == {
            logging.DEBUG,
            logging.INFO,
            logging.ERROR,
        }

    def test_invalid_level_ignored(self):
        assert parse_levels("INFO|INVALID|ERROR") == {logging.INFO, logging.ERROR}


class TestFlexibleLoggerInit:
    """Tests for FlexibleLogger initialization."""

    def test_init_sets_name_and_config(self, mock_config):
        logger = FlexibleLogger("my_logger", mock_config)

        assert logger.name == "my_logger"
        assert logger.config_manager is mock_config
        assert logger.logger.level == logging.DEBUG

    def test_without_config_uses_defaults(self):
        logger = FlexibleLogger("test", None)

        assert logger.enabled_levels == {
            logging.INFO,
            logging.WARNING,
            logging.ERROR,
            logging.CRITICAL,
        }

    def test_only_invalid_levels_uses_defaults(self):
        logger = FlexibleLogger("test", config_with_levels("LOUD|QUIET"))

        assert logging.INFO in logger.enabled_levels
        assert logging.DEBUG not in logger.enabled_levels

    def test_get_logger_factory(self, mock_config):
        logger = get_logger("factory_logger", mock_config)

        assert isinstance(logger, FlexibleLogger)
        assert logger.name == "factory_logger"


class TestLoggingMethods:
    """Tests for level filtering on the logging methods."""

    def test_debug_when_enabled(self):
        logger = FlexibleLogger("test", config_with_levels("DEBUG"))

        with patch.object(logger.logger, "debug") as mock_debug:
            logger.debug("Hostname determined: %s", "server1")

        mock_debug.assert_called_once_with("Hostname determined: %s", "server1")

    def test_debug_when_disabled(self, logger):
        with patch.object(logger.logger, "debug") as mock_debug:
            logger.debug("Debug message")

        mock_debug.assert_not_called()

    def test_info_when_disabled(self):
        logger = FlexibleLogger("test", config_with_levels("ERROR|CRITICAL"))

        assert logger.is_enabled_for(logging.INFO) is False
        with patch.object(logger.logger, "info") as mock_info:
            logger.info("Info message")

        mock_info.assert_not_called()

    @pytest.mark.parametrize("method", ["info", "warning", "error", "critical"])
    def test_default_levels_pass_through(self, logger, method):
        with patch.object(logger.logger, method) as mock_method:
            getattr(logger, method)("Registration failed - %s", "refused", exc_info=True)

        mock_method.assert_called_once_with(
            "Registration failed - %s", "refused", exc_info=True
        )
