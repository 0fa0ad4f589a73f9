"""Tests for logging setup."""

import logging

from cfshim.logging import LOGGER_NAME, setup_logging


class TestSetupLogging:
    def test_single_stdout_handler(self):
        setup_logging()
        logger = setup_logging()
        assert logger.name == LOGGER_NAME
        assert len(logger.handlers) == 1

    def test_level_from_argument(self):
        assert setup_logging("debug").level == logging.DEBUG
        setup_logging(logging.INFO)

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("CFSHIM_LOG_LEVEL", "WARNING")
        assert setup_logging().level == logging.WARNING
        monkeypatch.delenv("CFSHIM_LOG_LEVEL")
        setup_logging()

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("chatty").level == logging.INFO
