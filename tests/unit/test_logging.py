"""Tests for logging configuration and behavior."""

import logging

import pytest

from regionecon import logging as relog
from regionecon.logging import DEEP_DEBUG, RegionLogger, getLogger
from regionecon.simulation import Simulation
from tests.helpers.factories import mock_regions, neutral_processor


class TestRegionLogger:
    """Test custom RegionLogger functionality."""

    def test_module_loggers_are_region_loggers(self):
        assert isinstance(getLogger("regionecon.tick"), RegionLogger)

    def test_deep_level_exists(self):
        assert DEEP_DEBUG == 5
        assert logging.getLevelName(DEEP_DEBUG) == "DEEP"

    def test_deep_logging_when_enabled(self, caplog):
        logger = getLogger("test.deep")
        logger.setLevel(DEEP_DEBUG)

        with caplog.at_level(DEEP_DEBUG, logger="test.deep"):
            logger.deep("Deep debug message")

        assert "Deep debug message" in caplog.text

    def test_deep_logging_when_disabled(self, caplog):
        logger = getLogger("test.deep_disabled")
        logger.setLevel(logging.INFO)

        with caplog.at_level(logging.INFO, logger="test.deep_disabled"):
            logger.deep("Should not appear")

        assert "Should not appear" not in caplog.text


class TestLevelFromName:
    @pytest.mark.parametrize(
        "name, level",
        [
            ("DEEP_DEBUG", DEEP_DEBUG),
            ("deep", DEEP_DEBUG),
            ("debug", logging.DEBUG),
            ("WARNING", logging.WARNING),
        ],
    )
    def test_names(self, name, level):
        assert relog.level_from_name(name) == level


class TestLoggingConfiguration:
    """Per-module levels from the configuration section."""

    def test_configure_sets_package_and_module_levels(self):
        relog.configure({"default_level": "WARNING", "modules": {"cycle": "DEBUG"}})
        assert logging.getLogger("regionecon").level == logging.WARNING
        assert logging.getLogger("regionecon.cycle").level == logging.DEBUG
        logging.getLogger("regionecon.cycle").setLevel(logging.NOTSET)

    def test_simulation_init_applies_logging(self):
        Simulation.init(logging={"default_level": "ERROR"})
        assert logging.getLogger("regionecon").level == logging.ERROR

    def test_tick_summary_logged_at_info(self, caplog):
        caplog.set_level(logging.INFO, logger="regionecon")
        neutral_processor().process_tick(mock_regions(2))
        assert "Economic tick 1" in caplog.text

    def test_phase_transition_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="regionecon")
        proc = neutral_processor()
        for _ in range(3):
            proc.process_tick(mock_regions(1))
        assert "Expansion -> Peak" in caplog.text

    def test_region_lines_logged_at_deep(self, caplog):
        caplog.set_level(DEEP_DEBUG, logger="regionecon")
        neutral_processor().process_tick(mock_regions(1))
        assert "r0: level=" in caplog.text
