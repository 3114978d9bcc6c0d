"""Pytest configuration and fixtures for regionecon tests."""

import os

import pytest

from regionecon import logging
from regionecon.region import Region
from regionecon.simulation import Simulation


@pytest.fixture
def tiny_sim() -> Simulation:
    """A small deterministic simulation with two nations."""
    return Simulation.init(
        regions=[
            Region("north", wealth=100, labor_available=100.0,
                   infrastructure_level=5.0, nation_id="A"),
            Region("east", wealth=40, labor_available=25.0,
                   infrastructure_level=1.0, nation_id="A"),
            Region("south", wealth=60, labor_available=64.0,
                   infrastructure_level=4.0, nation_id="B"),
        ],
        seed=123,
        # keep the logging quiet regardless of defaults.yml
        logging={"default_level": "ERROR"},
    )


@pytest.fixture(autouse=True)
def mute_regionecon_logs(caplog):
    # COVERAGE_RUN=true executes every logging branch for accurate coverage
    if os.environ.get("COVERAGE_RUN") == "true":
        level = logging.DEBUG
    else:
        level = logging.ERROR

    caplog.set_level(level, logger="regionecon")
    logging.getLogger("regionecon").setLevel(level)
