"""
Shared pytest fixtures for croncalc tests.

This module provides common fixtures used across all test files, including:
- Time freezing utilities
- An isolated croncalc home for config and log files
- A click CliRunner
"""

import pytest
from datetime import datetime
from click.testing import CliRunner
from freezegun import freeze_time

from croncalc.croncalc_env import CroncalcEnvironment


@pytest.fixture(autouse=True)
def croncalc_home(tmp_path, monkeypatch):
    """
    Points $CRONCALC_HOME at a temporary directory for every test so that
    config.toml and logs/ never touch the real home directory.
    """
    home = tmp_path / "croncalc-home"
    monkeypatch.setenv("CRONCALC_HOME", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    return home


@pytest.fixture
def frozen_time():
    """
    Provides a freezegun context that freezes time to a default datetime.

    Time is frozen to 2025-01-01 12:00:00 (a Wednesday) for the duration
    of the test. Move it forward with ``frozen_time.tick(...)``.
    """
    with freeze_time("2025-01-01 12:00:00") as frozen:
        yield frozen


@pytest.fixture
def freeze_at():
    """
    Returns a function that freezes time to a specific datetime.

    Usage:
        def test_something(freeze_at):
            with freeze_at("2025-01-15 10:00:00"):
                now = datetime.now()
    """
    return freeze_time


@pytest.fixture
def test_env(croncalc_home):
    """
    Provides a CroncalcEnvironment rooted in the temporary home.
    """
    env = CroncalcEnvironment()
    env.ensure(init_config=True)
    return env


@pytest.fixture
def runner(test_env):
    """A CliRunner whose config file already exists, so output stays clean."""
    return CliRunner()


@pytest.fixture
def wednesday():
    """A known Wednesday at midnight."""
    return datetime(2024, 1, 3, 0, 0, 0)
