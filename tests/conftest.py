"""Shared fixtures for rss_monitor tests."""

import pytest

from rss_monitor.config import MonitorConfig


@pytest.fixture
def config(tmp_path) -> MonitorConfig:
    return MonitorConfig(data_dir=tmp_path, log_file=None)
