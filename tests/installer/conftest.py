"""
pytest configuration for the Qt6 Installer test suite.
Provides common fixtures and test configuration.
"""

import logging
import stat
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
SRC_ROOT = REPO_ROOT / "app-installer" / "common" / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from qt6_installer.config.AppConfig import AppConfig


@pytest.fixture(autouse=True)
def reset_app_config(monkeypatch):
    """Ensure env overrides and the config singleton don't leak between tests."""
    for var in (AppConfig.ENV_SHELL, AppConfig.ENV_LOG_DIR, AppConfig.ENV_SCRIPT_DIR, AppConfig.ENV_POLL_MS):
        monkeypatch.delenv(var, raising=False)
    AppConfig.reset_instance()
    yield
    AppConfig.reset_instance()


@pytest.fixture
def test_logger():
    """Plain logger so tests don't create installer log files."""
    return logging.getLogger("Qt6InstallerTests")


@pytest.fixture
def mock_view():
    """Stand-in for the Tk window consumed by InstallerController."""
    view = Mock()
    view.logged_lines = []
    view.append_log_lines.side_effect = lambda lines: view.logged_lines.extend(lines)
    return view


@pytest.fixture
def make_script(tmp_path):
    """Write a bash script into tmp_path and return its path."""
    def _make_script(body, name="install.sh"):
        script = tmp_path / name
        script.write_text("#!/bin/bash\n" + body + "\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        return str(script)

    return _make_script


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as spawning real processes")
    config.addinivalue_line("markers", "slow: mark test as slow running")
