#!/usr/bin/env python3
"""
Shared fixtures: a Qt core application, a fake export executor and an
INI-backed SettingsManager that never touches the user's real settings.
"""
import pytest
from PySide6.QtCore import QCoreApplication, QSettings

from core.models import ExportSettings, SizeControlType
from core.settings_manager import SettingsManager
from tests.helpers.fake_executors import RecordingExecutor


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def settings_manager(tmp_path):
    qsettings = QSettings(str(tmp_path / "settings.ini"), QSettings.IniFormat)
    return SettingsManager(qsettings)


@pytest.fixture
def valid_settings():
    return ExportSettings(
        file_name="out",
        bitrate=6,
        size_control_type=SizeControlType.MBPS,
        export_path="/exports",
        use_first_video_path=False,
    )
