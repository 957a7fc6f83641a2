#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test SettingsManager defaults, clamping and persistence against an INI file
"""
from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from core.exceptions import ConfigurationError
from core.models import AudioMergeType, ExportSettings, SizeControlType
from core.settings_manager import SettingsManager


def test_defaults_without_stored_values(settings_manager):
    assert settings_manager.default_bitrate == 6
    assert settings_manager.default_size_control_type == SizeControlType.MBPS
    assert settings_manager.default_audio_merge_type == AudioMergeType.NONE
    assert settings_manager.default_use_first_video_path is True
    assert settings_manager.container == "mp4"
    assert settings_manager.max_parallel_exports == 2
    assert settings_manager.ffmpeg_path is None
    assert settings_manager.ffmpeg_timeout is None
    assert settings_manager.debug_logging is False
    assert settings_manager.last_export_directory is None


def test_default_export_settings_seed_a_session(settings_manager):
    seeded = settings_manager.default_export_settings()
    assert seeded == ExportSettings(file_name="", bitrate=6.0)


def test_remember_and_reload(tmp_path):
    path = str(tmp_path / "persist.ini")
    first = SettingsManager(QSettings(path, QSettings.IniFormat))
    first.remember_export_settings(ExportSettings(
        file_name="ignored",
        bitrate=12,
        size_control_type=SizeControlType.X264,
        audio_merge_type=AudioMergeType.BOTH,
        export_path="/exports",
        use_first_video_path=False,
    ))
    first.sync()

    # Fresh instance reads the INI strings back
    second = SettingsManager(QSettings(path, QSettings.IniFormat))
    seeded = second.default_export_settings()

    assert seeded.file_name == ""
    assert seeded.bitrate == 12
    assert seeded.size_control_type == SizeControlType.X264
    assert seeded.audio_merge_type == AudioMergeType.BOTH
    assert seeded.use_first_video_path is False
    assert seeded.export_path == str(Path("/exports"))


def test_merge_is_never_a_default(settings_manager):
    settings_manager.set('AUDIO_MERGE_TYPE', 'merge')
    assert settings_manager.default_audio_merge_type == AudioMergeType.NONE


@pytest.mark.parametrize("stored, expected", [(0.1, 0.5), (5000, 1000.0), ("junk", 6.0)])
def test_bitrate_clamped(settings_manager, stored, expected):
    settings_manager.set('BITRATE', stored)
    assert settings_manager.default_bitrate == expected


def test_invalid_enum_falls_back(settings_manager):
    settings_manager.set('SIZE_CONTROL_TYPE', 'gigantic')
    assert settings_manager.default_size_control_type == SizeControlType.MBPS


def test_container_setter_validates(settings_manager):
    settings_manager.container = ".MKV"
    assert settings_manager.container == "mkv"

    with pytest.raises(ConfigurationError) as exc_info:
        settings_manager.container = "avi"
    assert exc_info.value.context['setting_key'] == 'export.container'


def test_parallel_exports_clamped(settings_manager):
    settings_manager.set('MAX_PARALLEL_EXPORTS', 64)
    assert settings_manager.max_parallel_exports == 8
    settings_manager.set('MAX_PARALLEL_EXPORTS', 0)
    assert settings_manager.max_parallel_exports == 1


def test_ffmpeg_options(settings_manager):
    settings_manager.ffmpeg_path = "/opt/ffmpeg/bin/ffmpeg"
    settings_manager.set('FFMPEG_TIMEOUT', 120)

    assert settings_manager.ffmpeg_path == "/opt/ffmpeg/bin/ffmpeg"
    assert settings_manager.ffmpeg_timeout == 120.0

    settings_manager.ffmpeg_path = None
    assert settings_manager.ffmpeg_path is None


def test_canonical_keys_in_store(settings_manager):
    settings_manager.set('BITRATE', 8)
    assert settings_manager.contains('export.bitrate')
    assert settings_manager.get('export.bitrate') == 8


def test_reset_all_settings(settings_manager):
    settings_manager.set('BITRATE', 20)
    settings_manager.set_last_export_directory(Path("/tmp/out"))

    settings_manager.reset_all_settings()

    assert settings_manager.default_bitrate == 6
    assert settings_manager.last_export_directory is None
