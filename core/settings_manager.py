#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Centralized settings management on top of QSettings

Holds the export defaults a new session starts from, the ffmpeg location
and the last directory the user exported to. Slices themselves are never
persisted.
"""

from typing import Any, Optional
from pathlib import Path
from PySide6.QtCore import QSettings

from .exceptions import ConfigurationError
from .models import AudioMergeType, ExportSettings, SizeControlType

SUPPORTED_CONTAINERS = ('mp4', 'mkv', 'mov')


def _to_bool(value: Any, default: bool) -> bool:
    # INI-backed QSettings hands booleans back as 'true'/'false'
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


class SettingsManager:
    """Centralized settings management with canonical keys"""

    # Canonical keys for all settings
    KEYS = {
        # Export defaults
        'BITRATE': 'export.bitrate',
        'SIZE_CONTROL_TYPE': 'export.size_control_type',
        'AUDIO_MERGE_TYPE': 'export.audio_merge_type',
        'USE_FIRST_VIDEO_PATH': 'export.use_first_video_path',
        'CONTAINER': 'export.container',
        'MAX_PARALLEL_EXPORTS': 'export.max_parallel_exports',

        # FFmpeg
        'FFMPEG_PATH': 'ffmpeg.path',
        'FFMPEG_TIMEOUT': 'ffmpeg.timeout_seconds',

        # Debug settings
        'DEBUG_LOGGING': 'debug.enable_logging',

        # Path settings
        'LAST_EXPORT_DIR': 'paths.last_export_directory',
    }

    DEFAULTS = {
        'BITRATE': 6,
        'SIZE_CONTROL_TYPE': SizeControlType.MBPS.value,
        'AUDIO_MERGE_TYPE': AudioMergeType.NONE.value,
        'USE_FIRST_VIDEO_PATH': True,
        'CONTAINER': 'mp4',
        'MAX_PARALLEL_EXPORTS': 2,
        'FFMPEG_PATH': '',
        'FFMPEG_TIMEOUT': 0,
        'DEBUG_LOGGING': False,
        'LAST_EXPORT_DIR': '',
    }

    def __init__(self, qsettings: Optional[QSettings] = None):
        """Initialize settings manager

        Args:
            qsettings: Backing store; defaults to the per-user native store
        """
        self._settings = qsettings or QSettings('SimpleCut', 'Settings')

    def get(self, key: str, default: Any = None) -> Any:
        """Get setting value

        Args:
            key: Either a KEYS constant or direct key string
            default: Default value if key not found (falls back to DEFAULTS)
        """
        canonical_key = self.KEYS.get(key, key)
        if default is None:
            default = self.DEFAULTS.get(key)
        return self._settings.value(canonical_key, default)

    def set(self, key: str, value: Any):
        """Set setting value

        Args:
            key: Either a KEYS constant or direct key string
            value: Value to set
        """
        canonical_key = self.KEYS.get(key, key)
        self._settings.setValue(canonical_key, value)

    def sync(self):
        """Force settings to disk"""
        self._settings.sync()

    def contains(self, key: str) -> bool:
        canonical_key = self.KEYS.get(key, key)
        return self._settings.contains(canonical_key)

    # Export defaults

    @property
    def default_bitrate(self) -> float:
        """Default Mbps, clamped to the range the export form accepts"""
        try:
            bitrate = float(self.get('BITRATE'))
        except (TypeError, ValueError):
            return float(self.DEFAULTS['BITRATE'])
        return min(max(bitrate, 0.5), 1000.0)

    @property
    def default_size_control_type(self) -> SizeControlType:
        try:
            return SizeControlType(str(self.get('SIZE_CONTROL_TYPE')))
        except ValueError:
            return SizeControlType.MBPS  # Safe fallback

    @property
    def default_audio_merge_type(self) -> AudioMergeType:
        try:
            merge_type = AudioMergeType(str(self.get('AUDIO_MERGE_TYPE')))
        except ValueError:
            return AudioMergeType.NONE
        # MERGE only ever appears inside export requests
        return AudioMergeType.NONE if merge_type == AudioMergeType.MERGE else merge_type

    @property
    def default_use_first_video_path(self) -> bool:
        return _to_bool(self.get('USE_FIRST_VIDEO_PATH'), True)

    @property
    def container(self) -> str:
        """Output container extension without the dot"""
        value = str(self.get('CONTAINER')).lower().lstrip('.')
        if value not in SUPPORTED_CONTAINERS:
            return 'mp4'
        return value

    @container.setter
    def container(self, value: str):
        container = str(value).lower().lstrip('.')
        if container not in SUPPORTED_CONTAINERS:
            raise ConfigurationError(
                f"Unsupported container: {value}. Must be one of {', '.join(SUPPORTED_CONTAINERS)}",
                setting_key=self.KEYS['CONTAINER']
            )
        self.set('CONTAINER', container)

    @property
    def max_parallel_exports(self) -> int:
        """Thread pool size for concurrent export requests (1-8)"""
        try:
            value = int(self.get('MAX_PARALLEL_EXPORTS'))
        except (TypeError, ValueError):
            return self.DEFAULTS['MAX_PARALLEL_EXPORTS']
        return min(max(value, 1), 8)

    # FFmpeg

    @property
    def ffmpeg_path(self) -> Optional[str]:
        """User-configured ffmpeg binary, None to auto-detect"""
        value = str(self.get('FFMPEG_PATH') or '').strip()
        return value or None

    @ffmpeg_path.setter
    def ffmpeg_path(self, value: Optional[str]):
        self.set('FFMPEG_PATH', value or '')

    @property
    def ffmpeg_timeout(self) -> Optional[float]:
        """Per-request process timeout in seconds, None for no limit"""
        try:
            value = float(self.get('FFMPEG_TIMEOUT'))
        except (TypeError, ValueError):
            return None
        return value if value > 0 else None

    @property
    def debug_logging(self) -> bool:
        return _to_bool(self.get('DEBUG_LOGGING'), False)

    @property
    def last_export_directory(self) -> Optional[Path]:
        path_str = self.get('LAST_EXPORT_DIR')
        return Path(path_str) if path_str else None

    def set_last_export_directory(self, path: Path):
        self.set('LAST_EXPORT_DIR', str(path))

    # Session seeding

    def default_export_settings(self) -> ExportSettings:
        """Export settings a new session starts from"""
        last_dir = self.last_export_directory
        return ExportSettings(
            file_name="",
            bitrate=self.default_bitrate,
            size_control_type=self.default_size_control_type,
            audio_merge_type=self.default_audio_merge_type,
            export_path=str(last_dir) if last_dir else "",
            use_first_video_path=self.default_use_first_video_path,
        )

    def remember_export_settings(self, settings: ExportSettings):
        """Persist the user's last export choices (not the file name)"""
        if settings.bitrate is not None:
            self.set('BITRATE', settings.bitrate)
        self.set('SIZE_CONTROL_TYPE', settings.size_control_type.value)
        if settings.audio_merge_type != AudioMergeType.MERGE:
            self.set('AUDIO_MERGE_TYPE', settings.audio_merge_type.value)
        self.set('USE_FIRST_VIDEO_PATH', settings.use_first_video_path)
        if settings.export_path:
            self.set('LAST_EXPORT_DIR', settings.export_path)

    def reset_all_settings(self):
        """Clear all stored settings; reads fall back to DEFAULTS"""
        from .logger import logger

        self._settings.clear()
        self._settings.sync()
        logger.info("All settings reset to defaults")


# Global settings instance
settings = SettingsManager()
