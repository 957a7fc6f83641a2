"""
Binary manager for FFmpeg and FFprobe executables.

Locates ffmpeg/ffprobe once and caches the result. Search order: the path
configured in the settings, a bundled ``bin/`` directory next to the
project, then PATH, then common install locations.
"""

import logging
import os
import platform
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger('SimpleCut.FFmpegBinaryManager')


class FFmpegBinaryManager:
    """
    Singleton manager for FFmpeg and FFprobe binary detection.

    Caches the located paths to avoid repeated filesystem searches.
    """

    _instance: Optional["FFmpegBinaryManager"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize binary manager (only once)."""
        if not FFmpegBinaryManager._initialized:
            self.configured_ffmpeg_path: Optional[str] = None
            self.ffmpeg_path: Optional[str] = None
            self.ffprobe_path: Optional[str] = None
            self.ffmpeg_version: Optional[str] = None
            self._validated: bool = False
            FFmpegBinaryManager._initialized = True

    def configure(self, ffmpeg_path: Optional[str]):
        """
        Use an explicit ffmpeg binary; ffprobe is looked for beside it.

        Clears the cache so the next lookup searches again.
        """
        self.configured_ffmpeg_path = ffmpeg_path or None
        self._validated = False

    def find_binaries(self, force_refresh: bool = False) -> Tuple[Optional[str], Optional[str]]:
        """
        Locate FFmpeg and FFprobe binaries.

        Args:
            force_refresh: If True, bypass cache and re-search for binaries

        Returns:
            Tuple of (ffmpeg_path, ffprobe_path), None if not found
        """
        if not force_refresh and self._validated:
            return self.ffmpeg_path, self.ffprobe_path

        self.ffmpeg_path = self._find_binary("ffmpeg")
        self.ffprobe_path = self._find_binary("ffprobe")
        self.ffmpeg_version = self._get_version(self.ffmpeg_path) if self.ffmpeg_path else None

        if self.ffmpeg_path:
            logger.info(f"Using ffmpeg {self.ffmpeg_version or '(unknown version)'} at {self.ffmpeg_path}")
        else:
            logger.warning("ffmpeg not found")

        self._validated = True
        return self.ffmpeg_path, self.ffprobe_path

    def get_ffmpeg_path(self) -> Optional[str]:
        """Get FFmpeg binary path (cached)."""
        if not self._validated:
            self.find_binaries()
        return self.ffmpeg_path

    def get_ffprobe_path(self) -> Optional[str]:
        """Get FFprobe binary path (cached)."""
        if not self._validated:
            self.find_binaries()
        return self.ffprobe_path

    def is_ffmpeg_available(self) -> bool:
        return self.get_ffmpeg_path() is not None

    def is_ffprobe_available(self) -> bool:
        return self.get_ffprobe_path() is not None

    def _find_binary(self, binary_name: str) -> Optional[str]:
        system = platform.system()
        if system == "Windows":
            binary_name = f"{binary_name}.exe"

        configured = self._find_configured(binary_name)
        if configured:
            return configured

        local_bin_path = Path(__file__).resolve().parent.parent.parent / "bin" / binary_name
        if local_bin_path.is_file():
            return str(local_bin_path)

        path_result = shutil.which(binary_name)
        if path_result:
            return path_result

        for path in self._get_common_paths(binary_name, system):
            if os.path.isfile(path):
                return path

        return None

    def _find_configured(self, binary_name: str) -> Optional[str]:
        """The configured binary itself, or its sibling for ffprobe"""
        if not self.configured_ffmpeg_path:
            return None
        configured = Path(self.configured_ffmpeg_path)
        if configured.is_dir():
            candidate = configured / binary_name
        elif binary_name.startswith("ffmpeg"):
            candidate = configured
        else:
            candidate = configured.parent / binary_name
        return str(candidate) if candidate.is_file() else None

    def _get_common_paths(self, binary_name: str, system: str) -> list:
        if system == "Windows":
            return [
                rf"C:\ffmpeg\bin\{binary_name}",
                rf"C:\Program Files\ffmpeg\bin\{binary_name}",
            ]
        elif system == "Darwin":
            return [
                f"/usr/local/bin/{binary_name}",
                f"/opt/homebrew/bin/{binary_name}",
            ]
        return [
            f"/usr/bin/{binary_name}",
            f"/usr/local/bin/{binary_name}",
            f"/snap/bin/{binary_name}",
        ]

    def _get_version(self, binary_path: str) -> Optional[str]:
        """Extract version string from binary (e.g. "ffmpeg version 6.1.1")."""
        try:
            result = subprocess.run(
                [binary_path, "-version"], capture_output=True, text=True, check=False, timeout=5
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning(f"Could not query {binary_path} -version: {e}")
            return None

        if result.returncode == 0 and result.stdout:
            parts = result.stdout.split("\n")[0].split()
            if len(parts) >= 3:
                return parts[2]
        return None


# Global singleton instance
binary_manager = FFmpegBinaryManager()
