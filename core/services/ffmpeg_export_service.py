#!/usr/bin/env python3
"""
FFmpeg export service - the default export executor

Turns one export request (slice list + settings) into one ffmpeg run.
Failures are logged and routed through the error handler; the caller only
sees the boolean outcome.
"""
import os
import subprocess
import time
from typing import List, Optional, Sequence

from .interfaces import IExportExecutor
from .base_service import BaseService
from ..exceptions import ExportError, FFmpegNotFoundError
from ..export_settings_model import derive_export_path
from ..ffmpeg.audio_probe import count_audio_tracks
from ..ffmpeg.binary_manager import FFmpegBinaryManager, binary_manager as default_binary_manager
from ..ffmpeg.command_builder import ExportCommandBuilder, format_command
from ..models import AudioMergeType, ExportSettings, SliceDescriptor
from ..path_utils import PathSanitizer

MERGED_SUFFIX = "_merged"

# stderr lines kept in the error context
STDERR_TAIL_LINES = 20


def build_output_file_name(settings: ExportSettings, container: str = "mp4") -> str:
    """``{file_name}[_merged].{container}``; only the MERGE variant is suffixed"""
    suffix = MERGED_SUFFIX if settings.audio_merge_type == AudioMergeType.MERGE else ""
    base_name = PathSanitizer.sanitize_component(settings.file_name.strip())
    return f"{base_name}{suffix}.{container}"


class FFmpegExportService(BaseService, IExportExecutor):
    """Export executor backed by the ffmpeg command line"""

    def __init__(self,
                 binaries: Optional[FFmpegBinaryManager] = None,
                 container: str = "mp4",
                 timeout: Optional[float] = None):
        """
        Args:
            binaries: Binary locator (global manager by default)
            container: Output extension without the dot
            timeout: Seconds before an ffmpeg run is killed; None for no limit
        """
        super().__init__("FFmpegExportService")
        self.binaries = binaries or default_binary_manager
        self.container = container
        self.timeout = timeout

    def export(self, slices: Sequence[SliceDescriptor], settings: ExportSettings) -> bool:
        try:
            cmd = self.build_command(slices, settings)
            return self._run_ffmpeg(cmd, output_file=cmd[-1])
        except ExportError as e:
            self._handle_error(e, {'method': 'export', 'file_name': settings.file_name})
            return False

    def resolve_output_file(self, slices: Sequence[SliceDescriptor],
                            settings: ExportSettings) -> str:
        directory = derive_export_path(settings, slices)
        if directory is None:
            raise ExportError(
                "Cannot determine the export directory",
                user_message="Choose an export directory or use a video with a full path."
            )
        return os.path.join(directory, build_output_file_name(settings, self.container))

    def build_command(self, slices: Sequence[SliceDescriptor],
                      settings: ExportSettings) -> List[str]:
        """
        Full ffmpeg command for one request

        Raises:
            FFmpegNotFoundError: ffmpeg or ffprobe unavailable
            ExportError: no output directory or probing failed
        """
        ffmpeg_path = self.binaries.get_ffmpeg_path()
        if not ffmpeg_path:
            raise FFmpegNotFoundError()

        output_file = self.resolve_output_file(slices, settings)

        if settings.audio_merge_type.mixes_audio:
            ffprobe_path = self.binaries.get_ffprobe_path()
            track_counts = [count_audio_tracks(ffprobe_path, s.file_path) for s in slices]
        else:
            track_counts = None

        return ExportCommandBuilder(ffmpeg_path).build(slices, settings, output_file, track_counts)

    def _run_ffmpeg(self, cmd: List[str], output_file: str) -> bool:
        self._log_operation("export", format_command(cmd))
        start_time = time.time()

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                check=False,
                timeout=self.timeout
            )
        except FileNotFoundError as e:
            raise FFmpegNotFoundError(f"FFmpeg could not be started: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise ExportError(
                f"FFmpeg timed out after {self.timeout}s",
                output_path=output_file
            ) from e

        elapsed = time.time() - start_time
        if result.returncode == 0:
            self._log_operation("export", f"wrote {output_file} in {elapsed:.1f}s")
            return True

        stderr_tail = (result.stderr or "").strip().splitlines()[-STDERR_TAIL_LINES:]
        raise ExportError(
            f"FFmpeg exited with code {result.returncode}",
            output_path=output_file,
            context={'returncode': result.returncode, 'stderr': '\n'.join(stderr_tail)}
        )
