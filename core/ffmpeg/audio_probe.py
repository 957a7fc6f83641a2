"""
Audio track counting with ffprobe
"""

import subprocess
from typing import Optional

from ..exceptions import ExportError, FFmpegNotFoundError


def build_audio_probe_command(ffprobe_path: str, file_path: str) -> list:
    """One output line per audio stream"""
    return [
        ffprobe_path,
        "-v", "error",
        "-select_streams", "a",
        "-show_entries", "stream=index",
        "-of", "csv=p=0",
        file_path,
    ]


def count_audio_tracks(ffprobe_path: Optional[str], file_path: str, timeout: float = 30) -> int:
    """
    Number of audio streams in a media file.

    Raises:
        FFmpegNotFoundError: ffprobe path missing or not executable
        ExportError: ffprobe exited with an error or timed out
    """
    if not ffprobe_path:
        raise FFmpegNotFoundError("FFprobe not found", binary="ffprobe")

    cmd = build_audio_probe_command(ffprobe_path, file_path)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False, timeout=timeout)
    except FileNotFoundError as e:
        raise FFmpegNotFoundError(f"FFprobe could not be started: {e}", binary="ffprobe") from e
    except subprocess.TimeoutExpired as e:
        raise ExportError(f"ffprobe timed out on {file_path}") from e

    if result.returncode != 0:
        raise ExportError(
            f"ffprobe failed on {file_path}: {result.stderr.strip()}",
            context={'file_path': file_path, 'returncode': result.returncode}
        )

    return len([line for line in result.stdout.splitlines() if line.strip()])
