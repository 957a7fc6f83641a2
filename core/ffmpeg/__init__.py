"""
FFmpeg integration: binary discovery, audio probing and command building
"""

from .binary_manager import FFmpegBinaryManager, binary_manager
from .audio_probe import count_audio_tracks
from .command_builder import ExportCommandBuilder, FilterGraphBuilder, format_command

__all__ = [
    'FFmpegBinaryManager', 'binary_manager',
    'count_audio_tracks',
    'ExportCommandBuilder', 'FilterGraphBuilder', 'format_command',
]
