"""
FFmpeg command builder for slice exports.

Every slice becomes one trimmed input; all inputs are joined with the
concat filter into a single output. Commands are returned as arrays for
subprocess execution; format_command renders one for the log.
"""

import shlex
from typing import List, Optional, Sequence

from ..models import AudioMergeType, ExportSettings, SizeControlType, SliceDescriptor

# libx264 tuning used for "x264" size control
X264_PRESET_ARGS = [
    '-c:v', 'libx264',
    '-crf', '23.5',
    '-preset', 'veryslow',
    '-keyint_min', '600',
    '-g', '600',
    '-refs', '4',
    '-bf', '3',
    '-me_method', 'umh',
    '-sc_threshold', '60',
    '-b_strategy', '1',
    '-qcomp', '0.5',
    '-psy-rd', '0.3:0',
    '-aq-mode', '2',
    '-aq-strength', '0.8',
    '-c:a', 'aac',
    '-b:a', '128k',
    '-movflags', 'faststart',
]


def build_amix_filter(input_index: int, track_count: int, output_label: str) -> str:
    """Mix every audio track of one input into a single stream"""
    inputs = ' '.join(f'[{input_index}:a:{track}]' for track in range(track_count))
    return f'{inputs} amix=inputs={track_count}[{output_label}]'


def build_concat_filter(stream_labels: Sequence[str], video_output: str, audio_output: str) -> str:
    """Concatenate interleaved (video, audio) stream pairs"""
    segment_count = len(stream_labels) // 2
    inputs = ' '.join(f'[{label}]' for label in stream_labels)
    return f'{inputs} concat=n={segment_count}:v=1:a=1 [{video_output}] [{audio_output}]'


class FilterGraphBuilder:
    """Accumulates filter chains for -filter_complex"""

    def __init__(self):
        self.filters: List[str] = []

    def is_empty(self) -> bool:
        return not self.filters

    def add_amix(self, input_index: int, track_count: int, output_label: str) -> 'FilterGraphBuilder':
        self.filters.append(build_amix_filter(input_index, track_count, output_label))
        return self

    def add_concat(self, stream_labels: Sequence[str], video_output: str = 'v',
                   audio_output: str = 'a') -> 'FilterGraphBuilder':
        self.filters.append(build_concat_filter(stream_labels, video_output, audio_output))
        return self

    def build(self) -> str:
        return ';'.join(self.filters)


class ExportCommandBuilder:
    """
    Builds the ffmpeg invocation for one export request.

    ``audio_track_counts`` holds one entry per slice; it decides whether an
    input's tracks get mixed down when the request asks for mixing.
    """

    def __init__(self, ffmpeg_path: str):
        self.ffmpeg_path = ffmpeg_path

    def build(self, slices: Sequence[SliceDescriptor], settings: ExportSettings,
              output_file: str, audio_track_counts: Optional[Sequence[int]] = None) -> List[str]:
        if audio_track_counts is None:
            audio_track_counts = [1] * len(slices)
        if len(audio_track_counts) != len(slices):
            raise ValueError(
                f"Expected {len(slices)} audio track counts, got {len(audio_track_counts)}"
            )

        cmd = [self.ffmpeg_path, '-y']

        for descriptor in slices:
            cmd.extend(self._build_input_args(descriptor))

        filter_graph = self._build_filter_graph(len(slices), settings.audio_merge_type,
                                                audio_track_counts)
        if not filter_graph.is_empty():
            cmd.extend(['-filter_complex', filter_graph.build()])
            cmd.extend(['-map', '[v]', '-map', '[a]'])

        cmd.extend(self._build_tail_args(settings))
        cmd.append(output_file)
        return cmd

    @staticmethod
    def _build_input_args(descriptor: SliceDescriptor) -> List[str]:
        args = []
        if descriptor.start_time:
            args.extend(['-ss', descriptor.start_time])
        if descriptor.end_time:
            args.extend(['-to', descriptor.end_time])
        args.extend(['-i', descriptor.file_path])
        return args

    @staticmethod
    def _build_filter_graph(input_count: int, merge_type: AudioMergeType,
                            audio_track_counts: Sequence[int]) -> FilterGraphBuilder:
        graph = FilterGraphBuilder()
        if input_count == 0:
            return graph

        stream_labels = []
        for index in range(input_count):
            stream_labels.append(f'{index}:v')
            track_count = audio_track_counts[index]
            if merge_type.mixes_audio and track_count > 0:
                label = f'{index}a'
                graph.add_amix(index, track_count, label)
                stream_labels.append(label)
            else:
                stream_labels.append(f'{index}:a')

        graph.add_concat(stream_labels, 'v', 'a')
        return graph

    @staticmethod
    def _build_tail_args(settings: ExportSettings) -> List[str]:
        if settings.size_control_type == SizeControlType.MBPS:
            return ['-b:v', f'{float(settings.bitrate):g}M']
        if settings.size_control_type == SizeControlType.X264:
            return list(X264_PRESET_ARGS)
        return []


def format_command(cmd: Sequence[str]) -> str:
    """Shell-quoted form of a command array for display and logs"""
    return shlex.join(cmd)
