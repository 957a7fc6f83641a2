#!/usr/bin/env python3
"""
Unit tests for the ffmpeg export command and the FFmpegExportService
"""
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from core.ffmpeg.audio_probe import build_audio_probe_command, count_audio_tracks
from core.ffmpeg.command_builder import (
    ExportCommandBuilder, FilterGraphBuilder, X264_PRESET_ARGS, build_amix_filter,
    build_concat_filter, format_command
)
from core.exceptions import ExportError, FFmpegNotFoundError
from core.models import AudioMergeType, ExportSettings, SizeControlType, SliceDescriptor
from core.services.ffmpeg_export_service import FFmpegExportService, build_output_file_name

SLICES = (
    SliceDescriptor(key="a", order=1, file_name="a.mp4", file_path="/v/a.mp4",
                    start_time="00:00:05", end_time="00:00:10"),
    SliceDescriptor(key="b", order=2, file_name="b.mp4", file_path="/v/b.mp4"),
)


class TestFilters:

    def test_amix_filter(self):
        assert build_amix_filter(1, 3, "1a") == "[1:a:0] [1:a:1] [1:a:2] amix=inputs=3[1a]"

    def test_concat_filter(self):
        labels = ["0:v", "0:a", "1:v", "1a"]
        assert build_concat_filter(labels, "v", "a") == \
            "[0:v] [0:a] [1:v] [1a] concat=n=2:v=1:a=1 [v] [a]"

    def test_graph_joins_with_semicolons(self):
        graph = FilterGraphBuilder().add_amix(0, 2, "0a").add_concat(["0:v", "0a"])
        assert graph.build() == "[0:a:0] [0:a:1] amix=inputs=2[0a];[0:v] [0a] concat=n=1:v=1:a=1 [v] [a]"


class TestExportCommandBuilder:

    def setup_method(self):
        self.builder = ExportCommandBuilder("/usr/bin/ffmpeg")

    def test_inputs_with_trim_points(self):
        cmd = self.builder.build(SLICES, ExportSettings(file_name="out"), "/o/out.mp4")

        assert cmd[:2] == ["/usr/bin/ffmpeg", "-y"]
        assert cmd[2:9] == ["-ss", "00:00:05", "-to", "00:00:10", "-i", "/v/a.mp4", "-i"]
        assert cmd[9] == "/v/b.mp4"
        assert cmd[-1] == "/o/out.mp4"

    def test_mbps_tail(self):
        settings = ExportSettings(file_name="out", bitrate=2.5, size_control_type=SizeControlType.MBPS)
        cmd = self.builder.build(SLICES, settings, "/o/out.mp4")
        assert cmd[-3:] == ["-b:v", "2.5M", "/o/out.mp4"]

        settings = settings.with_field("bitrate", 6)
        assert "6M" in self.builder.build(SLICES, settings, "/o/out.mp4")

    def test_none_tail_is_output_only(self):
        settings = ExportSettings(file_name="out", size_control_type=SizeControlType.NONE)
        cmd = self.builder.build(SLICES, settings, "/o/out.mp4")
        assert cmd[-5:] == ["-map", "[v]", "-map", "[a]", "/o/out.mp4"]

    def test_x264_tail(self):
        settings = ExportSettings(file_name="out", size_control_type=SizeControlType.X264)
        cmd = self.builder.build(SLICES, settings, "/o/out.mp4")
        assert cmd[-len(X264_PRESET_ARGS) - 1:-1] == X264_PRESET_ARGS

    @pytest.mark.parametrize("merge_type", [AudioMergeType.AMIX, AudioMergeType.MERGE])
    def test_mixing_every_input_with_audio(self, merge_type):
        settings = ExportSettings(file_name="out", audio_merge_type=merge_type)
        cmd = self.builder.build(SLICES, settings, "/o/out.mp4", audio_track_counts=[2, 1])

        graph = cmd[cmd.index("-filter_complex") + 1]
        assert graph.startswith("[0:a:0] [0:a:1] amix=inputs=2[0a];[1:a:0] amix=inputs=1[1a];")
        assert "[0:v] [0a] [1:v] [1a] concat=n=2" in graph

    def test_input_without_audio_is_not_mixed(self):
        settings = ExportSettings(file_name="out", audio_merge_type=AudioMergeType.AMIX)
        cmd = self.builder.build(SLICES, settings, "/o/out.mp4", audio_track_counts=[0, 3])

        graph = cmd[cmd.index("-filter_complex") + 1]
        assert graph.startswith("[1:a:0] [1:a:1] [1:a:2] amix=inputs=3[1a];")
        assert "[0:v] [0:a] [1:v] [1a] concat=n=2" in graph

    def test_no_mixing_for_none(self):
        settings = ExportSettings(file_name="out", audio_merge_type=AudioMergeType.NONE)
        cmd = self.builder.build(SLICES, settings, "/o/out.mp4", audio_track_counts=[4, 4])
        assert "amix" not in cmd[cmd.index("-filter_complex") + 1]

    def test_track_count_length_checked(self):
        with pytest.raises(ValueError):
            self.builder.build(SLICES, ExportSettings(file_name="out"), "/o/out.mp4", [1])

    def test_format_command_quotes(self):
        assert format_command(["ffmpeg", "-i", "/my videos/a.mp4"]) == "ffmpeg -i '/my videos/a.mp4'"


class TestAudioProbe:

    def test_probe_command(self):
        assert build_audio_probe_command("ffprobe", "/v/a.mp4") == [
            "ffprobe", "-v", "error", "-select_streams", "a",
            "-show_entries", "stream=index", "-of", "csv=p=0", "/v/a.mp4"
        ]

    @patch("core.ffmpeg.audio_probe.subprocess.run")
    def test_counts_lines(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="1\n2\n\n", stderr="")
        assert count_audio_tracks("ffprobe", "/v/a.mp4") == 2

    @patch("core.ffmpeg.audio_probe.subprocess.run")
    def test_probe_failure_raises_export_error(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="bad file")
        with pytest.raises(ExportError):
            count_audio_tracks("ffprobe", "/v/a.mp4")

    def test_missing_ffprobe(self):
        with pytest.raises(FFmpegNotFoundError):
            count_audio_tracks(None, "/v/a.mp4")


class TestFFmpegExportService:

    def setup_method(self):
        self.binaries = MagicMock()
        self.binaries.get_ffmpeg_path.return_value = "/usr/bin/ffmpeg"
        self.binaries.get_ffprobe_path.return_value = "/usr/bin/ffprobe"
        self.service = FFmpegExportService(binaries=self.binaries, container="mkv")

    def test_output_file_names(self):
        assert build_output_file_name(ExportSettings(file_name="clip")) == "clip.mp4"
        merged = ExportSettings(file_name="clip", audio_merge_type=AudioMergeType.MERGE)
        assert build_output_file_name(merged, "mkv") == "clip_merged.mkv"

    def test_output_in_first_video_directory(self):
        settings = ExportSettings(file_name="clip", use_first_video_path=True)
        assert self.service.resolve_output_file(SLICES, settings) == "/v/clip.mkv"

    @patch("core.services.ffmpeg_export_service.subprocess.run")
    def test_export_success(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stderr="")
        settings = ExportSettings(file_name="clip", export_path="/out", use_first_video_path=False)

        assert self.service.export(SLICES, settings) is True
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "/usr/bin/ffmpeg"
        assert cmd[-1] == "/out/clip.mkv"

    @patch("core.services.ffmpeg_export_service.subprocess.run")
    def test_export_nonzero_exit_is_false(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stderr="Invalid argument")
        assert self.service.export(SLICES, ExportSettings(file_name="clip")) is False

    @patch("core.services.ffmpeg_export_service.subprocess.run")
    def test_timeout_is_false(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="ffmpeg", timeout=1)
        assert self.service.export(SLICES, ExportSettings(file_name="clip")) is False

    def test_missing_ffmpeg_is_false(self):
        self.binaries.get_ffmpeg_path.return_value = None
        assert self.service.export(SLICES, ExportSettings(file_name="clip")) is False

    def test_no_directory_is_false(self):
        settings = ExportSettings(file_name="clip", use_first_video_path=False, export_path="")
        assert self.service.export(SLICES, settings) is False

    @patch("core.services.ffmpeg_export_service.count_audio_tracks", return_value=2)
    @patch("core.services.ffmpeg_export_service.subprocess.run")
    def test_merge_request_probes_tracks(self, mock_run, mock_count):
        mock_run.return_value = MagicMock(returncode=0, stderr="")
        settings = ExportSettings(file_name="clip", audio_merge_type=AudioMergeType.MERGE)

        assert self.service.export(SLICES, settings) is True
        assert mock_count.call_count == 2
        cmd = mock_run.call_args[0][0]
        assert cmd[-1] == "/v/clip_merged.mkv"
        assert "amix=inputs=2" in cmd[cmd.index("-filter_complex") + 1]
