#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Simple Cut - command line entry point

Joins trimmed slices of one or more videos into a single output without
opening the editor:

    python main.py highlights a.mp4 b.mp4 --start 00:01:00 --end 00:02:00 \\
        --start 10:00 --end 12:30 --audio-merge both

Exit status is 0 on success, 1 when an export request failed and 2 when
the arguments do not pass validation.
"""

import argparse
import sys
from typing import List, Optional

from PySide6.QtCore import QCoreApplication

from core.ffmpeg import binary_manager
from core.logger import logger
from core.models import AudioMergeType, SizeControlType
from core.notifications import NotificationCenter
from core.result_types import ValidationResult
from core.services import configure_services
from core.session import EditorSession
from core.settings_manager import settings
from controllers import ExportController

EXIT_OK = 0
EXIT_EXPORT_FAILED = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simple-cut",
        description="Trim and join video slices with ffmpeg."
    )
    parser.add_argument("file_name", help="output file name without extension")
    parser.add_argument("files", nargs="+", help="source videos, in output order")
    parser.add_argument("--start", action="append", default=[], metavar="TIME",
                        help="start time of the Nth file (repeat once per file)")
    parser.add_argument("--end", action="append", default=[], metavar="TIME",
                        help="end time of the Nth file (repeat once per file)")
    parser.add_argument("--bitrate", type=float, help="video bitrate in Mbps")
    parser.add_argument("--size-control", choices=[t.value for t in SizeControlType],
                        help="how the output size is controlled")
    parser.add_argument("--audio-merge",
                        choices=[t.value for t in AudioMergeType if t != AudioMergeType.MERGE],
                        help="how multi-track audio is handled")
    parser.add_argument("--export-path",
                        help="output directory (default: directory of the first video)")
    parser.add_argument("--ffmpeg", help="path to the ffmpeg binary")
    parser.add_argument("--debug", action="store_true", help="verbose console logging")
    parser.add_argument("--log-dir", metavar="DIR", help="also write a daily log file to DIR")
    return parser


def apply_arguments(session: EditorSession, args: argparse.Namespace) -> List[str]:
    """Load the arguments into the session; returns warnings"""
    model = session.export_settings
    model.set_field('file_name', args.file_name)
    if args.bitrate is not None:
        model.set_field('bitrate', args.bitrate)
    if args.size_control:
        model.set_field('size_control_type', args.size_control)
    if args.audio_merge:
        model.set_field('audio_merge_type', args.audio_merge)
    if args.export_path:
        model.set_field('export_path', args.export_path)
        model.set_field('use_first_video_path', False)

    warnings = []
    if len(args.start) > len(args.files) or len(args.end) > len(args.files):
        warnings.append("More --start/--end values than files; extra values ignored")

    added = session.slices.append_by_paths(args.files)
    if added.changed:
        for index, descriptor in enumerate(added.value):
            fields = {}
            if index < len(args.start):
                fields['start_time'] = args.start[index]
            if index < len(args.end):
                fields['end_time'] = args.end[index]
            if fields:
                session.slices.update(descriptor.key, **fields)
    return warnings + list(added.warnings)


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point"""
    args = build_parser().parse_args(argv)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("Simple Cut")
    app.setOrganizationName("SimpleCut")

    if args.debug or settings.debug_logging:
        logger.enable_debug(True)
    if args.log_dir:
        logger.setup_file_logging(args.log_dir)

    configure_services(settings)
    if args.ffmpeg:
        # One-off override, not persisted
        binary_manager.configure(args.ffmpeg)

    session = EditorSession.from_settings_manager(settings)
    for warning in apply_arguments(session, args):
        logger.warning(warning)

    notifications = NotificationCenter()
    notifications.notification_posted.connect(
        lambda n: logger.info(f"{n.level.value.upper()}: {n.message}")
    )
    export_controller = ExportController(session, notifications=notifications, settings_manager=settings)

    result = export_controller.export_now()
    if isinstance(result, ValidationResult):
        for field_error in result.errors:
            print(f"{field_error.field}: {field_error.message}", file=sys.stderr)
        return EXIT_INVALID
    return EXIT_OK if result.success else EXIT_EXPORT_FAILED


if __name__ == "__main__":
    sys.exit(main())
