#!/usr/bin/env python3
"""
Tests for the SimpleCut logging tree
"""
import logging
import os
import time

import pytest

from core.logger import AppLogger, logger


@pytest.fixture
def app_logger():
    yield logger
    logger.stop_file_logging()
    logger.enable_debug(False)


def test_singleton():
    assert AppLogger() is logger


def test_child_loggers_reach_log_message(app_logger):
    received = []
    app_logger.log_message.connect(lambda level, message: received.append((level, message)))

    logging.getLogger("SimpleCut.Test").info("slice added")
    logging.getLogger("SimpleCut.Test").debug("hidden")

    assert ("INFO", "slice added") in received
    assert ("DEBUG", "hidden") not in received

    app_logger.enable_debug(True)
    logging.getLogger("SimpleCut.Test").debug("shown")
    assert ("DEBUG", "shown") in received


def test_file_logging_writes_child_records(app_logger, tmp_path):
    log_file = app_logger.setup_file_logging(tmp_path)

    logging.getLogger("SimpleCut.FFmpegExportService").debug("ffmpeg -y -i a.mp4 out.mp4")
    app_logger.stop_file_logging()

    assert log_file.parent == tmp_path
    assert app_logger.get_log_file_path() is None
    content = log_file.read_text(encoding="utf-8")
    assert "SimpleCut.FFmpegExportService" in content
    assert "ffmpeg -y -i a.mp4 out.mp4" in content


def test_cleanup_old_logs(app_logger, tmp_path):
    old = tmp_path / "simple_cut_20000101.log"
    old.write_text("old")
    stale = time.time() - 40 * 24 * 60 * 60
    os.utime(old, (stale, stale))
    recent = tmp_path / "simple_cut_20990101.log"
    recent.write_text("recent")
    unrelated = tmp_path / "other.log"
    unrelated.write_text("keep")
    os.utime(unrelated, (stale, stale))

    assert app_logger.cleanup_old_logs(tmp_path, days_to_keep=30) == 1
    assert not old.exists()
    assert recent.exists() and unrelated.exists()
