#!/usr/bin/env python3
"""
Tests for notification messages, the error handler and result objects
"""
import unittest
from unittest.mock import MagicMock

from core.error_handler import ErrorHandler
from core.exceptions import ErrorSeverity, ExportError, FFmpegNotFoundError, ValidationError
from core.notifications import (
    NotificationCenter, NotificationLevel, noop_level, noop_message, validation_message
)
from core.result_types import (
    ExportOperationResult, NoOpReason, Result, StoreOperationResult, ValidationResult
)


class TestNotificationCenter(unittest.TestCase):

    def test_every_reason_has_a_message(self):
        for reason in NoOpReason:
            self.assertNotEqual(noop_message(reason), "Nothing changed")

    def test_boundary_messages(self):
        self.assertEqual(noop_message(NoOpReason.AT_TOP), "Cannot move the first item up")
        self.assertEqual(noop_message(NoOpReason.EMPTY_INPUT), "No file selected")
        self.assertEqual(noop_level(NoOpReason.EMPTY_INPUT), NotificationLevel.INFO)
        self.assertEqual(noop_level(NoOpReason.AT_BOTTOM), NotificationLevel.WARNING)

    def test_post_emits_and_records(self):
        center = NotificationCenter(max_history=2)
        listener = MagicMock()
        center.notification_posted.connect(listener)

        center.info("one")
        center.warning("two")
        notification = center.error("three")

        self.assertEqual(listener.call_count, 3)
        self.assertIs(listener.call_args[0][0], notification)
        self.assertEqual([n.message for n in center.history], ["two", "three"])
        self.assertEqual(center.last.level, NotificationLevel.ERROR)

    def test_validation_message_joins_in_order(self):
        result = ValidationResult.create_valid()
        result.add_field_error("fileName", "required", "Please enter a file name")
        result.add_field_error("exportPath", "required", "Please choose an export directory")

        self.assertEqual(
            validation_message(result),
            "Please enter a file name; Please choose an export directory"
        )


class TestResults:

    def test_result_success_and_error(self):
        ok = Result.success(5, warnings=["w"], source="test")
        assert ok.success and ok.unwrap() == 5 and ok.metadata == {"source": "test"}

        failed = Result.error(ExportError("nope"))
        assert failed.unwrap_or(1) == 1

    def test_store_results(self):
        applied = StoreOperationResult.applied("v")
        noop = StoreOperationResult.noop(NoOpReason.SAME_KEY)

        assert applied.changed and not applied.is_noop and applied.error is None
        assert noop.success and noop.is_noop and noop.noop_reason == NoOpReason.SAME_KEY

    def test_export_operation_result_aggregate(self):
        result = ExportOperationResult.create([{'success': True}, {'success': False}])

        assert not result.success
        assert (result.total_requests, result.successful_requests, result.failed_requests) == (2, 1, 1)
        assert isinstance(result.error, ExportError)


class TestErrorHandler:

    def test_handles_and_counts(self):
        handler = ErrorHandler()
        callback = MagicMock()
        handler.register_ui_callback(callback)

        handler.handle_error(ExportError("ffmpeg exited 1"), {'file_name': 'out'})
        handler.handle_error(ValidationError({'fileName': 'required'}))

        stats = handler.get_error_statistics()
        assert stats['error'] == 1
        assert stats['warning'] == 1
        assert callback.call_count == 2
        assert handler.get_recent_errors(1)[0]['error_code'] == 'ValidationError'

    def test_unregister_and_clear(self):
        handler = ErrorHandler()
        callback = MagicMock()
        handler.register_ui_callback(callback)
        handler.unregister_ui_callback(callback)

        handler.handle_error(ExportError("x"))
        handler.clear_statistics()

        callback.assert_not_called()
        assert handler.get_recent_errors() == []

    def test_failing_callback_does_not_stop_others(self):
        handler = ErrorHandler()
        second = MagicMock()
        handler.register_ui_callback(MagicMock(side_effect=RuntimeError("ui gone")))
        handler.register_ui_callback(second)

        handler.handle_error(ExportError("x"))

        second.assert_called_once()


def test_exception_user_messages():
    missing = FFmpegNotFoundError(binary="ffprobe")
    assert "ffprobe" in missing.user_message
    assert missing.context['binary'] == "ffprobe"

    validation = ValidationError({'a': '1', 'b': '2'})
    assert validation.severity == ErrorSeverity.WARNING
    assert validation.recoverable
    assert "2 validation errors" in validation.user_message
    assert validation.to_dict()['context']['field_errors'] == {'a': '1', 'b': '2'}
