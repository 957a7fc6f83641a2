#!/usr/bin/env python3
"""
Tests for ExportOrchestrationService request building and fan-out
"""
import threading
import unittest
from dataclasses import replace

import pytest

from core.models import AudioMergeType, ExportRequest, ExportSettings, SliceDescriptor
from core.services.export_orchestration_service import ExportOrchestrationService
from core.services.interfaces import IExportExecutor
from core.services.service_registry import get_service_registry
from tests.helpers.fake_executors import RecordingExecutor

SLICES = (
    SliceDescriptor(key="a", order=1, file_name="a.mp4", file_path="/v/a.mp4"),
    SliceDescriptor(key="b", order=2, file_name="b.mp4", file_path="/v/b.mp4",
                    start_time="00:00:01", end_time="00:00:04"),
)


class TestBuildRequests:

    def setup_method(self):
        self.service = ExportOrchestrationService(RecordingExecutor())

    def test_both_yields_merge_then_none(self, valid_settings):
        settings = replace(valid_settings, audio_merge_type=AudioMergeType.BOTH)

        requests = self.service.build_requests(settings, SLICES)

        assert [r.audio_merge_type for r in requests] == [AudioMergeType.MERGE, AudioMergeType.NONE]
        for request in requests:
            assert request.slices == SLICES
            assert replace(request.settings, audio_merge_type=AudioMergeType.BOTH) == settings

    @pytest.mark.parametrize("merge_type", [AudioMergeType.AMIX, AudioMergeType.NONE])
    def test_single_request_for_other_types(self, valid_settings, merge_type):
        settings = replace(valid_settings, audio_merge_type=merge_type)

        requests = self.service.build_requests(settings, SLICES)

        assert len(requests) == 1
        assert requests[0].settings is settings
        assert requests[0].audio_merge_type == merge_type

    def test_slices_never_filtered(self, valid_settings):
        requests = self.service.build_requests(valid_settings, [])
        assert requests == [ExportRequest((), valid_settings)]


class TestExecute(unittest.TestCase):

    def setUp(self):
        self.settings = ExportSettings(file_name="out", audio_merge_type=AudioMergeType.BOTH)

    def _requests(self, service):
        return service.build_requests(self.settings, SLICES)

    def test_all_succeed(self):
        executor = RecordingExecutor()
        service = ExportOrchestrationService(executor)

        result = service.execute(self._requests(service))

        self.assertTrue(result.success)
        self.assertEqual(result.total_requests, 2)
        self.assertEqual(result.successful_requests, 2)
        self.assertEqual(len(executor.calls), 2)
        self.assertIsNone(result.error)

    def test_false_outcome_fails_aggregate_but_all_calls_issued(self):
        executor = RecordingExecutor({'merge': False})
        service = ExportOrchestrationService(executor)

        result = service.execute(self._requests(service))

        self.assertFalse(result.success)
        self.assertEqual(len(executor.calls), 2)
        self.assertEqual(result.failed_requests, 1)
        self.assertEqual([r['success'] for r in result.item_results], [False, True])

    def test_raising_executor_counts_as_failure(self):
        executor = RecordingExecutor({'none': RuntimeError("boom")})
        service = ExportOrchestrationService(executor)

        result = service.execute(self._requests(service))

        self.assertFalse(result.success)
        self.assertEqual(len(executor.calls), 2)
        self.assertEqual(result.item_results[1]['error'], "boom")

    def test_empty_request_list_succeeds(self):
        executor = RecordingExecutor()
        result = ExportOrchestrationService(executor).execute([])

        self.assertTrue(result.success)
        self.assertEqual(result.total_requests, 0)
        self.assertEqual(executor.calls, [])

    def test_requests_run_concurrently(self):
        # Both calls must be in flight at once for the barrier to release
        barrier = threading.Barrier(2, timeout=5)

        def export_one(request):
            barrier.wait()
            return True

        service = ExportOrchestrationService(RecordingExecutor())
        result = service.dispatch_all(self._requests(service), export_one)

        self.assertTrue(result.success)

    def test_non_boolean_truthy_is_not_success(self):
        service = ExportOrchestrationService(RecordingExecutor())
        result = service.dispatch_all(self._requests(service), lambda request: "yes")
        self.assertFalse(result.success)

    def test_max_workers_caps_pool_but_issues_every_call(self):
        calls = []
        service = ExportOrchestrationService(RecordingExecutor())
        requests = self._requests(service) * 3

        result = service.dispatch_all(requests, lambda r: calls.append(r) or True, max_workers=1)

        self.assertTrue(result.success)
        self.assertEqual(len(calls), 6)


def test_executor_resolved_from_registry():
    registry = get_service_registry()
    executor = RecordingExecutor()
    registry.register_singleton(IExportExecutor, executor)
    try:
        service = ExportOrchestrationService()
        assert service.executor is executor
    finally:
        registry.unregister(IExportExecutor)


class _BarrierExecutor(RecordingExecutor):
    """Succeeds only if the other request is in flight at the same time"""

    def __init__(self, parties=2):
        super().__init__()
        self.barrier = threading.Barrier(parties, timeout=5)

    def export(self, slices, settings):
        self.barrier.wait()
        return super().export(slices, settings)


def test_both_requests_overlap_with_single_worker_setting(settings_manager, valid_settings):
    settings_manager.set('MAX_PARALLEL_EXPORTS', 1)
    executor = _BarrierExecutor()
    service = ExportOrchestrationService(executor, max_workers=settings_manager.max_parallel_exports)

    requests = service.build_requests(
        replace(valid_settings, audio_merge_type=AudioMergeType.BOTH), SLICES
    )
    result = service.execute(requests)

    assert settings_manager.max_parallel_exports == 1
    assert result.success
    assert len(executor.calls) == 2
