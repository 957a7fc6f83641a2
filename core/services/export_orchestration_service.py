#!/usr/bin/env python3
"""
Export orchestration service - request building and concurrent dispatch

build_requests decides how many backend calls an export needs;
dispatch_all runs any number of them in parallel and joins on all of them.
execute combines dispatch_all with the registered export executor.
"""
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence

from .interfaces import IExportExecutor, IExportOrchestrationService
from .base_service import BaseService
from ..exceptions import ExportError
from ..models import AudioMergeType, ExportRequest, ExportSettings, SliceDescriptor
from ..result_types import ExportOperationResult

# Requests of one export action (BOTH yields two) always run side by side
MIN_CONCURRENT_REQUESTS = 2


class ExportOrchestrationService(BaseService, IExportOrchestrationService):
    """Service expanding export settings into backend requests"""

    def __init__(self, executor: Optional[IExportExecutor] = None,
                 max_workers: Optional[int] = None):
        """
        Args:
            executor: Backend for execute(); resolved from the service
                registry on first use when omitted
            max_workers: Pool size cap; None runs one worker per request.
                Never lowers the pool below MIN_CONCURRENT_REQUESTS
        """
        super().__init__("ExportOrchestrationService")
        self._executor = executor
        self._max_workers = max_workers

    @property
    def executor(self) -> IExportExecutor:
        if self._executor is None:
            from .service_registry import get_service
            self._executor = get_service(IExportExecutor)
        return self._executor

    def build_requests(self, settings: ExportSettings,
                       slices: Sequence[SliceDescriptor]) -> List[ExportRequest]:
        """
        Expand settings into one request per output file

        BOTH yields a mixed-down request (MERGE) followed by an untouched
        one (NONE); every other merge type yields a single request with the
        settings unchanged. Each request carries the full slice list.
        """
        slices = tuple(slices)
        if settings.audio_merge_type == AudioMergeType.BOTH:
            return [
                ExportRequest(slices, replace(settings, audio_merge_type=AudioMergeType.MERGE)),
                ExportRequest(slices, replace(settings, audio_merge_type=AudioMergeType.NONE)),
            ]
        return [ExportRequest(slices, settings)]

    def execute(self, requests: Sequence[ExportRequest]) -> ExportOperationResult:
        """Dispatch every request to the export executor and aggregate"""
        executor = self.executor
        return self.dispatch_all(
            requests,
            lambda request: executor.export(request.slices, request.settings),
            self._max_workers
        )

    def dispatch_all(self, requests: Sequence[ExportRequest],
                     export_one: Callable[[ExportRequest], bool],
                     max_workers: Optional[int] = None) -> ExportOperationResult:
        """
        Run ``export_one`` for every request concurrently

        All calls are issued and joined; a call returning anything but True
        or raising counts as a failure and never cancels its siblings. The
        aggregate succeeds only if every call succeeded (vacuously for an
        empty list).
        """
        requests = list(requests)
        total = len(requests)
        if total == 0:
            self._log_operation("dispatch_all", "no requests", level="debug")
            return ExportOperationResult.create([])

        workers = max(min(max_workers or total, total), min(total, MIN_CONCURRENT_REQUESTS))
        self._log_operation("dispatch_all", f"{total} request(s) on {workers} worker(s)")
        start_time = time.time()

        item_results: Dict[int, Dict[str, Any]] = {}
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="export") as pool:
            future_to_index = {
                pool.submit(export_one, request): index
                for index, request in enumerate(requests)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                request = requests[index]
                record = {
                    'index': index,
                    'audio_merge_type': request.audio_merge_type.value,
                    'success': False,
                    'error': None,
                }
                try:
                    record['success'] = future.result() is True
                    if not record['success']:
                        record['error'] = "executor reported failure"
                except Exception as e:
                    record['error'] = str(e)
                    self._handle_error(
                        ExportError(f"Export request {index} raised: {e}"),
                        {'method': 'dispatch_all', 'request_index': index}
                    )
                item_results[index] = record

        ordered = [item_results[index] for index in range(total)]
        result = ExportOperationResult.create(ordered)
        result.add_metadata('duration_seconds', time.time() - start_time)

        level = "info" if result.success else "warning"
        self._log_operation(
            "dispatch_all",
            f"{result.successful_requests}/{total} succeeded in "
            f"{result.metadata['duration_seconds']:.1f}s",
            level=level
        )
        return result
