#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Export worker thread

Runs ExportOrchestrationService.execute off the UI thread. The worker
receives fully built, immutable requests, so edits made to the session
while it runs never reach the export in flight.
"""

from datetime import datetime
from typing import List, Optional

from PySide6.QtCore import QThread, Signal

from ..error_handler import handle_error
from ..exceptions import ExportError, SimpleCutError
from ..models import ExportRequest
from ..result_types import ExportOperationResult
from ..services.interfaces import IExportOrchestrationService


class ExportWorker(QThread):
    """
    Background worker for one export action

    Signals:
        progress_update: (percentage: int, message: str)
        result_ready: (result: ExportOperationResult)
    """

    progress_update = Signal(int, str)  # percentage, message
    result_ready = Signal(object)  # ExportOperationResult

    def __init__(self, orchestrator: IExportOrchestrationService,
                 requests: List[ExportRequest], parent=None):
        super().__init__(parent)
        self.orchestrator = orchestrator
        self.requests = list(requests)
        self.operation_start_time: Optional[datetime] = None
        self.setObjectName(f"{self.__class__.__name__}_{id(self)}")

    def run(self):
        """Execute all requests and emit exactly one result"""
        self.operation_start_time = datetime.now()
        self.progress_update.emit(0, f"Exporting {len(self.requests)} file(s)...")
        try:
            result = self.orchestrator.execute(self.requests)
        except Exception as e:
            result = self._error_result(e)
        self.emit_result(result)

    def emit_result(self, result: ExportOperationResult):
        if self.operation_start_time:
            duration = (datetime.now() - self.operation_start_time).total_seconds()
            result.add_metadata('worker_duration_seconds', duration)
        result.add_metadata('worker_thread', self.objectName())

        self.progress_update.emit(100, "Export finished" if result.success else "Export failed")
        self.result_ready.emit(result)

    def _error_result(self, exception: Exception) -> ExportOperationResult:
        if isinstance(exception, SimpleCutError):
            error = exception
        else:
            error = ExportError(
                f"Unexpected error in export worker: {exception}",
                context={'exception_type': exception.__class__.__name__}
            )
        handle_error(error, {'worker_object_name': self.objectName()})
        return ExportOperationResult(
            success=False,
            error=error,
            total_requests=len(self.requests),
            failed_requests=len(self.requests)
        )
