#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Export controller - the export action of the editor page

State machine:

    IDLE -> EXPORTING -> SUCCEEDED
                      \\-> FAILED

A new export may start from IDLE or either terminal state; starting while
EXPORTING is rejected with an error result. Validation failures never
leave IDLE.
"""

from enum import Enum
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from .base_controller import BaseController
from core.exceptions import ExportError, SimpleCutError
from core.models import ExportRequest, ExportSettings
from core.notifications import NotificationCenter, validation_message
from core.result_types import ExportOperationResult, Result
from core.services.interfaces import IExportOrchestrationService, IValidationService
from core.session import EditorSession
from core.workers.export_worker import ExportWorker


class ExportState(Enum):
    IDLE = "idle"
    EXPORTING = "exporting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ExportSignals(QObject):
    """Qt signals of an ExportController"""
    state_changed = Signal(object)  # ExportState
    export_finished = Signal(object)  # ExportOperationResult


class ExportController(BaseController):
    """Validates the session, builds requests and runs the export"""

    def __init__(self, session: EditorSession,
                 notifications: Optional[NotificationCenter] = None,
                 validation_service: Optional[IValidationService] = None,
                 orchestrator: Optional[IExportOrchestrationService] = None,
                 settings_manager=None):
        super().__init__("ExportController", notifications)
        self.session = session
        self.signals = ExportSignals()
        self.settings_manager = settings_manager

        # Service dependencies (injected or lazily resolved)
        self._validation_service = validation_service
        self._orchestrator = orchestrator

        self._state = ExportState.IDLE
        self.current_worker: Optional[ExportWorker] = None
        self.exported_settings: Optional[ExportSettings] = None
        self.last_result: Optional[ExportOperationResult] = None

    @property
    def validation_service(self) -> IValidationService:
        if self._validation_service is None:
            self._validation_service = self._get_service(IValidationService)
        return self._validation_service

    @property
    def orchestrator(self) -> IExportOrchestrationService:
        if self._orchestrator is None:
            self._orchestrator = self._get_service(IExportOrchestrationService)
        return self._orchestrator

    @property
    def state(self) -> ExportState:
        return self._state

    @property
    def is_exporting(self) -> bool:
        return self._state == ExportState.EXPORTING

    def _set_state(self, state: ExportState):
        if state != self._state:
            self._log_operation("state", f"{self._state.value} -> {state.value}", level="debug")
            self._state = state
            self.signals.state_changed.emit(state)

    def prepare_export(self) -> Result[List[ExportRequest]]:
        """
        Snapshot the session, validate it and build the requests

        Returns the ValidationResult on failure so callers can show the
        field errors.
        """
        snapshot = self.session.snapshot()

        validation = self.validation_service.validate(snapshot.settings)
        if validation.has_errors:
            self._log_operation("prepare_export", validation_message(validation), level="warning")
            self.notifications.warning(validation_message(validation))
            return validation

        slice_check = self.validation_service.validate_slices(snapshot.slices)
        if slice_check.has_errors:
            self.notifications.warning(validation_message(slice_check))
            return slice_check
        for warning in slice_check.warnings:
            self._log_operation("prepare_export", warning, level="warning")

        requests = self.orchestrator.build_requests(snapshot.settings, snapshot.slices)
        self._log_operation(
            "prepare_export",
            f"{len(requests)} request(s), {len(snapshot.slices)} slice(s)"
        )
        # The unexpanded settings are what gets remembered after a success
        return Result.success(requests, warnings=list(slice_check.warnings),
                              settings=snapshot.settings)

    def _begin(self) -> Result[List[ExportRequest]]:
        if self.is_exporting:
            error = ExportError(
                "An export is already running",
                user_message="Please wait for the current export to finish.",
                recoverable=True
            )
            self._handle_error(error, {'method': 'start_export'})
            return Result.error(error)

        # A finished export passes back through IDLE
        self._set_state(ExportState.IDLE)
        return self.prepare_export()

    def start_export(self) -> Result[ExportWorker]:
        """Start the export on a background worker thread"""
        prepared = self._begin()
        if not prepared.success:
            return Result.error(prepared.error, warnings=prepared.warnings)

        self.exported_settings = prepared.metadata.get('settings')
        self._set_state(ExportState.EXPORTING)
        self.current_worker = ExportWorker(self.orchestrator, prepared.value)
        self.current_worker.result_ready.connect(self._on_export_finished)
        self.current_worker.start()
        return Result.success(self.current_worker)

    def export_now(self) -> Result:
        """
        Run the export on the calling thread

        Used by the command line entry point and tests. Returns the
        ValidationResult when validation fails, otherwise the
        ExportOperationResult.
        """
        prepared = self._begin()
        if not prepared.success:
            return prepared

        self.exported_settings = prepared.metadata.get('settings')
        self._set_state(ExportState.EXPORTING)
        try:
            result = self.orchestrator.execute(prepared.value)
        except Exception as e:
            result = self._failed_result(e, len(prepared.value))
        self._on_export_finished(result)
        return result

    def _failed_result(self, exception: Exception, request_count: int) -> ExportOperationResult:
        """Failed aggregate for an export that raised instead of reporting"""
        if isinstance(exception, SimpleCutError):
            error = exception
        else:
            error = ExportError(
                f"Unexpected error during export: {exception}",
                context={'exception_type': exception.__class__.__name__}
            )
        self._handle_error(error, {'method': 'export_now'})
        return ExportOperationResult(
            success=False,
            error=error,
            total_requests=request_count,
            failed_requests=request_count
        )

    def _on_export_finished(self, result: ExportOperationResult):
        self.last_result = result
        self.current_worker = None

        if result.success:
            self._set_state(ExportState.SUCCEEDED)
            self._log_operation("export", f"{result.total_requests} file(s) exported")
            self.notifications.success("Export succeeded")
            if self.settings_manager is not None:
                self.settings_manager.remember_export_settings(
                    self.exported_settings or self.session.export_settings.settings
                )
        else:
            self._set_state(ExportState.FAILED)
            self._log_operation(
                "export",
                f"{result.failed_requests} of {result.total_requests} request(s) failed",
                level="error"
            )
            message = result.error.user_message if result.error else "Export failed"
            self.notifications.error(message)

        self.signals.export_finished.emit(result)
