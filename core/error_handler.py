#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thread-safe centralized error handling system for Simple Cut

Export failures are detected on worker threads while notifications must be
shown on the UI thread. Errors are logged immediately on the thread that
reports them and forwarded to UI callbacks through a Qt signal, which Qt
queues automatically when the emitting thread differs from the handler's.
"""

from PySide6.QtCore import QObject, Signal
from typing import Callable, List, Dict, Any, Optional
import logging
import threading
from datetime import datetime

from .exceptions import SimpleCutError, ErrorSeverity


class ErrorHandler(QObject):
    """
    Thread-safe centralized error handling system

    Routes errors from any thread to the handler's thread for UI updates
    while providing immediate logging.
    """

    error_occurred = Signal(object, object)  # error, context

    def __init__(self, parent=None):
        """
        Initialize error handler

        Args:
            parent: Parent QObject for proper Qt lifecycle management
        """
        super().__init__(parent)

        self.logger = logging.getLogger('SimpleCut.ErrorHandler')

        self._ui_callbacks: List[Callable[[SimpleCutError, dict], None]] = []

        self._error_counts = {severity: 0 for severity in ErrorSeverity}

        self._recent_errors: List[Dict[str, Any]] = []
        self._max_recent_errors = 100
        self._lock = threading.Lock()

        self.error_occurred.connect(self._dispatch_to_callbacks)

        self.logger.debug("Error handler initialized")

    def register_ui_callback(self, callback: Callable[[SimpleCutError, dict], None]):
        """
        Register UI callback for error notifications

        Callbacks are invoked on the handler's thread with (error, context).
        """
        self._ui_callbacks.append(callback)
        self.logger.debug(f"Registered UI callback: {getattr(callback, '__name__', callback)}")

    def unregister_ui_callback(self, callback: Callable[[SimpleCutError, dict], None]):
        try:
            self._ui_callbacks.remove(callback)
            self.logger.debug("Unregistered UI callback")
        except ValueError:
            self.logger.warning("Attempted to unregister non-existent UI callback")

    def handle_error(self, error: SimpleCutError, context: Optional[dict] = None):
        """
        Handle error from any thread

        Args:
            error: The error that occurred
            context: Additional context information
        """
        context = dict(context or {})
        context.update({
            'handler_thread': threading.current_thread().name,
            'timestamp': datetime.now().isoformat()
        })

        self._log_error(error, context)

        with self._lock:
            self._error_counts[error.severity] += 1
            self._store_recent_error(error, context)

        self.error_occurred.emit(error, context)

    def _dispatch_to_callbacks(self, error: SimpleCutError, context: dict):
        for callback in list(self._ui_callbacks):
            try:
                callback(error, context)
            except Exception as callback_error:
                self.logger.error(f"UI callback failed: {callback_error}", exc_info=True)

    def _log_error(self, error: SimpleCutError, context: dict):
        context_items = [
            f"{key}={value}" for key, value in context.items()
            if key not in ('timestamp', 'handler_thread')
        ]

        log_msg = f"[{error.error_code}] {error.message}"
        if context_items:
            log_msg += f" | Context: {', '.join(context_items)}"

        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_msg)
        elif error.severity == ErrorSeverity.ERROR:
            self.logger.error(log_msg)
        elif error.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_msg)
        else:
            self.logger.info(log_msg)

    def _store_recent_error(self, error: SimpleCutError, context: dict):
        error_record = {
            'timestamp': datetime.now().isoformat(),
            'error_code': error.error_code,
            'message': error.message,
            'user_message': error.user_message,
            'severity': error.severity.value,
            'recoverable': error.recoverable,
            'thread_name': error.thread_name,
            'context': context.copy()
        }

        self._recent_errors.append(error_record)

        if len(self._recent_errors) > self._max_recent_errors:
            self._recent_errors = self._recent_errors[-self._max_recent_errors:]

    def get_error_statistics(self) -> Dict[str, int]:
        """Error counts by severity"""
        return {severity.value: count for severity, count in self._error_counts.items()}

    def get_recent_errors(self, count: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Get recent errors for debugging

        Args:
            count: Number of recent errors to return (None for all)
        """
        if count is None:
            return self._recent_errors.copy()
        return self._recent_errors[-count:] if self._recent_errors else []

    def clear_statistics(self):
        self._error_counts = {severity: 0 for severity in ErrorSeverity}
        self._recent_errors.clear()
        self.logger.info("Error statistics cleared")


# Global singleton instance
_global_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """
    Get the global error handler instance

    Creates the instance if it doesn't exist. Should first be called from
    the main thread so queued deliveries land there.
    """
    global _global_error_handler

    if _global_error_handler is None:
        _global_error_handler = ErrorHandler()

    return _global_error_handler


def shutdown_error_handling():
    """Drop the global handler (application shutdown and tests)"""
    global _global_error_handler

    if _global_error_handler is not None:
        _global_error_handler.logger.info("Shutting down error handling")
        _global_error_handler.clear_statistics()
        _global_error_handler = None


def handle_error(error: SimpleCutError, context: Optional[dict] = None):
    """Handle an error using the global error handler"""
    get_error_handler().handle_error(error, context)
