#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thread-aware exception hierarchy for Simple Cut

Errors are created on the UI thread (validation) and on export worker
threads (ffmpeg failures), so each one records the thread it was raised on.
Most of them never propagate as exceptions: they travel inside Result
objects and are rendered by the notification layer.
"""

import threading
from PySide6.QtCore import QThread
from typing import Dict, Any, Optional
from datetime import datetime
from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for categorization and UI display"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class SimpleCutError(Exception):
    """
    Base exception for all Simple Cut errors

    Captures context information and provides user-friendly messages
    for UI display.
    """

    def __init__(self,
                 message: str,
                 error_code: Optional[str] = None,
                 user_message: Optional[str] = None,
                 recoverable: bool = False,
                 severity: ErrorSeverity = ErrorSeverity.ERROR,
                 context: Optional[Dict[str, Any]] = None):
        """
        Initialize error

        Args:
            message: Technical error message for logging
            error_code: Unique error code for categorization
            user_message: User-friendly message for UI display
            recoverable: Whether operation can be retried
            severity: Error severity level
            context: Additional context information
        """
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.user_message = user_message or self._generate_user_message()
        self.recoverable = recoverable
        self.severity = severity
        self.timestamp = datetime.now()

        # Thread context information
        current_thread = QThread.currentThread()
        self.thread_name = current_thread.objectName() or threading.current_thread().name
        self.is_main_thread = threading.current_thread() is threading.main_thread()

    def _generate_user_message(self) -> str:
        """Generate user-friendly message from technical message"""
        return "An error occurred during the operation. Please check the logs for details."

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging and serialization"""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'user_message': self.user_message,
            'severity': self.severity.value,
            'recoverable': self.recoverable,
            'timestamp': self.timestamp.isoformat(),
            'thread_name': self.thread_name,
            'is_main_thread': self.is_main_thread,
            'context': self.context
        }


class ValidationError(SimpleCutError):
    """Export settings and slice validation errors"""

    def __init__(self, field_errors: Dict[str, str], **kwargs):
        """
        Initialize validation error

        Args:
            field_errors: Dictionary mapping field names to error messages
            **kwargs: Additional SimpleCutError arguments
        """
        self.field_errors = field_errors
        context = kwargs.get('context', {})
        context['field_errors'] = field_errors
        kwargs['context'] = context

        message = f"Validation failed: {len(field_errors)} field(s) have errors"
        kwargs.setdefault('recoverable', True)
        super().__init__(message, severity=ErrorSeverity.WARNING, **kwargs)

    def _generate_user_message(self) -> str:
        error_count = len(self.field_errors)
        if error_count == 1:
            return "Please correct the validation error."
        return f"Please correct {error_count} validation errors."


class ExportError(SimpleCutError):
    """Export request failures (executor returned False or raised)"""

    def __init__(self, message: str, output_path: Optional[str] = None, **kwargs):
        """
        Initialize export error

        Args:
            message: Technical error message
            output_path: Intended output file, if already known
            **kwargs: Additional SimpleCutError arguments
        """
        context = kwargs.get('context', {})
        if output_path:
            context['output_path'] = output_path
        kwargs['context'] = context

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        return "Export failed. Please check the log for the ffmpeg output."


class FFmpegNotFoundError(ExportError):
    """FFmpeg or FFprobe binary could not be located"""

    def __init__(self, message: str = "FFmpeg not found", binary: str = "ffmpeg", **kwargs):
        context = kwargs.get('context', {})
        context['binary'] = binary
        kwargs['context'] = context

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        binary = self.context.get('binary', 'ffmpeg')
        return f"{binary} was not found. Install it or set its path in the settings."


class ConfigurationError(SimpleCutError):
    """Settings and configuration errors"""

    def __init__(self, message: str, setting_key: Optional[str] = None, **kwargs):
        """
        Initialize configuration error

        Args:
            message: Technical error message
            setting_key: Settings key that caused the error
            **kwargs: Additional SimpleCutError arguments
        """
        context = kwargs.get('context', {})
        if setting_key:
            context['setting_key'] = setting_key
        kwargs['context'] = context

        super().__init__(message, **kwargs)

    def _generate_user_message(self) -> str:
        return "Configuration error. Please check your settings."
