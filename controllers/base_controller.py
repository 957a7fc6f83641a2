#!/usr/bin/env python3
"""
Base controller class with service lookup, notifications and error routing
"""
from abc import ABC
from typing import Optional, Dict, Any
import logging

from core.services import get_service
from core.error_handler import handle_error
from core.exceptions import SimpleCutError
from core.notifications import NotificationCenter
from core.result_types import StoreOperationResult


class BaseController(ABC):
    """
    Base class for editor controllers

    Controllers sharing a NotificationCenter present one message stream to
    the user; each controller gets a fresh center when none is passed.
    """

    def __init__(self, logger_name: Optional[str] = None,
                 notifications: Optional[NotificationCenter] = None):
        self.logger = logging.getLogger(f"SimpleCut.{logger_name or self.__class__.__name__}")
        self.notifications = notifications or NotificationCenter()

    def _get_service(self, service_interface):
        """Resolve a service from the registry, logging a missing registration"""
        try:
            return get_service(service_interface)
        except ValueError as e:
            self.logger.error(f"Service {service_interface.__name__} not available: {e}")
            raise

    def _handle_error(self, error: SimpleCutError, context: Optional[Dict[str, Any]] = None):
        context = dict(context or {})
        context['controller'] = self.__class__.__name__
        handle_error(error, context)

    def _report(self, operation: str, result: StoreOperationResult,
                success_message: Optional[str] = None) -> StoreOperationResult:
        """
        Notify the outcome of a store mutation

        An applied result is logged and, when ``success_message`` is given,
        announced. A no-op posts the message for its reason.
        """
        if result.changed:
            self._log_operation(operation, str(result.metadata or ""), level="debug")
            if success_message:
                self.notifications.success(success_message)
        else:
            self._log_operation(operation, f"no-op: {result.noop_reason.value}", level="debug")
            self.notifications.post_noop(result.noop_reason)
        return result

    def _log_operation(self, operation: str, details: str = "", level: str = "info"):
        message = f"[{self.__class__.__name__}] {operation}"
        if details:
            message += f" - {details}"
        getattr(self.logger, level if level in ('debug', 'warning', 'error') else 'info')(message)
