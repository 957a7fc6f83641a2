#!/usr/bin/env python3
"""
Base service class with common functionality
"""
from abc import ABC
from typing import Optional, Dict, Any
import logging

from .interfaces import IService
from ..error_handler import handle_error
from ..exceptions import SimpleCutError


class BaseService(IService, ABC):
    """Base class for all services with common functionality"""

    def __init__(self, logger_name: Optional[str] = None):
        self.logger = logging.getLogger(f"SimpleCut.{logger_name or self.__class__.__name__}")

    def _handle_error(self, error: SimpleCutError, context: Optional[Dict[str, Any]] = None):
        """Route an error through the central handler with service context"""
        context = dict(context or {})
        context.update({
            'service': self.__class__.__name__,
            'service_method': context.get('method', 'unknown')
        })

        handle_error(error, context)

    def _log_operation(self, operation: str, details: str = "", level: str = "info"):
        """Log service operation with consistent format"""
        message = f"[{self.__class__.__name__}] {operation}"
        if details:
            message += f" - {details}"

        log = {
            'debug': self.logger.debug,
            'warning': self.logger.warning,
            'error': self.logger.error,
        }.get(level, self.logger.info)
        log(message)
