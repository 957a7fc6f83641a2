#!/usr/bin/env python3
"""
Service layer for Simple Cut

- Dependency injection through the service registry
- Validation and export logic kept out of the controllers, behind
  interfaces that tests replace with fakes
"""

from .service_registry import ServiceRegistry, get_service, register_service, register_factory
from .interfaces import (
    IService, IValidationService, IExportExecutor, IExportOrchestrationService
)
from .base_service import BaseService

# Service implementations
from .validation_service import ValidationService
from .export_orchestration_service import ExportOrchestrationService
from .ffmpeg_export_service import FFmpegExportService

# Service configuration
from .service_config import configure_services, verify_service_configuration

__all__ = [
    'ServiceRegistry', 'get_service', 'register_service', 'register_factory',
    'IService', 'IValidationService', 'IExportExecutor', 'IExportOrchestrationService',
    'BaseService',
    'ValidationService', 'ExportOrchestrationService', 'FFmpegExportService',
    'configure_services', 'verify_service_configuration'
]
