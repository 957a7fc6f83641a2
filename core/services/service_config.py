#!/usr/bin/env python3
"""
Service configuration and registration
"""
import logging
from typing import Optional

from .service_registry import register_service, get_service
from .interfaces import IValidationService, IExportExecutor, IExportOrchestrationService
from .validation_service import ValidationService
from .ffmpeg_export_service import FFmpegExportService
from .export_orchestration_service import ExportOrchestrationService

logger = logging.getLogger("SimpleCut.ServiceConfiguration")


def configure_services(settings_manager=None, executor: Optional[IExportExecutor] = None):
    """
    Configure and register all application services

    Args:
        settings_manager: SettingsManager supplying ffmpeg and pool options
            (the global instance when omitted)
        executor: Export backend override; FFmpegExportService by default
    """
    if settings_manager is None:
        from ..settings_manager import settings as settings_manager

    try:
        register_service(IValidationService, ValidationService())

        if executor is None:
            from ..ffmpeg.binary_manager import binary_manager
            binary_manager.configure(settings_manager.ffmpeg_path)
            executor = FFmpegExportService(
                binaries=binary_manager,
                container=settings_manager.container,
                timeout=settings_manager.ffmpeg_timeout
            )
        register_service(IExportExecutor, executor)

        register_service(
            IExportOrchestrationService,
            ExportOrchestrationService(executor, max_workers=settings_manager.max_parallel_exports)
        )

        logger.info("All services configured successfully")

    except Exception as e:
        logger.error(f"Service configuration failed: {e}")
        raise


def get_configured_services():
    """Get list of all configured service interfaces for debugging"""
    return [
        IValidationService,
        IExportExecutor,
        IExportOrchestrationService,
    ]


def verify_service_configuration():
    """Verify all services are properly configured (for testing/debugging)"""
    results = {}

    for service_interface in get_configured_services():
        try:
            service = get_service(service_interface)
            results[service_interface.__name__] = {
                'configured': True,
                'instance': service.__class__.__name__,
                'error': None
            }
        except ValueError as e:
            results[service_interface.__name__] = {
                'configured': False,
                'instance': None,
                'error': str(e)
            }

    return results
