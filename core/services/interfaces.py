#!/usr/bin/env python3
"""
Service interfaces for dependency injection and testing
"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from ..models import ExportRequest, ExportSettings, SliceDescriptor
from ..result_types import ExportOperationResult, ValidationResult


class IService(ABC):
    """Base interface for all services"""
    pass


class IValidationService(IService):
    """Interface for export settings and slice validation"""

    @abstractmethod
    def validate(self, settings: ExportSettings) -> ValidationResult:
        """Check an export settings record; never raises"""
        pass

    @abstractmethod
    def validate_slices(self, slices: Sequence[SliceDescriptor]) -> ValidationResult:
        """Check the slice list about to be exported"""
        pass


class IExportExecutor(IService):
    """Backend that turns one export request into one output file"""

    @abstractmethod
    def export(self, slices: Sequence[SliceDescriptor], settings: ExportSettings) -> bool:
        """Produce one output file; True on success

        Implementations may raise; callers treat an exception as failure.
        """
        pass


class IExportOrchestrationService(IService):
    """Interface for expanding settings into requests and dispatching them"""

    @abstractmethod
    def build_requests(self, settings: ExportSettings,
                       slices: Sequence[SliceDescriptor]) -> List[ExportRequest]:
        """Decide how many backend calls an export needs"""
        pass

    @abstractmethod
    def execute(self, requests: Sequence[ExportRequest]) -> ExportOperationResult:
        """Dispatch all requests concurrently and aggregate the outcomes"""
        pass

    @abstractmethod
    def dispatch_all(self, requests: Sequence[ExportRequest],
                     export_one: Callable[[ExportRequest], bool],
                     max_workers: Optional[int] = None) -> ExportOperationResult:
        """Fan requests out to ``export_one`` and join on all of them"""
        pass
