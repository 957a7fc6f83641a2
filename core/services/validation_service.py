#!/usr/bin/env python3
"""
Validation service - export settings and slice list checks

Both checks are pure: they never raise and never touch the session. Field
names in the results use the camelCase names of the export form so a UI
can attach messages to its inputs directly.
"""
import math
from typing import Any, Optional, Sequence

from .interfaces import IValidationService
from .base_service import BaseService
from ..models import ExportSettings, SizeControlType, SliceDescriptor
from ..result_types import ValidationResult
from ..timecode import parse_timecode

MIN_BITRATE_MBPS = 0.5
MAX_BITRATE_MBPS = 1000

# Error codes
REQUIRED = 'required'
NOT_A_NUMBER = 'not_a_number'
BELOW_MINIMUM = 'below_minimum'
ABOVE_MAXIMUM = 'above_maximum'


def _as_number(value: Any) -> Optional[float]:
    """Numeric value of a bitrate input, or None if it is not a number"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


class ValidationService(BaseService, IValidationService):
    """Service for validation operations"""

    def __init__(self):
        super().__init__("ValidationService")

    def validate(self, settings: ExportSettings) -> ValidationResult:
        """
        Check an export settings record

        Rules are evaluated independently and reported in a fixed order:
        file name, bitrate (MBPS only), export path (when not using the
        first video's directory).
        """
        result = ValidationResult.create_valid()

        if not settings.file_name or not settings.file_name.strip():
            result.add_field_error('fileName', REQUIRED, "Please enter a file name")

        if settings.size_control_type == SizeControlType.MBPS:
            self._check_bitrate(settings.bitrate, result)

        if not settings.use_first_video_path and not settings.export_path:
            result.add_field_error('exportPath', REQUIRED, "Please choose an export directory")

        if result.has_errors:
            self._log_operation("validate", f"{len(result.errors)} error(s): "
                                f"{', '.join(result.field_errors)}", level="debug")
        return result

    def _check_bitrate(self, bitrate: Any, result: ValidationResult):
        if bitrate is None or (isinstance(bitrate, str) and not bitrate.strip()):
            result.add_field_error('bitrate', REQUIRED, "Please enter a bitrate")
            return

        value = _as_number(bitrate)
        if value is None:
            result.add_field_error('bitrate', NOT_A_NUMBER, "Bitrate must be a number")
        elif value < MIN_BITRATE_MBPS:
            result.add_field_error('bitrate', BELOW_MINIMUM,
                                   f"Bitrate must be at least {MIN_BITRATE_MBPS} Mbps")
        elif value > MAX_BITRATE_MBPS:
            result.add_field_error('bitrate', ABOVE_MAXIMUM,
                                   f"Bitrate must be at most {MAX_BITRATE_MBPS} Mbps")

    def validate_slices(self, slices: Sequence[SliceDescriptor]) -> ValidationResult:
        """
        Check the slice list about to be exported

        An empty list is an error. Time strings that would not parse, or a
        start that is not before the end, are only warnings: ffmpeg gets
        the strings exactly as typed.
        """
        if not slices:
            return ValidationResult.create_valid().add_field_error(
                'slices', REQUIRED, "Please add at least one video"
            )

        result = ValidationResult.create_valid()
        for descriptor in slices:
            start = self._check_time(descriptor, 'start_time', result)
            end = self._check_time(descriptor, 'end_time', result)
            if start is not None and end is not None and start >= end:
                result.add_warning(
                    f"{descriptor.file_name}: start {descriptor.start_time} "
                    f"is not before end {descriptor.end_time}"
                )

        if result.has_warnings():
            self._log_operation("validate_slices", f"{len(result.warnings)} warning(s)", level="debug")
        return result

    @staticmethod
    def _check_time(descriptor: SliceDescriptor, attribute: str,
                    result: ValidationResult) -> Optional[float]:
        text = getattr(descriptor, attribute)
        if text is None or not str(text).strip():
            return None
        seconds = parse_timecode(str(text))
        if seconds is None:
            label = 'start' if attribute == 'start_time' else 'end'
            result.add_warning(f"{descriptor.file_name}: {label} time '{text}' is not hh:mm:ss or mm:ss")
        return seconds
