#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Export settings model

Holds the single ExportSettings record of a session. Assignments are never
validated here; the export controller runs ValidationService.validate on
the snapshot it is about to export.
"""

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from PySide6.QtCore import QObject, Signal

from .models import ExportSettings, SliceDescriptor
from .path_utils import parent_directory
from .result_types import NoOpReason, StoreOperationResult


def derive_export_path(settings: ExportSettings,
                       slices: Sequence[SliceDescriptor]) -> Optional[str]:
    """
    Resolve the directory an export should be written to

    With ``use_first_video_path`` and at least one slice, this is the
    directory of the first slice's source file (None if its path has no
    separator). Otherwise it is ``export_path``, or None when that is empty.
    """
    if settings.use_first_video_path and slices:
        return parent_directory(slices[0].file_path)
    return settings.export_path or None


class ExportSettingsModel(QObject):
    """Session-scoped holder of the current ExportSettings record"""

    settings_changed = Signal(object)  # ExportSettings

    def __init__(self, initial: Optional[ExportSettings] = None, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger('SimpleCut.ExportSettingsModel')
        self._settings = initial or ExportSettings()

    @property
    def settings(self) -> ExportSettings:
        return self._settings

    def set_all(self, settings: Union[ExportSettings, Mapping[str, Any]]) -> StoreOperationResult:
        """Replace the record wholesale

        Mappings may use snake_case or camelCase names; missing names take
        the ExportSettings defaults.
        """
        if not isinstance(settings, ExportSettings):
            try:
                settings = ExportSettings.from_dict(settings)
            except ValueError as e:
                self.logger.warning(f"set_all rejected: {e}")
                return StoreOperationResult.noop(NoOpReason.INVALID_VALUE, warnings=[str(e)])

        self._settings = settings
        self.logger.debug(f"Export settings replaced: {settings.to_dict()}")
        self.settings_changed.emit(settings)
        return StoreOperationResult.applied(settings)

    def set_field(self, name: str, value: Any) -> StoreOperationResult:
        """Replace one field, by snake_case or camelCase name"""
        try:
            updated = self._settings.with_field(name, value)
        except KeyError:
            message = f"Unknown export setting '{name}' was ignored"
            self.logger.warning(message)
            return StoreOperationResult.noop(NoOpReason.UNKNOWN_FIELD, warnings=[message], field=name)
        except ValueError:
            message = f"Invalid value {value!r} for export setting '{name}'"
            self.logger.warning(message)
            return StoreOperationResult.noop(NoOpReason.INVALID_VALUE, warnings=[message], field=name)

        self._settings = updated
        self.settings_changed.emit(updated)
        return StoreOperationResult.applied(updated, field=ExportSettings.field_name(name))

    def derive_export_path(self, slices: Sequence[SliceDescriptor]) -> Optional[str]:
        """derive_export_path() against the current record"""
        return derive_export_path(self._settings, slices)
