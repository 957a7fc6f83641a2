#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Editor session: one slice store and one export settings model

A session is created per editor window and handed to the controllers
explicitly. Nothing here is global.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .export_settings_model import ExportSettingsModel
from .models import ExportSettings, SliceDescriptor
from .slice_store import SliceStore


@dataclass(frozen=True)
class SessionSnapshot:
    """Consistent read of both collections, taken at export time"""
    settings: ExportSettings
    slices: Tuple[SliceDescriptor, ...]


class EditorSession:
    """Exclusively-owned state handle for one editing session"""

    def __init__(self, settings: Optional[ExportSettings] = None):
        self.slices = SliceStore()
        self.export_settings = ExportSettingsModel(settings)

    @classmethod
    def from_settings_manager(cls, manager) -> 'EditorSession':
        """New session seeded with the persisted export defaults"""
        return cls(manager.default_export_settings())

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            settings=self.export_settings.settings,
            slices=self.slices.snapshot()
        )
