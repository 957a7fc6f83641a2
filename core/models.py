#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data models for slices, export settings and export requests

All records are frozen dataclasses: the session store hands out snapshots
and edits happen by replacing a record, never by mutating a shared one.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class SizeControlType(Enum):
    """How output size is governed."""
    NONE = "none"  # Uncontrolled
    MBPS = "mbps"  # Capped at an explicit bitrate
    X264 = "x264"  # libx264 preset chooses the rate


class AudioMergeType(Enum):
    """How multi-track audio is handled."""
    NONE = "none"  # Keep tracks untouched
    AMIX = "amix"  # Mix all tracks down with the amix filter
    BOTH = "both"  # Produce one mixed and one untouched output
    MERGE = "merge"  # Mixed-down half of a BOTH export (request only)

    @property
    def mixes_audio(self) -> bool:
        return self in (AudioMergeType.AMIX, AudioMergeType.MERGE)


class MoveDirection(Enum):
    UP = "up"
    DOWN = "down"


# camelCase names used by the settings form and the export wire format
SLICE_FIELD_ALIASES = {
    'fileName': 'file_name',
    'filePath': 'file_path',
    'startTime': 'start_time',
    'endTime': 'end_time',
}

SETTINGS_FIELD_ALIASES = {
    'fileName': 'file_name',
    'sizeControlType': 'size_control_type',
    'audioMergeType': 'audio_merge_type',
    'exportPath': 'export_path',
    'useFirstVideoPath': 'use_first_video_path',
}


def _coerce_enum(enum_type, value):
    if isinstance(value, enum_type):
        return value
    return enum_type(value)


@dataclass(frozen=True)
class SliceDescriptor:
    """
    One trim unit over a source file.

    ``start_time``/``end_time`` of None mean "not set yet"; the export
    backend decides what an unset boundary means.
    """
    key: str
    order: int
    file_name: str
    file_path: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @property
    def has_trim(self) -> bool:
        return self.start_time is not None or self.end_time is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire form"""
        return {
            'key': self.key,
            'order': self.order,
            'fileName': self.file_name,
            'filePath': self.file_path,
            'startTime': self.start_time,
            'endTime': self.end_time,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SliceDescriptor':
        """Create from a snake_case or camelCase mapping"""
        values = {SLICE_FIELD_ALIASES.get(name, name): value for name, value in data.items()}
        return cls(
            key=values.get('key', '') or '',
            order=int(values.get('order', 0) or 0),
            file_name=values.get('file_name', '') or '',
            file_path=values.get('file_path', '') or '',
            start_time=values.get('start_time'),
            end_time=values.get('end_time'),
        )


@dataclass(frozen=True)
class ExportSettings:
    """
    Export policy for one session.

    Assignment never validates; see ValidationService.validate for the
    rules a record must pass before it is exported.
    """
    file_name: str = ""
    bitrate: Optional[float] = 6
    size_control_type: SizeControlType = SizeControlType.MBPS
    audio_merge_type: AudioMergeType = AudioMergeType.NONE
    export_path: str = ""
    use_first_video_path: bool = True

    def __post_init__(self):
        # Accept the wire strings ("mbps", "both", ...) for the enum fields
        object.__setattr__(self, 'size_control_type',
                           _coerce_enum(SizeControlType, self.size_control_type))
        object.__setattr__(self, 'audio_merge_type',
                           _coerce_enum(AudioMergeType, self.audio_merge_type))

    @staticmethod
    def field_name(name: str) -> Optional[str]:
        """Map a snake_case or camelCase name to the dataclass field, or None"""
        canonical = SETTINGS_FIELD_ALIASES.get(name, name)
        if canonical in {f.name for f in fields(ExportSettings)}:
            return canonical
        return None

    def with_field(self, name: str, value: Any) -> 'ExportSettings':
        """Copy with one field replaced

        Raises:
            KeyError: unknown field name
            ValueError: value not valid for an enum field
        """
        canonical = self.field_name(name)
        if canonical is None:
            raise KeyError(name)
        return replace(self, **{canonical: value})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire form"""
        return {
            'fileName': self.file_name,
            'bitrate': self.bitrate,
            'sizeControlType': self.size_control_type.value,
            'audioMergeType': self.audio_merge_type.value,
            'exportPath': self.export_path,
            'useFirstVideoPath': self.use_first_video_path,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ExportSettings':
        """Create settings from a snake_case or camelCase mapping

        Unknown keys are ignored; missing keys take the defaults.
        """
        values = {}
        for name, value in data.items():
            canonical = cls.field_name(name)
            if canonical is not None:
                values[canonical] = value
        return cls(**values)


@dataclass(frozen=True)
class ExportRequest:
    """Immutable settings + slice snapshot for one output file"""
    slices: Tuple[SliceDescriptor, ...]
    settings: ExportSettings

    def __post_init__(self):
        object.__setattr__(self, 'slices', tuple(self.slices))

    @property
    def audio_merge_type(self) -> AudioMergeType:
        return self.settings.audio_merge_type

    def to_dict(self) -> Dict[str, Any]:
        return {
            'slices': [s.to_dict() for s in self.slices],
            'settings': self.settings.to_dict(),
        }
