#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Path utilities for slice file names, export directories and output names

Source paths arrive from file dialogs and drag-and-drop on any platform, so
both '/' and '\\' are treated as separators regardless of the host OS.
"""

import re
import unicodedata
import platform
from typing import Optional

SEPARATOR_PATTERN = re.compile(r'[\\/]')
UNKNOWN_FILE_NAME = "unknown"


def last_path_segment(path: str, fallback: str = UNKNOWN_FILE_NAME) -> str:
    """Return the text after the last path separator

    Args:
        path: Absolute or relative source path
        fallback: Returned when the path has no separator or ends with one

    Returns:
        The file name portion of the path
    """
    if not path:
        return fallback
    parts = SEPARATOR_PATTERN.split(path)
    if len(parts) < 2:
        return fallback
    return parts[-1] or fallback


def parent_directory(path: str) -> Optional[str]:
    """Return everything before the last path separator

    Returns None when the path contains no separator.
    """
    if not path:
        return None
    index = max(path.rfind('/'), path.rfind('\\'))
    if index < 0:
        return None
    return path[:index]


class PathSanitizer:
    """Path component sanitization for cross-platform output names"""

    # Platform-specific invalid characters
    INVALID_CHARS = {
        'windows': '<>:"|?*',
        'posix': '',
        'universal': ''
    }

    # Control characters (0x00-0x1f) are invalid on all platforms
    CONTROL_CHARS = ''.join(chr(i) for i in range(32))

    # Windows reserved names
    RESERVED_NAMES = {
        'CON', 'PRN', 'AUX', 'NUL',
        'COM1', 'COM2', 'COM3', 'COM4', 'COM5',
        'COM6', 'COM7', 'COM8', 'COM9',
        'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5',
        'LPT6', 'LPT7', 'LPT8', 'LPT9'
    }

    @staticmethod
    def get_platform() -> str:
        """Detect current platform for appropriate sanitization

        Returns:
            'windows', 'posix', or 'universal'
        """
        system = platform.system().lower()
        if system == 'windows':
            return 'windows'
        elif system in ('linux', 'darwin'):
            return 'posix'
        else:
            return 'universal'

    @staticmethod
    def sanitize_component(text: str, platform_type: Optional[str] = None) -> str:
        """Sanitize an output file name

        Args:
            text: File name to sanitize
            platform_type: Target platform ('windows', 'posix', 'universal')
                         If None, auto-detects current platform

        Returns:
            File name safe to join onto an export directory
        """
        if not text:
            return '_'

        if platform_type is None:
            platform_type = PathSanitizer.get_platform()

        text = unicodedata.normalize('NFKC', text)

        for char in PathSanitizer.CONTROL_CHARS:
            text = text.replace(char, '')

        for char in PathSanitizer.INVALID_CHARS.get(platform_type, ''):
            text = text.replace(char, '_')

        # No directory traversal through the output name
        text = text.replace('/', '_').replace('\\', '_')

        if platform_type == 'windows':
            parts = text.split('.')
            if parts[0].upper() in PathSanitizer.RESERVED_NAMES:
                parts[0] = f'_{parts[0]}'
                text = '.'.join(parts)

        text = text.strip('. ')

        if len(text) > 255:
            text = text[:255]

        if not text:
            text = '_'

        return text
