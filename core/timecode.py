#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Trim-point time strings

Slice boundaries are typed by hand into the slice table as ``hh:mm:ss`` or
``mm:ss`` (fractional seconds allowed). They are forwarded to ffmpeg as
typed; parsing is only used to warn about values ffmpeg would reject.
"""

import re
from typing import Optional

TIMECODE_PATTERN = re.compile(
    r'^\s*(?:(?P<hours>\d+):)?(?P<minutes>\d{1,2}):(?P<seconds>\d{1,2}(?:\.\d+)?)\s*$'
)


def parse_timecode(text: Optional[str]) -> Optional[float]:
    """Convert ``hh:mm:ss`` / ``mm:ss`` into seconds

    Returns None for empty or malformed input. Minutes and seconds must be
    below 60 when an hour field is present; in ``mm:ss`` form the minutes
    may exceed 59.
    """
    if text is None:
        return None
    match = TIMECODE_PATTERN.match(text)
    if not match:
        return None

    hours = int(match.group('hours')) if match.group('hours') is not None else None
    minutes = int(match.group('minutes'))
    seconds = float(match.group('seconds'))

    if seconds >= 60:
        return None
    if hours is not None:
        if minutes >= 60:
            return None
        return hours * 3600 + minutes * 60 + seconds
    return minutes * 60 + seconds


def is_valid_timecode(text: Optional[str]) -> bool:
    return parse_timecode(text) is not None


def format_timecode(total_seconds: float) -> str:
    """Format seconds as ``hh:mm:ss`` (milliseconds kept when present)"""
    if total_seconds < 0:
        raise ValueError(f"Time must be non-negative, got {total_seconds}")
    whole = int(total_seconds)
    hours, remainder = divmod(whole, 3600)
    minutes, seconds = divmod(remainder, 60)
    millis = int(round((total_seconds - whole) * 1000))
    if millis == 1000:
        return format_timecode(whole + 1)
    if millis:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
