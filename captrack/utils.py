"""
Shared utility functions for captrack.

Timestamp conversion helpers used by the fetcher and the formatters.
"""

import math
from typing import Optional, Union


def seconds_to_millis(seconds: float) -> int:
    """
    Convert seconds to whole milliseconds, clamping negatives to zero.

    Rounds to the nearest millisecond so that values such as 0.29 do not
    come out one millisecond short.

    Example:
        >>> seconds_to_millis(1.5)
        1500
        >>> seconds_to_millis(-2.0)
        0
    """
    return max(0, int(round(seconds * 1000)))


def seconds_to_timestamp(seconds: float, separator: str = ".") -> str:
    """
    Convert seconds to HH:MM:SS.mmm format.

    Args:
        seconds: Time in seconds as float
        separator: Character between seconds and milliseconds
            ("." for WebVTT, "," for SRT)

    Returns:
        Timestamp string

    Example:
        >>> seconds_to_timestamp(90.5)
        '00:01:30.500'
        >>> seconds_to_timestamp(90.5, separator=",")
        '00:01:30,500'
    """
    total_millis = seconds_to_millis(seconds)
    hours, remainder = divmod(total_millis, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, millis = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}{separator}{millis:03d}"


def seconds_to_srt_timestamp(seconds: float) -> str:
    """Format seconds as SRT timestamp: HH:MM:SS,mmm."""
    return seconds_to_timestamp(seconds, separator=",")


def parse_seconds(value: Optional[str]) -> Optional[float]:
    """
    Parse a decimal seconds attribute such as ``start="1.25"``.

    Returns None for a missing attribute.

    Raises:
        ValueError: If the value is not a finite number
    """
    if value is None:
        return None
    seconds = float(value)
    if not math.isfinite(seconds):
        raise ValueError(f"Non-finite time value: {value}")
    return seconds


def millis_to_seconds(value: Optional[Union[str, int]]) -> Optional[float]:
    """Parse an integer milliseconds attribute (srv3/json3 payloads) to seconds."""
    if value is None:
        return None
    return int(value) / 1000.0
