"""
Conversions between caption-track timestamps, display timestamps and seconds.

Display timestamps never carry an hour component: ``format_timestamp`` folds
hours into minutes, while ``parse_timestamp`` still accepts ``H:MM:SS``.
"""
from __future__ import annotations

import math


def format_timestamp(raw: str) -> str:
    """Turn ``HH:MM:SS.mmm`` or ``MM:SS.mmm`` into ``<minutes>:<SS>``.

    Seconds are floored, never rounded.
    """
    parts = raw.strip().split(":")
    try:
        if len(parts) == 3:
            total_minutes = int(parts[0]) * 60 + int(parts[1])
            seconds = math.floor(float(parts[2]))
        elif len(parts) == 2:
            total_minutes = int(parts[0])
            seconds = math.floor(float(parts[1]))
        else:
            raise ValueError(f"Unexpected caption timestamp: {raw!r}")
    except ValueError as error:
        raise ValueError(f"Unexpected caption timestamp: {raw!r}") from error

    return f"{total_minutes}:{seconds:02d}"


def parse_timestamp(display: str | None) -> int:
    """Seconds for ``M:SS`` or ``H:MM:SS``; ``0`` for anything else."""
    if not display:
        return 0

    parts = display.strip().split(":")
    if len(parts) not in (2, 3):
        return 0

    try:
        numbers = [int(part) for part in parts]
    except ValueError:
        return 0

    if len(numbers) == 2:
        minutes, seconds = numbers
        return minutes * 60 + seconds

    hours, minutes, seconds = numbers
    return hours * 3600 + minutes * 60 + seconds


def timestamp_to_seconds(raw: str) -> float:
    """Offset in seconds of a caption-track timestamp, milliseconds kept."""
    parts = raw.strip().split(":")
    seconds = 0.0
    for part in parts:
        seconds = seconds * 60 + float(part)
    return seconds


def seconds_to_vtt(offset: float) -> str:
    """``HH:MM:SS.mmm`` for an offset in seconds."""
    millis = int(round(max(offset, 0.0) * 1000))
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    seconds, millis = divmod(millis, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"
