"""Playback position formatting shared by the API and the comment panel."""

from __future__ import annotations

import math


def format_timestamp(seconds: float) -> str:
    """Format a playback offset as ``MM:SS``, or ``HH:MM:SS`` past the hour.

    >>> format_timestamp(125)
    '02:05'
    >>> format_timestamp(3725)
    '01:02:05'
    """

    value = float(seconds)
    if value < 0 or not math.isfinite(value):
        raise ValueError(f"timestamp must be a finite, non-negative number: {seconds!r}")

    hours = math.floor(value / 3600)
    minutes = math.floor((value % 3600) / 60)
    secs = math.floor(value % 60)

    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
