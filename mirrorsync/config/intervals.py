"""
Interval Parsing

Turns user-supplied interval strings into timedeltas. A bare integer means
minutes; otherwise a number followed by one unit letter:
s (seconds), m (minutes), h (hours), d (days), y (365-day years).

Author: mirrorsync Project
License: MIT
"""

import re
from datetime import timedelta

INTERVAL_PATTERN = re.compile(r"^(\d+)([smhdy])$", re.IGNORECASE)

UNIT_TO_TIMEDELTA = {
    "s": lambda value: timedelta(seconds=value),
    "m": lambda value: timedelta(minutes=value),
    "h": lambda value: timedelta(hours=value),
    "d": lambda value: timedelta(days=value),
    "y": lambda value: timedelta(days=value * 365),
}


def parse_interval(text: str) -> timedelta:
    """
    Parse an interval string.
    
    Args:
        text: Interval such as "15", "30s", "1h", "2d" or "1y"
        
    Returns:
        Parsed interval
        
    Raises:
        ValueError: If the string is empty, malformed, or not positive
    """
    if text is None or not str(text).strip():
        raise ValueError("Time interval cannot be empty")
    
    value = str(text).strip()
    
    if value.isdigit():
        interval = timedelta(minutes=int(value))
    else:
        match = INTERVAL_PATTERN.match(value)
        if not match:
            raise ValueError(
                f"Invalid time interval format: {value}. "
                "Use a number of minutes or a format like 15s, 1m, 1h, 1d, 1y"
            )
        amount = int(match.group(1))
        unit = match.group(2).lower()
        interval = UNIT_TO_TIMEDELTA[unit](amount)
    
    if interval <= timedelta(0):
        raise ValueError(f"Time interval must be positive: {value}")
    
    return interval
