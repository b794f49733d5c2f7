"""Duration helpers shared by the auth service and the CLI.

The credential exchange endpoint expects token validity in the compact
``<h>h<m>m<s>s`` notation (``10m0s``, ``1h0m0s``). The same notation is
accepted on the command line.
"""

import re
from datetime import timedelta

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")

_UNIT_SECONDS = {
    "h": 3600.0,
    "m": 60.0,
    "s": 1.0,
    "ms": 0.001,
}


def _trim(value: float) -> str:
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return text or "0"


def format_duration(duration: timedelta) -> str:
    """Formats a timedelta the way the FindLabs API expects it.

    Examples:
        >>> format_duration(timedelta(minutes=10))
        '10m0s'
        >>> format_duration(timedelta(hours=1))
        '1h0m0s'
        >>> format_duration(timedelta(seconds=90))
        '1m30s'
    """
    total = duration.total_seconds()
    if total == 0:
        return "0s"

    sign = "-" if total < 0 else ""
    total = abs(total)

    if total < 1:
        return f"{sign}{_trim(total * 1000)}ms"

    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours:
        return f"{sign}{int(hours)}h{int(minutes)}m{_trim(seconds)}s"
    if minutes:
        return f"{sign}{int(minutes)}m{_trim(seconds)}s"
    return f"{sign}{_trim(seconds)}s"


def parse_duration(text: str) -> timedelta:
    """Parses a compact duration string (``90s``, ``10m``, ``1h30m``).

    Raises:
        ValueError: If the string is empty or contains an unknown unit.
    """
    value = (text or "").strip()
    if not value:
        raise ValueError("Duration string is empty.")

    position = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(value):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(value):
        raise ValueError(f"Invalid duration: '{text}' (expected e.g. '90s', '10m', '1h30m').")
    return timedelta(seconds=seconds)


def mask_secret(secret: str, visible: int = 4) -> str:
    """Masks a credential or token for log output."""
    if not secret:
        return "<empty>"
    if len(secret) <= visible:
        return "*" * len(secret)
    return f"{secret[:visible]}...({len(secret)} chars)"
