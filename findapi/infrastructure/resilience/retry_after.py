"""Parsing of the ``Retry-After`` response header.

Servers send the hint either as delay-seconds or as an HTTP-date. Parsers
are tried in order and the first one that understands the value wins; if
none does, a one second default applies. Parsing never raises.
"""

import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 1.0

_INTEGER = re.compile(r"[+-]?\d+")

RetryAfterParser = Callable[[str, datetime], Optional[float]]


def parse_delay_seconds(value: str, now: datetime) -> Optional[float]:
    """``Retry-After: 120``"""
    if not _INTEGER.fullmatch(value):
        return None
    try:
        return float(int(value))
    except (OverflowError, ValueError):
        # Too many digits for int() or too large for a float.
        return None


def parse_http_date(value: str, now: datetime) -> Optional[float]:
    """``Retry-After: Wed, 21 Oct 2015 07:28:00 GMT``

    Returns the signed delta to `now`; a date in the past gives a negative delay.
    """
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return (when - now).total_seconds()


RETRY_AFTER_PARSERS: Sequence[RetryAfterParser] = (
    parse_delay_seconds,
    parse_http_date,
)


def parse_retry_after(
    value: Optional[str],
    now: Optional[datetime] = None,
    default: float = DEFAULT_RETRY_AFTER_SECONDS,
) -> float:
    """Extracts the retry delay in seconds from a ``Retry-After`` header value.

    Args:
        value: Raw header value, or None if the header is absent.
        now: Reference time for HTTP-dates (defaults to the current UTC time).
        default: Delay used when the header is missing or unparseable.

    Returns:
        The delay in seconds. May be zero or negative for dates in the past;
        callers should clamp before sleeping.
    """
    if value is None or not value.strip():
        return default

    text = value.strip()
    reference = now or datetime.now(timezone.utc)
    for parser in RETRY_AFTER_PARSERS:
        delay = parser(text, reference)
        if delay is not None:
            return delay

    logger.debug(f"Unrecognized Retry-After value '{text}', using default {default}s.")
    return default
