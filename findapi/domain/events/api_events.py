"""Domain Events related to API calls, token refreshes and rate limiting.

Emitted by the dispatcher and the token cache through an optional
``event_hook`` callable. Without a hook they are only logged at DEBUG.
"""

from dataclasses import dataclass, field
import time
from typing import Callable, Optional

# Base Event Class
@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass

EventHook = Callable[[DomainEvent], None]

# --- Specific API Events ---

@dataclass
class ApiCallInitiated(DomainEvent):
    """Event triggered when a request is about to be put on the wire."""
    method: str
    path: str
    attempt_number: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class ApiCallSucceeded(DomainEvent):
    """Event triggered when a request returned a response that is handed back to the caller."""
    method: str
    path: str
    status_code: int
    latency_ms: float
    attempts: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class ApiCallFailed(DomainEvent):
    """Event triggered when a request fails definitively."""
    method: str
    path: str
    error_type: str
    error_message: str
    timestamp: float = field(default_factory=time.time)

@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a 429 response schedules another attempt."""
    method: str
    path: str
    attempt_number: int
    delay_seconds: float
    timestamp: float = field(default_factory=time.time)

@dataclass
class TokenRefreshed(DomainEvent):
    """Event triggered when the token cache stored a new token."""
    expires_at: float  # Unix seconds
    timestamp: float = field(default_factory=time.time)

@dataclass
class TokenRefreshFailed(DomainEvent):
    """Event triggered when the credential exchange failed."""
    error_type: str
    error_message: str
    timestamp: float = field(default_factory=time.time)


def dispatch_event(event: DomainEvent, hook: Optional[EventHook], logger) -> None:
    """Logs an event and forwards it to the hook, if any.

    Errors raised by the hook are logged and never interrupt a request.
    """
    logger.debug(f"EVENT: {event}")
    if hook is None:
        return
    try:
        hook(event)
    except Exception as e:
        logger.warning(f"Event hook failed for {type(event).__name__}: {e}", exc_info=True)
