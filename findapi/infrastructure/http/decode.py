"""Shared decode contract for API responses.

Maps a raw response either to a typed result or to an error: non-2xx
statuses become `APIError` (status code + raw body), bodies that do not
fit the expected shape become `DecodeError`.
"""

import functools
import logging
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from findapi.domain.errors import APIError, DecodeError

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=128)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


async def decode_response(response: httpx.Response, shape: Optional[Any] = None) -> Any:
    """Decodes a JSON response into `shape`.

    Args:
        response: The raw response returned by the dispatcher.
        shape: Target type (dataclass, TypedDict, pydantic model, container
            type...). If None, only the status is checked.

    Returns:
        The validated value, or None when no shape was given.

    Raises:
        APIError: If the status is outside [200, 300).
        DecodeError: If the body cannot be parsed into `shape`.
    """
    try:
        await response.aread()
        if not 200 <= response.status_code < 300:
            raise APIError(response.status_code, response.text)

        if shape is None:
            return None

        try:
            return _adapter(shape).validate_json(response.content)
        except ValidationError as e:
            logger.debug(f"Failed to decode response into {shape!r}: {e}")
            raise DecodeError(f"failed to decode response: {e}") from e
    finally:
        await response.aclose()
