"""Domain model describing one logical API request."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from findapi.domain.models.common import ApiPath, HttpMethod, QueryParams


@dataclass(frozen=True)
class RequestDescriptor:
    """Immutable description of a request handed to the dispatcher.

    Built by endpoint services; `query` is frozen into a read-only mapping.
    """
    method: HttpMethod
    path: ApiPath
    query: QueryParams = field(default_factory=dict)
    requires_auth: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod(self.method.upper()))
        object.__setattr__(self, "query", MappingProxyType(dict(self.query or {})))

    @classmethod
    def get(cls, path: str, query: Optional[QueryParams] = None) -> "RequestDescriptor":
        return cls(method=HttpMethod("GET"), path=ApiPath(path), query=query or {})

    def describe(self) -> str:
        return f"{self.method} {self.path}"
