"""Defines common Value Objects used across the client.

These objects represent simple values like HTTP methods, request paths
and query parameters, ensuring consistency and type safety.
"""

from typing import NewType, Mapping

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings at runtime.
HttpMethod = NewType("HttpMethod", str)        # 'GET', 'POST', ...
ApiPath = NewType("ApiPath", str)              # Path relative to the base URL, e.g. '/simple/v1/blocks'
QueryParams = Mapping[str, str]                # Order-irrelevant query parameters

# === Well-known values ===
FIND_API_URL = "https://api.find.xyz"
AUTH_GENERATE_PATH = ApiPath("/auth/v1/generate")
