"""API Resilience Implementations.

Contains the request dispatcher, which retries rate-limited (429) requests
within a small fixed budget, and the Retry-After header parsing it relies on.
Bounded Context: API Resilience
"""
