"""Domain Event definitions.

Represents significant occurrences (requests, retries, token refreshes)
that observers such as metrics or tests can react to.
"""
