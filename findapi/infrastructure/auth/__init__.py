"""Authentication infrastructure: the bearer token cache."""
