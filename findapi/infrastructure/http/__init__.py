"""HTTP adapters: the httpx transport and the shared response decoder."""
