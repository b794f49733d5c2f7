"""Concurrency primitives shared by the client (asyncio reader-writer lock)."""
