"""Periodic job entrypoints."""
