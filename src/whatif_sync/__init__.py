"""Offline synchronization and rendering of the What If? article archive."""

__version__ = "0.1.0"
