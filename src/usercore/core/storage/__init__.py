"""Synchronisation primitives for storage backends."""

from .rw_lock import ReadWriteLock

__all__ = ["ReadWriteLock"]
