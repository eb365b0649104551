"""Memory module."""

from .service import IMemoryService, MemoryService, similarity

__all__ = ["IMemoryService", "MemoryService", "similarity"]
