"""Chunk sources — map ORM models onto chunk label and tag columns."""

from chunk_authz.sources._base import ChunkSource
from chunk_authz.sources._decorator import chunk_source
from chunk_authz.sources._registry import ChunkSourceRegistry, get_default_registry

__all__ = [
    "ChunkSource",
    "ChunkSourceRegistry",
    "chunk_source",
    "get_default_registry",
]
