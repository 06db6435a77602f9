"""ChunkSource dataclass — how an ORM model stores chunk label and tags."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["ChunkSource"]


@dataclass(frozen=True, slots=True)
class ChunkSource:
    """Mapping of one SQLAlchemy model onto chunk authorization metadata.

    Attributes:
        model: The mapped chunk model class.
        label: Column attribute holding the optional security label.
        tags: Relationship attribute to the chunk's tag rows, or ``None``
            when the model has no tags.
        tag_name: Column attribute on the tag model holding the tag text.
        name: Human-readable name (used in logging).
    """

    model: type
    label: Any
    tags: Any = None
    tag_name: Any = None
    name: str = ""
