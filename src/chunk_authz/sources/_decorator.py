"""@chunk_source decorator — register ORM models that store chunks."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from chunk_authz.sources._registry import ChunkSourceRegistry, get_default_registry

__all__ = ["chunk_source"]

M = TypeVar("M", bound=type)


def chunk_source(
    *,
    label: str = "security_label",
    tags: str | None = None,
    tag_name: str = "name",
    registry: ChunkSourceRegistry | None = None,
) -> Callable[[M], M]:
    """Class decorator that registers a chunk model by attribute names.

    Attribute names are resolved on the decorated class (and, for
    *tag_name*, on the related tag class) the first time they are needed,
    so relationships declared by string can still be configured later.

    Args:
        label: Name of the label column attribute.
        tags: Name of the tags relationship attribute, if any.
        tag_name: Name of the tag text column on the tag model.
        registry: Optional custom registry. Defaults to the global registry.

    Returns:
        A decorator that registers the class and returns it unchanged.

    Example::

        @chunk_source(label="security_label", tags="tags")
        class Chunk(Base):
            __tablename__ = "chunks"
            ...
    """

    def decorator(model: M) -> M:
        target = registry if registry is not None else get_default_registry()
        target.register_lazy(model, label=label, tags=tags, tag_name=tag_name)
        return model

    return decorator
