"""ChunkSourceRegistry — stores and retrieves chunk-source mappings."""

from __future__ import annotations

from typing import Any

from sqlalchemy.inspection import inspect as sa_inspect

from chunk_authz.sources._base import ChunkSource

__all__ = ["ChunkSourceRegistry", "get_default_registry"]


class ChunkSourceRegistry:
    """Registry that maps chunk models to their label/tag columns.

    Thread-safe for reads after startup. Registration replaces any
    previous mapping for the same model.

    Example::

        registry = ChunkSourceRegistry()
        registry.register(Chunk, label=Chunk.security_label,
                          tags=Chunk.tags, tag_name=ChunkTag.name)
        source = registry.lookup(Chunk)
    """

    def __init__(self) -> None:
        self._sources: dict[type, ChunkSource] = {}
        self._pending: dict[type, tuple[str, str | None, str]] = {}

    def register(
        self,
        model: type,
        *,
        label: Any,
        tags: Any = None,
        tag_name: Any = None,
        name: str | None = None,
    ) -> ChunkSource:
        """Register the label column and tags relationship of *model*.

        Args:
            model: The SQLAlchemy model class holding chunks.
            label: The label column attribute (e.g. ``Chunk.security_label``).
            tags: The relationship attribute to tag rows (e.g. ``Chunk.tags``).
            tag_name: The tag text column (e.g. ``ChunkTag.name``). Required
                when *tags* is given.
            name: Optional name for logging. Defaults to the model name.

        Returns:
            The stored ``ChunkSource``.

        Raises:
            ValueError: If *tags* is given without *tag_name*.
        """
        if (tags is None) != (tag_name is None):
            raise ValueError("tags and tag_name must be given together")
        source = ChunkSource(
            model=model,
            label=label,
            tags=tags,
            tag_name=tag_name,
            name=name or model.__name__,
        )
        self._sources[model] = source
        self._pending.pop(model, None)
        return source

    def register_lazy(
        self,
        model: type,
        *,
        label: str,
        tags: str | None = None,
        tag_name: str = "name",
    ) -> None:
        """Register *model* by attribute names, resolved on first lookup.

        Used by ``@chunk_source``, which runs before string-declared
        relationships can be resolved.
        """
        self._sources.pop(model, None)
        self._pending[model] = (label, tags, tag_name)

    def _resolve(self, model: type) -> ChunkSource:
        label, tags, tag_name = self._pending[model]
        tags_attr: Any = None
        tag_name_attr: Any = None
        if tags is not None:
            tags_attr = getattr(model, tags)
            tag_model: type = sa_inspect(model).relationships[tags].mapper.class_
            tag_name_attr = getattr(tag_model, tag_name)
        return self.register(
            model, label=getattr(model, label), tags=tags_attr, tag_name=tag_name_attr
        )

    def lookup(self, model: type) -> ChunkSource | None:
        """Return the mapping for *model*, or ``None`` if unregistered."""
        if model in self._pending:
            return self._resolve(model)
        return self._sources.get(model)

    def has_source(self, model: type) -> bool:
        return model in self._sources or model in self._pending

    def registered_models(self) -> set[type]:
        return set(self._sources) | set(self._pending)

    def clear(self) -> None:
        """Remove all registered mappings.

        Primarily useful in test teardown to reset the registry state
        between tests.
        """
        self._sources.clear()
        self._pending.clear()


# Module-level default registry (singleton).
_default_registry = ChunkSourceRegistry()


def get_default_registry() -> ChunkSourceRegistry:
    """Return the global default (singleton) chunk-source registry.

    This is the registry used by ``@chunk_source`` and
    ``authorize_chunk_query`` when no explicit registry is provided.
    """
    return _default_registry
