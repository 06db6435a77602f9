"""ChunkDescriptor — the authorization-relevant projection of a retrieved chunk."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from chunk_authz._permissions import normalize_token
from chunk_authz._types import ChunkLike
from chunk_authz.exceptions import InvalidInput

__all__ = ["ChunkDescriptor", "as_chunk_descriptor"]


def _coerce_tags(tags: Iterable[str] | None) -> tuple[str, ...]:
    if tags is None:
        return ()
    if isinstance(tags, (str, bytes)):
        raise InvalidInput("tags must be a collection of strings, not a bare string")
    try:
        items = tuple(tags)
    except TypeError:
        raise InvalidInput(
            f"tags must be a collection of strings, got {type(tags).__name__}"
        ) from None
    for tag in items:
        if not isinstance(tag, str):
            raise InvalidInput(f"tag values must be strings, got {tag!r}")
    # An empty tag still restricts the chunk; no grant can match it.
    return items


@dataclass(frozen=True, slots=True)
class ChunkDescriptor:
    """Label and tags of one retrieved chunk, as seen by the decision function.

    A chunk has at most one security label and any number of tags. An
    absent or empty label means the chunk is unclassified. Tag order is
    preserved for traceability but never affects a verdict.

    Attributes:
        id: Opaque identifier, used only for logging and explanations.
        security_label: Optional single classification value.
        tags: Tags in the order supplied by the retrieval layer.

    Example::

        chunk = ChunkDescriptor(id="doc-1#3", security_label="Finance")
        assert chunk.is_classified
        assert chunk.normalized_label == "finance"
    """

    id: Any = None
    security_label: str | None = None
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.security_label is not None and not isinstance(self.security_label, str):
            raise InvalidInput(
                f"security_label must be a string or None, got {self.security_label!r}"
            )
        # Use object.__setattr__ because the dataclass is frozen
        object.__setattr__(self, "tags", _coerce_tags(self.tags))

    @classmethod
    def from_mapping(
        cls,
        metadata: Mapping[str, Any],
        *,
        id_key: str = "id",
        label_key: str = "security_label",
        tags_key: str = "tags",
    ) -> ChunkDescriptor:
        """Build a descriptor from vector-store metadata.

        Missing keys mean "no id", "no label" and "no tags" respectively.

        Example::

            chunk = ChunkDescriptor.from_mapping(
                {"chunk_id": "c7", "classification": "hr"},
                id_key="chunk_id",
                label_key="classification",
            )
        """
        if not isinstance(metadata, Mapping):
            raise InvalidInput(f"expected a mapping, got {type(metadata).__name__}")
        return cls(
            id=metadata.get(id_key),
            security_label=metadata.get(label_key),
            tags=metadata.get(tags_key),  # type: ignore[arg-type]
        )

    @property
    def normalized_label(self) -> str | None:
        """Case-normalized label, or ``None`` when unclassified."""
        if not self.security_label:
            return None
        return normalize_token(self.security_label)

    @property
    def normalized_tags(self) -> frozenset[str]:
        return frozenset(normalize_token(tag) for tag in self.tags)

    @property
    def is_classified(self) -> bool:
        return bool(self.security_label)

    @property
    def is_tagged(self) -> bool:
        return bool(self.tags)

    @property
    def is_unrestricted(self) -> bool:
        """True when the chunk carries no access-control metadata at all."""
        return not self.is_classified and not self.is_tagged


def as_chunk_descriptor(chunk: object) -> ChunkDescriptor:
    """Project *chunk* onto a validated ``ChunkDescriptor``.

    Accepts a ``ChunkDescriptor`` (returned as-is), a metadata mapping with
    a ``security_label`` or ``tags`` key, or any object satisfying the
    ``ChunkLike`` protocol.

    Raises:
        InvalidInput: If *chunk* is ``None`` or cannot be interpreted.
    """
    if chunk is None:
        raise InvalidInput("chunk is required")
    if isinstance(chunk, ChunkDescriptor):
        return chunk
    if isinstance(chunk, Mapping):
        # A mapping with neither key is not chunk metadata (e.g. a bare retrieval hit).
        if "security_label" not in chunk and "tags" not in chunk:
            raise InvalidInput("mapping has no security_label or tags key")
        return ChunkDescriptor.from_mapping(chunk)  # type: ignore[arg-type]
    if isinstance(chunk, ChunkLike):
        return ChunkDescriptor(
            id=getattr(chunk, "id", None),
            security_label=chunk.security_label,
            tags=chunk.tags,  # type: ignore[arg-type]
        )
    raise InvalidInput(
        f"{type(chunk).__name__} has no security_label/tags and is not a chunk mapping"
    )
