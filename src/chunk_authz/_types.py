"""Shared protocols and type aliases for chunk-authz."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chunk_authz._permissions import PermissionSet

__all__ = [
    "AuthorizerLike",
    "ChunkLike",
    "OnMalformedChunk",
    "OnUnregisteredSource",
    "RetrievedLike",
]

# Valid values for AuthzConfig.on_malformed_chunk.
OnMalformedChunk = Literal["ignore", "warn", "log"]

# Valid values for AuthzConfig.on_unregistered_source.
OnUnregisteredSource = Literal["deny", "raise"]


@runtime_checkable
class ChunkLike(Protocol):
    """Structural type for retrieved content chunks.

    Any object with ``security_label`` and ``tags`` attributes satisfies
    this protocol. Works with dataclasses, ORM rows, named tuples and
    retrieval result objects, no inheritance required.

    Example::

        @dataclass
        class Hit:
            id: str
            security_label: str | None
            tags: list[str]

        assert isinstance(Hit("c1", "public", []), ChunkLike)
    """

    @property
    def security_label(self) -> str | None: ...

    @property
    def tags(self) -> Iterable[str] | None: ...


@runtime_checkable
class RetrievedLike(Protocol):
    """A ranked retrieval hit that references a chunk by identifier."""

    @property
    def chunk_id(self) -> object: ...


@runtime_checkable
class AuthorizerLike(Protocol):
    """Anything that can decide whether a permission set may see a chunk."""

    def is_authorized(self, permissions: PermissionSet, chunk: object) -> bool: ...
