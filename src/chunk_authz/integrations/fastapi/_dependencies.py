"""FastAPI dependencies for chunk authorization."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from fastapi import Depends, Request

from chunk_authz._filter import filter_authorized
from chunk_authz._permissions import PermissionSet
from chunk_authz._types import AuthorizerLike

__all__ = ["AuthorizedChunksDep", "get_permissions"]


def get_permissions(request: Request) -> PermissionSet:
    """Sentinel dependency — override via ``app.dependency_overrides[get_permissions]``.

    Raises ``NotImplementedError`` if not overridden, so no route can
    filter chunks without an explicitly provided permission set.

    Example::

        from chunk_authz.integrations.fastapi import get_permissions

        app.dependency_overrides[get_permissions] = permissions_from_token
    """
    raise NotImplementedError(
        "Override get_permissions via app.dependency_overrides[get_permissions]. "
        "See chunk-authz docs for configuration guide."
    )


def AuthorizedChunksDep(  # noqa: N802
    retriever: Callable[..., Sequence[Any]],
    *,
    authorizer: AuthorizerLike | None = None,
) -> Any:
    """FastAPI dependency that returns only the chunks the caller may see.

    *retriever* is itself a FastAPI dependency (it may take query
    parameters, other dependencies, or be async) that returns ranked
    chunk candidates. Its result is passed through
    :func:`~chunk_authz.filter_authorized` with the permission set
    resolved from :func:`get_permissions`.

    Args:
        retriever: Dependency callable returning ranked chunk candidates.
        authorizer: Optional replacement for ``DefaultAuthorizer``.

    Returns:
        A FastAPI ``Depends`` instance.

    Example::

        def search(q: str) -> list[ChunkDescriptor]:
            return index.search(q)

        @app.get("/context")
        async def context(chunks: list = AuthorizedChunksDep(search)) -> list[dict]:
            return [{"id": c.id} for c in chunks]
    """

    def _resolve(
        chunks: Sequence[Any] = Depends(retriever),
        permissions: PermissionSet = Depends(get_permissions),
    ) -> list[Any]:
        return filter_authorized(permissions, chunks, authorizer=authorizer)

    return Depends(_resolve)
