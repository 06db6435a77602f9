"""filter_authorized() — order-preserving authorization of retrieved chunks."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from chunk_authz._audit import log_filter_summary, report_malformed_record
from chunk_authz._checks import DefaultAuthorizer, require_permissions
from chunk_authz._permissions import PermissionSet
from chunk_authz._types import AuthorizerLike
from chunk_authz.config._config import AuthzConfig, get_global_config
from chunk_authz.exceptions import InvalidInput, MalformedRecord

__all__ = ["filter_authorized", "filter_retrieved"]

logger = logging.getLogger("chunk_authz")

T = TypeVar("T")
H = TypeVar("H")


def _admit(
    permissions: PermissionSet,
    chunk: object,
    index: int,
    authorizer: AuthorizerLike,
    config: AuthzConfig,
) -> bool:
    """Decide one batch element. Anything other than a clean ``True`` denies."""
    if chunk is None:
        report_malformed_record(
            MalformedRecord(index=index, record=None, reason="chunk is absent"),
            config,
            stacklevel=4,
        )
        return False
    try:
        verdict = authorizer.is_authorized(permissions, chunk)
    except InvalidInput as exc:
        report_malformed_record(
            MalformedRecord(index=index, record=chunk, reason=str(exc)),
            config,
            stacklevel=4,
        )
        return False
    except Exception:
        logger.exception(
            "Authorizer %r failed on chunk at index %d — denied", authorizer, index
        )
        return False
    return verdict is True


def filter_authorized(
    permissions: PermissionSet,
    chunks: Iterable[T | None],
    *,
    authorizer: AuthorizerLike | None = None,
    config: AuthzConfig | None = None,
) -> list[T]:
    """Return the chunks *permissions* may see, in their original order.

    The result is the maximal subsequence of *chunks* accepted by the
    decision function: nothing is re-ranked, deduplicated or copied, and
    the input is not mutated. Filtering the result again returns it
    unchanged.

    A ``None`` or malformed element is dropped and reported according to
    ``config.on_malformed_chunk``; the rest of the batch proceeds. An
    authorizer that raises denies that element only.

    Args:
        permissions: The caller's permission set. Required.
        chunks: Ranked candidates from the retrieval layer.
        authorizer: Optional replacement for ``DefaultAuthorizer``.
        config: Optional config. Defaults to the global config.

    Returns:
        A new list holding the authorized chunks.

    Raises:
        InvalidInput: If *permissions* or *chunks* is absent.

    Example::

        perms = PermissionSet("bob", allowed_labels={"public"})
        context = filter_authorized(perms, retriever.search(query))
    """
    perms = require_permissions(permissions)
    if chunks is None:
        raise InvalidInput("chunks are required")
    cfg = config if config is not None else get_global_config()
    target = authorizer if authorizer is not None else DefaultAuthorizer(config=cfg)

    candidates = list(chunks)
    authorized: list[T] = []
    for index, chunk in enumerate(candidates):
        if _admit(perms, chunk, index, target, cfg):
            authorized.append(chunk)  # type: ignore[arg-type]

    log_filter_summary(user_id=perms.user_id, before=len(candidates), after=len(authorized))
    return authorized


def _hit_chunk_id(hit: Any) -> Any:
    if isinstance(hit, Mapping):
        return hit.get("chunk_id")
    return getattr(hit, "chunk_id", None)


def filter_retrieved(
    permissions: PermissionSet,
    results: Iterable[H | None],
    chunk_store: Mapping[Any, Any],
    *,
    authorizer: AuthorizerLike | None = None,
    config: AuthzConfig | None = None,
) -> list[H]:
    """Filter ranked retrieval hits by looking their chunks up in *chunk_store*.

    Retrievers often return lightweight hits (``chunk_id``, score, rank)
    rather than the chunks themselves. Each hit's chunk is resolved in
    *chunk_store*; a hit whose chunk is not in the store cannot be
    verified and is dropped. Authorized hits are returned unchanged, in
    rank order.

    Args:
        permissions: The caller's permission set. Required.
        results: Ranked hits exposing ``chunk_id`` (attribute or key).
        chunk_store: Mapping of chunk id to chunk.
        authorizer: Optional replacement for ``DefaultAuthorizer``.
        config: Optional config. Defaults to the global config.

    Returns:
        A new list holding the authorized hits.

    Example::

        hits = retriever.retrieve(query, top_k=8)
        hits = filter_retrieved(perms, hits, index.chunks)
    """
    perms = require_permissions(permissions)
    if results is None:
        raise InvalidInput("results are required")
    if chunk_store is None:
        raise InvalidInput("chunk_store is required")
    cfg = config if config is not None else get_global_config()
    target = authorizer if authorizer is not None else DefaultAuthorizer(config=cfg)

    hits = list(results)
    authorized: list[H] = []
    for index, hit in enumerate(hits):
        chunk_id = _hit_chunk_id(hit) if hit is not None else None
        if chunk_id is None:
            report_malformed_record(
                MalformedRecord(index=index, record=hit, reason="hit has no chunk_id"), cfg
            )
            continue
        try:
            chunk = chunk_store.get(chunk_id)
        except TypeError as exc:
            report_malformed_record(
                MalformedRecord(index=index, record=hit, reason=f"unusable chunk_id: {exc}"), cfg
            )
            continue
        if chunk is None:
            logger.debug("Chunk %r is not in the chunk store — hit dropped", chunk_id)
            continue
        if _admit(perms, chunk, index, target, cfg):
            authorized.append(hit)  # type: ignore[arg-type]

    log_filter_summary(user_id=perms.user_id, before=len(hits), after=len(authorized))
    return authorized
