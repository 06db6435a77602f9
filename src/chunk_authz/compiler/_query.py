"""authorize_chunk_query() — push chunk authorization into SELECT statements."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Select, false

from chunk_authz._checks import require_permissions
from chunk_authz._permissions import PermissionSet
from chunk_authz.compiler._expression import chunk_filter_expression
from chunk_authz.config._config import AuthzConfig, get_global_config
from chunk_authz.exceptions import UnregisteredChunkSourceError
from chunk_authz.sources._registry import ChunkSourceRegistry, get_default_registry

__all__ = ["authorize_chunk_query"]

logger = logging.getLogger("chunk_authz")


def authorize_chunk_query(
    stmt: Select[Any],
    *,
    permissions: PermissionSet,
    registry: ChunkSourceRegistry | None = None,
    config: AuthzConfig | None = None,
) -> Select[Any]:
    """Apply chunk authorization to a SQLAlchemy SELECT statement.

    Every ORM entity in the statement is looked up in the chunk-source
    registry and filtered with :func:`chunk_filter_expression`. Row order
    is whatever the statement orders by; nothing is re-ranked.

    Entities without a registered mapping are denied (WHERE FALSE), or
    raise ``UnregisteredChunkSourceError`` when
    ``on_unregistered_source="raise"``.

    Args:
        stmt: A SQLAlchemy 2.0 Select statement.
        permissions: The caller's permission set.
        registry: Optional custom registry. Defaults to the global registry.
        config: Optional config. Defaults to the global config.

    Returns:
        A new Select with authorization filters applied.

    Example::

        stmt = select(Chunk).order_by(Chunk.score.desc()).limit(20)
        stmt = authorize_chunk_query(stmt, permissions=perms)
    """
    perms = require_permissions(permissions)
    target_registry = registry if registry is not None else get_default_registry()
    cfg = config if config is not None else get_global_config()

    desc_list: list[dict[str, Any]] = stmt.column_descriptions
    for desc in desc_list:
        entity: type | None = desc.get("entity")
        if entity is None:
            continue

        source = target_registry.lookup(entity)
        if source is None:
            if cfg.on_unregistered_source == "raise":
                raise UnregisteredChunkSourceError(model=entity.__name__)
            logger.warning(
                "No chunk source registered for %s — deny-by-default applied",
                entity.__name__,
            )
            stmt = stmt.where(false())
            continue

        if cfg.log_decisions:
            logger.debug(
                "Chunk filter applied to %s for user %r",
                source.name,
                perms.user_id,
            )
        stmt = stmt.where(chunk_filter_expression(perms, source))

    return stmt
