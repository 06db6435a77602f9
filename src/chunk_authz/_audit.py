"""Audit logging for chunk authorization decisions."""

from __future__ import annotations

import logging
import warnings

from chunk_authz._chunks import ChunkDescriptor
from chunk_authz._permissions import PermissionSet
from chunk_authz.config._config import AuthzConfig
from chunk_authz.exceptions import MalformedRecord

__all__ = [
    "log_decision",
    "log_denial",
    "log_filter_summary",
    "report_malformed_record",
]

logger = logging.getLogger("chunk_authz")


def log_decision(
    *,
    permissions: PermissionSet,
    chunk: ChunkDescriptor,
    rule: str,
    allowed: bool,
) -> None:
    """Log a single verdict.

    Logging levels:
    - INFO: Summary (user, chunk id, verdict)
    - DEBUG: Detailed (rule applied, label and tags evaluated)
    """
    verdict = "allow" if allowed else "deny"
    logger.info(
        "Chunk decision: user=%r chunk=%r — %s",
        permissions.user_id,
        chunk.id,
        verdict,
    )

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Rule %s for chunk %r: label=%r tags=%r",
            rule,
            chunk.id,
            chunk.security_label,
            list(chunk.tags),
        )


def log_denial(*, permissions: PermissionSet, chunk: ChunkDescriptor) -> None:
    """Record a denied chunk when ``audit_denials`` is enabled."""
    logger.info("DENY user=%r chunk=%r", permissions.user_id, chunk.id)


def log_filter_summary(*, user_id: str, before: int, after: int) -> None:
    """Log the effect of a filter call when it removed anything."""
    if before != after:
        logger.info(
            "Authorization filtered %d of %d chunks for user %r",
            before - after,
            before,
            user_id,
        )
    else:
        logger.debug("Authorization kept all %d chunks for user %r", before, user_id)


def report_malformed_record(
    record: MalformedRecord,
    config: AuthzConfig,
    *,
    stacklevel: int = 3,
) -> None:
    """Report a dropped batch element according to ``on_malformed_chunk``.

    Malformed records go to the ``chunk_authz.malformed`` sub-logger so
    operators can enable or silence them independently.
    """
    if config.on_malformed_chunk == "log":
        logging.getLogger("chunk_authz.malformed").warning("MALFORMED — %s", record)
    elif config.on_malformed_chunk == "warn":
        warnings.warn(str(record), stacklevel=stacklevel)
