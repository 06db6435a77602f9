"""Point checks — is_authorized() and authorize() for single chunks."""

from __future__ import annotations

from typing import Literal

from chunk_authz._chunks import ChunkDescriptor, as_chunk_descriptor
from chunk_authz._permissions import PermissionSet
from chunk_authz.config._config import AuthzConfig, get_global_config
from chunk_authz.exceptions import AuthorizationDenied, InvalidInput

__all__ = [
    "DefaultAuthorizer",
    "Rule",
    "authorize",
    "evaluate_chunk",
    "is_authorized",
    "require_permissions",
]

# Which branch of the precedence rule produced a verdict.
Rule = Literal["classified", "tagged", "unrestricted"]


def require_permissions(permissions: object) -> PermissionSet:
    """Return *permissions* if it is a ``PermissionSet``, else fail closed."""
    if permissions is None:
        raise InvalidInput("permissions are required; there is no implicit allow-all caller")
    if not isinstance(permissions, PermissionSet):
        raise InvalidInput(
            f"permissions must be a PermissionSet, got {type(permissions).__name__}"
        )
    return permissions


def evaluate_chunk(
    permissions: PermissionSet,
    chunk: object,
) -> tuple[ChunkDescriptor, Rule, bool]:
    """Apply the precedence rule and report which branch decided.

    1. A labeled chunk is allowed iff its label is granted. Tags are not
       consulted.
    2. An unlabeled, tagged chunk is allowed iff any of its tags is granted.
    3. A chunk with neither label nor tags is always allowed.

    Returns:
        The validated descriptor, the rule applied and the verdict.

    Raises:
        InvalidInput: If *permissions* or *chunk* is absent or malformed.
    """
    perms = require_permissions(permissions)
    descriptor = as_chunk_descriptor(chunk)

    label = descriptor.normalized_label
    if label is not None:
        return descriptor, "classified", label in perms.allowed_labels

    if descriptor.tags:
        return descriptor, "tagged", not perms.allowed_tags.isdisjoint(descriptor.normalized_tags)

    return descriptor, "unrestricted", True


def is_authorized(
    permissions: PermissionSet,
    chunk: object,
    *,
    config: AuthzConfig | None = None,
) -> bool:
    """Check whether *permissions* grants access to *chunk*.

    Deterministic: the verdict depends only on the chunk's label and tags
    and on the granted labels and tags. Decision logging, when enabled,
    has no effect on the verdict. An empty permission set only ever sees
    chunks that carry no label and no tags.

    Args:
        permissions: The caller's permission set. Required.
        chunk: A ``ChunkDescriptor``, a ``ChunkLike`` object or a
            metadata mapping.
        config: Optional config controlling decision logging. Defaults
            to the global config.

    Returns:
        ``True`` if access is granted, ``False`` if denied.

    Raises:
        InvalidInput: If *permissions* or *chunk* is absent or malformed.

    Example::

        perms = PermissionSet("alice", allowed_tags={"legal"})
        assert is_authorized(perms, ChunkDescriptor(tags=("hr", "legal")))
    """
    descriptor, rule, allowed = evaluate_chunk(permissions, chunk)

    cfg = config if config is not None else get_global_config()
    if cfg.log_decisions or (cfg.audit_denials and not allowed):
        from chunk_authz._audit import log_decision, log_denial

        if cfg.log_decisions:
            log_decision(permissions=permissions, chunk=descriptor, rule=rule, allowed=allowed)
        if cfg.audit_denials and not allowed:
            log_denial(permissions=permissions, chunk=descriptor)

    return allowed


def authorize(
    permissions: PermissionSet,
    chunk: object,
    *,
    message: str | None = None,
    config: AuthzConfig | None = None,
) -> None:
    """Assert that *permissions* grants access to *chunk*.

    Raises:
        AuthorizationDenied: If access is denied.
        InvalidInput: If *permissions* or *chunk* is absent or malformed.

    Example::

        authorize(perms, chunk)  # raises if denied
    """
    if not is_authorized(permissions, chunk, config=config):
        raise AuthorizationDenied(
            user_id=permissions.user_id,
            chunk_id=as_chunk_descriptor(chunk).id,
            message=message,
        )


class DefaultAuthorizer:
    """The built-in authorizer used by the filter operation.

    Stateless; a single instance may serve any number of concurrent
    requests. Substitute any object with a compatible ``is_authorized``
    method to layer extra policy (for example on custom claims).
    """

    def __init__(self, *, config: AuthzConfig | None = None) -> None:
        self._config = config

    def is_authorized(self, permissions: PermissionSet, chunk: object) -> bool:
        return is_authorized(permissions, chunk, config=self._config)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
