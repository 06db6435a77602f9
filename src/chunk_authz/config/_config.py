"""Layered configuration for chunk-authz."""

from __future__ import annotations

from dataclasses import dataclass

from chunk_authz._types import OnMalformedChunk, OnUnregisteredSource

__all__ = [
    "AuthzConfig",
    "configure",
    "get_global_config",
    "_reset_global_config",
    "_set_global_config",
]

_VALID_MALFORMED: set[str] = {"ignore", "warn", "log"}
_VALID_UNREGISTERED: set[str] = {"deny", "raise"}


@dataclass(frozen=True, slots=True)
class AuthzConfig:
    """Configuration with merge semantics (global -> call).

    Settings only change how decisions are reported and how strict the SQL
    pushdown is. No setting can change a verdict of the decision function.

    Attributes:
        log_decisions: Log every verdict via the ``chunk_authz`` logger.
        on_malformed_chunk: How a dropped batch element is reported.
            ``"ignore"`` is silent, ``"warn"`` emits a ``UserWarning``,
            ``"log"`` logs a warning on ``chunk_authz.malformed``.
            The element is dropped in every case.
        on_unregistered_source: Behavior of the SQL pushdown for a model
            without a chunk-source mapping. ``"deny"`` filters all rows
            (WHERE FALSE), ``"raise"`` raises
            ``UnregisteredChunkSourceError``.
        audit_denials: Log the id of every denied chunk at INFO.

    Example::

        config = AuthzConfig(on_malformed_chunk="warn")
        merged = config.merge(log_decisions=True)
    """

    log_decisions: bool = False
    on_malformed_chunk: OnMalformedChunk = "log"
    on_unregistered_source: OnUnregisteredSource = "deny"
    audit_denials: bool = False

    def __post_init__(self) -> None:
        if self.on_malformed_chunk not in _VALID_MALFORMED:
            raise ValueError(
                f"on_malformed_chunk must be one of {_VALID_MALFORMED!r}, "
                f"got {self.on_malformed_chunk!r}"
            )
        if self.on_unregistered_source not in _VALID_UNREGISTERED:
            raise ValueError(
                f"on_unregistered_source must be one of {_VALID_UNREGISTERED!r}, "
                f"got {self.on_unregistered_source!r}"
            )

    def merge(
        self,
        *,
        log_decisions: bool | None = None,
        on_malformed_chunk: OnMalformedChunk | None = None,
        on_unregistered_source: OnUnregisteredSource | None = None,
        audit_denials: bool | None = None,
    ) -> AuthzConfig:
        """Return a new config with non-None overrides applied.

        Args:
            log_decisions: Override for log_decisions (ignored if None).
            on_malformed_chunk: Override for on_malformed_chunk (ignored if None).
            on_unregistered_source: Override for on_unregistered_source (ignored if None).
            audit_denials: Override for audit_denials (ignored if None).

        Returns:
            A new ``AuthzConfig`` with overrides merged.
        """
        return AuthzConfig(
            log_decisions=(log_decisions if log_decisions is not None else self.log_decisions),
            on_malformed_chunk=(
                on_malformed_chunk if on_malformed_chunk is not None else self.on_malformed_chunk
            ),
            on_unregistered_source=(
                on_unregistered_source
                if on_unregistered_source is not None
                else self.on_unregistered_source
            ),
            audit_denials=(audit_denials if audit_denials is not None else self.audit_denials),
        )


# ---------------------------------------------------------------------------
# Global configuration singleton
# ---------------------------------------------------------------------------

_global_config = AuthzConfig()


def get_global_config() -> AuthzConfig:
    """Return the current global configuration."""
    return _global_config


def configure(
    *,
    log_decisions: bool | None = None,
    on_malformed_chunk: OnMalformedChunk | None = None,
    on_unregistered_source: OnUnregisteredSource | None = None,
    audit_denials: bool | None = None,
) -> AuthzConfig:
    """Update the global configuration by merging overrides.

    Only non-None values are applied. Returns the new global config.

    Example::

        configure(on_malformed_chunk="warn")
    """
    global _global_config
    _global_config = _global_config.merge(
        log_decisions=log_decisions,
        on_malformed_chunk=on_malformed_chunk,
        on_unregistered_source=on_unregistered_source,
        audit_denials=audit_denials,
    )
    return _global_config


def _set_global_config(cfg: AuthzConfig) -> None:
    """Replace global config with an exact snapshot. For testing only."""
    global _global_config
    _global_config = cfg


def _reset_global_config() -> None:
    """Reset global config to defaults. For testing only."""
    global _global_config
    _global_config = AuthzConfig()
