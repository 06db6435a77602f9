"""Configuration module for chunk-authz."""

from __future__ import annotations

from chunk_authz.config._config import AuthzConfig, configure, get_global_config

__all__ = ["AuthzConfig", "configure", "get_global_config"]
