"""Import fixtures from chunk_authz.testing for test discovery."""

from chunk_authz.testing._fixtures import authz_config, chunk_source_registry, isolated_authz_state

__all__ = ["authz_config", "chunk_source_registry", "isolated_authz_state"]
