"""FastAPI integration for chunk-authz."""

from __future__ import annotations

try:
    import fastapi as _fastapi_check  # noqa: F401  # pyright: ignore[reportUnusedImport]

    del _fastapi_check
except ImportError as exc:
    raise ImportError(
        "FastAPI integration requires fastapi. Install it with: pip install chunk-authz[fastapi]"
    ) from exc

from chunk_authz.integrations.fastapi._dependencies import (
    AuthorizedChunksDep,
    get_permissions,
)
from chunk_authz.integrations.fastapi._errors import install_error_handlers

__all__ = [
    "AuthorizedChunksDep",
    "get_permissions",
    "install_error_handlers",
]
