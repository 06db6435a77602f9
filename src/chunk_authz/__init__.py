"""chunk-authz — attribute-based authorization of retrieved RAG chunks.

Decides which retrieved chunks a user may see before they are assembled
into a model prompt. Labels dominate tags, any matching tag is enough,
and only chunks without label or tags are open to everyone.

Example::

    from chunk_authz import ChunkDescriptor, PermissionSet, filter_authorized

    perms = PermissionSet("alice", allowed_labels={"public"}, allowed_tags={"legal"})
    candidates = [
        ChunkDescriptor(id="a", security_label="public"),
        ChunkDescriptor(id="b", security_label="confidential"),
        ChunkDescriptor(id="c", tags=("hr", "legal")),
    ]
    context = filter_authorized(perms, candidates)  # keeps "a" and "c"
"""

from importlib.metadata import PackageNotFoundError, version

from chunk_authz._checks import DefaultAuthorizer, authorize, is_authorized
from chunk_authz._chunks import ChunkDescriptor
from chunk_authz._filter import filter_authorized, filter_retrieved
from chunk_authz._permissions import Claims, PermissionSet
from chunk_authz._types import AuthorizerLike, ChunkLike, RetrievedLike
from chunk_authz.compiler._query import authorize_chunk_query
from chunk_authz.config._config import AuthzConfig, configure
from chunk_authz.exceptions import (
    AuthorizationDenied,
    AuthzError,
    InvalidInput,
    MalformedRecord,
    UnregisteredChunkSourceError,
)
from chunk_authz.sources._decorator import chunk_source
from chunk_authz.sources._registry import ChunkSourceRegistry

try:
    __version__ = version("chunk-authz")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "__version__",
    "AuthorizationDenied",
    "AuthorizerLike",
    "AuthzConfig",
    "AuthzError",
    "ChunkDescriptor",
    "ChunkLike",
    "ChunkSourceRegistry",
    "Claims",
    "DefaultAuthorizer",
    "InvalidInput",
    "MalformedRecord",
    "PermissionSet",
    "RetrievedLike",
    "UnregisteredChunkSourceError",
    "authorize",
    "authorize_chunk_query",
    "chunk_source",
    "configure",
    "filter_authorized",
    "filter_retrieved",
    "is_authorized",
]
