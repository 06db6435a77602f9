"""Compiler — transforms the chunk decision rule into SQL filter expressions."""

from chunk_authz.compiler._expression import chunk_filter_expression
from chunk_authz.compiler._query import authorize_chunk_query

__all__ = [
    "authorize_chunk_query",
    "chunk_filter_expression",
]
