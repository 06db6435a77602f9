"""Tests for compiler/_expression.py — chunk_filter_expression()."""

from __future__ import annotations

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from chunk_authz._checks import is_authorized
from chunk_authz._chunks import ChunkDescriptor
from chunk_authz._permissions import PermissionSet
from chunk_authz.compiler._expression import chunk_filter_expression
from chunk_authz.exceptions import InvalidInput
from chunk_authz.sources._registry import ChunkSourceRegistry
from tests.conftest import Chunk, ChunkTag


def _ids(session: Session, perms: PermissionSet, registry: ChunkSourceRegistry) -> list[int]:
    expr = chunk_filter_expression(perms, registry.lookup(Chunk))
    stmt = select(Chunk.id).where(expr).order_by(Chunk.rank)
    return list(session.execute(stmt).scalars().all())


class TestChunkFilterExpression:
    def test_compiles_to_sql(self, registry):
        perms = PermissionSet("reader", allowed_labels={"public"}, allowed_tags={"legal"})
        expr = chunk_filter_expression(perms, registry.lookup(Chunk))
        sql = str(
            select(Chunk).where(expr).compile(compile_kwargs={"literal_binds": True})
        )
        assert "lower(chunks.security_label)" in sql
        assert "EXISTS" in sql
        assert "'public'" in sql
        assert "'legal'" in sql

    def test_reader_sees_granted_and_unrestricted_rows(self, session, sample_data, registry):
        perms = PermissionSet("reader", allowed_labels={"public"}, allowed_tags={"legal"})
        # Tag "Legal" matches case-insensitively; "finance" label wins over its tag.
        assert _ids(session, perms, registry) == [1, 3, 4, 5]

    def test_empty_permissions_see_only_unrestricted_rows(
        self, session, sample_data, registry
    ):
        assert _ids(session, PermissionSet("nobody"), registry) == [4, 5]

    def test_label_match_is_case_insensitive(self, session, sample_data, registry):
        perms = PermissionSet("admin", allowed_labels={"secret"})
        assert 2 in _ids(session, perms, registry)

    def test_label_takes_precedence_over_tags(self, session, sample_data, registry):
        perms = PermissionSet("lawyer", allowed_tags={"legal"})
        ids = _ids(session, perms, registry)
        assert 3 in ids
        assert 6 not in ids

    def test_tag_only_grant(self, session, sample_data, registry):
        perms = PermissionSet("hr", allowed_tags={"HR"})
        assert _ids(session, perms, registry) == [3, 4, 5]

    def test_empty_string_tag_restricts_row(self, session, sample_data, registry):
        blank = Chunk(id=7, text="blank tag", security_label=None, rank=7)
        blank.tags = [ChunkTag(id=4, name="")]
        session.add(blank)
        session.flush()
        perms = PermissionSet("reader", allowed_labels={"public"}, allowed_tags={"legal"})
        assert 7 not in _ids(session, perms, registry)
        assert 7 not in _ids(session, PermissionSet("nobody"), registry)

    def test_agrees_with_is_authorized(self, session, sample_data, registry):
        perms = PermissionSet("mixed", allowed_labels={"finance"}, allowed_tags={"hr"})
        expected = [
            row.id
            for row in sorted(sample_data.values(), key=lambda c: c.rank)
            if is_authorized(
                perms,
                ChunkDescriptor(
                    id=row.id,
                    security_label=row.security_label,
                    tags=tuple(t.name for t in row.tags),
                ),
            )
        ]
        assert _ids(session, perms, registry) == expected

    def test_label_only_source(self, session, sample_data):
        registry = ChunkSourceRegistry()
        registry.register(Chunk, label=Chunk.security_label)
        perms = PermissionSet("reader", allowed_labels={"public"})
        # Without a tags mapping every unlabeled row is unrestricted.
        assert _ids(session, perms, registry) == [1, 3, 4, 5]

    def test_requires_permissions(self, registry):
        with pytest.raises(InvalidInput):
            chunk_filter_expression(None, registry.lookup(Chunk))  # type: ignore[arg-type]
