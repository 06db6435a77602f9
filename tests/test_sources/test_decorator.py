"""Tests for sources/_decorator.py — @chunk_source decorator."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from chunk_authz._permissions import PermissionSet
from chunk_authz.compiler._query import authorize_chunk_query
from chunk_authz.sources._decorator import chunk_source
from chunk_authz.sources._registry import ChunkSourceRegistry, get_default_registry
from chunk_authz.testing._isolation import isolated_authz

_registry = ChunkSourceRegistry()


class _Base(DeclarativeBase):
    pass


@chunk_source(label="classification", tags="labels", tag_name="value", registry=_registry)
class Passage(_Base):
    __tablename__ = "passages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    classification: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Declared by string: only resolvable once all mappers are configured.
    labels: Mapped[list[PassageTag]] = relationship("PassageTag")


class PassageTag(_Base):
    __tablename__ = "passage_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    passage_id: Mapped[int] = mapped_column(ForeignKey("passages.id"))
    value: Mapped[str] = mapped_column(String(50))


class TestChunkSourceDecorator:
    def test_returns_class_unchanged(self):
        assert Passage.__tablename__ == "passages"

    def test_registers_lazily(self):
        assert _registry.has_source(Passage)

    def test_resolves_custom_attribute_names(self):
        source = _registry.lookup(Passage)
        assert source.label is Passage.classification
        assert source.tags is Passage.labels
        assert source.tag_name is PassageTag.value

    def test_query_uses_resolved_mapping(self):
        perms = PermissionSet("u", allowed_labels={"public"}, allowed_tags={"legal"})
        stmt = authorize_chunk_query(select(Passage), permissions=perms, registry=_registry)
        sql = str(stmt.compile(compile_kwargs={"literal_binds": True}))
        assert "passages.classification" in sql
        assert "passage_tags.value" in sql

    def test_default_registry(self):
        with isolated_authz() as (_, registry):
            assert registry is get_default_registry()

            @chunk_source()
            class Snippet(_Base):
                __tablename__ = "snippets"

                id: Mapped[int] = mapped_column(Integer, primary_key=True)
                security_label: Mapped[str | None] = mapped_column(String(50))

            source = registry.lookup(Snippet)
            assert source.label is Snippet.security_label
            assert source.tags is None
