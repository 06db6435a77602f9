"""Shared test fixtures for chunk-authz tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from sqlalchemy import ForeignKey, Integer, String, create_engine
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    relationship,
    sessionmaker,
)

from chunk_authz._chunks import ChunkDescriptor
from chunk_authz._permissions import PermissionSet
from chunk_authz.sources._registry import ChunkSourceRegistry

# ---------------------------------------------------------------------------
# Test models
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class Chunk(Base):
    __tablename__ = "chunks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    text: Mapped[str] = mapped_column(String(500), default="")
    security_label: Mapped[str | None] = mapped_column(String(50), nullable=True)
    rank: Mapped[int] = mapped_column(Integer, default=0)

    tags: Mapped[list[ChunkTag]] = relationship(
        "ChunkTag", back_populates="chunk", order_by="ChunkTag.id"
    )


class ChunkTag(Base):
    __tablename__ = "chunk_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    chunk_id: Mapped[int] = mapped_column(ForeignKey("chunks.id"))
    name: Mapped[str] = mapped_column(String(50))

    chunk: Mapped[Chunk] = relationship("Chunk", back_populates="tags")


class Note(Base):
    """A model with no chunk-source mapping."""

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    body: Mapped[str] = mapped_column(String(200), default="")


# ---------------------------------------------------------------------------
# RetrievedChunk — satisfies ChunkLike without being a ChunkDescriptor
# ---------------------------------------------------------------------------


@dataclass
class RetrievedChunk:
    """Retrieval-layer chunk object, as a vector store would return it."""

    id: str
    text: str = ""
    security_label: str | None = None
    tags: list[str] = field(default_factory=list)
    score: float = 0.0


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine():
    """Create an in-memory SQLite engine with all tables."""
    eng = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture()
def session(engine):
    """Provide a transactional session that rolls back after each test."""
    factory = sessionmaker(bind=engine)
    sess = factory()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()


@pytest.fixture()
def registry() -> ChunkSourceRegistry:
    """A registry with the Chunk model mapped."""
    reg = ChunkSourceRegistry()
    reg.register(Chunk, label=Chunk.security_label, tags=Chunk.tags, tag_name=ChunkTag.name)
    return reg


@pytest.fixture()
def sample_data(session: Session) -> dict[str, Chunk]:
    """Seed the database with one chunk per authorization branch."""
    public = Chunk(id=1, text="public", security_label="public", rank=1)
    secret = Chunk(id=2, text="secret", security_label="Secret", rank=2)
    tagged = Chunk(id=3, text="hr and legal", security_label=None, rank=3)
    tagged.tags = [ChunkTag(id=1, name="hr"), ChunkTag(id=2, name="Legal")]
    plain = Chunk(id=4, text="plain", security_label=None, rank=4)
    empty_label = Chunk(id=5, text="empty label", security_label="", rank=5)
    labeled_and_tagged = Chunk(id=6, text="labeled+tagged", security_label="finance", rank=6)
    labeled_and_tagged.tags = [ChunkTag(id=3, name="legal")]
    session.add_all([public, secret, tagged, plain, empty_label, labeled_and_tagged])
    session.flush()
    return {
        "public": public,
        "secret": secret,
        "tagged": tagged,
        "plain": plain,
        "empty_label": empty_label,
        "labeled_and_tagged": labeled_and_tagged,
    }


@pytest.fixture()
def chunks() -> list[ChunkDescriptor]:
    """Ranked candidates covering every branch of the decision rule."""
    return [
        ChunkDescriptor(id="public", security_label="public"),
        ChunkDescriptor(id="confidential", security_label="confidential"),
        ChunkDescriptor(id="hr-legal", tags=("hr", "legal")),
        ChunkDescriptor(id="plain"),
        ChunkDescriptor(id="finance-legal", security_label="Finance", tags=("legal",)),
        ChunkDescriptor(id="ops", tags=("ops",)),
    ]


@pytest.fixture()
def reader() -> PermissionSet:
    """A user granted the ``public`` label and the ``legal`` tag."""
    return PermissionSet("reader", allowed_labels={"public"}, allowed_tags={"legal"})
