"""Decision rule compiled into a SQLAlchemy filter expression."""

from __future__ import annotations

from sqlalchemy import ColumnElement, and_, false, func, or_

from chunk_authz._checks import require_permissions
from chunk_authz._permissions import PermissionSet
from chunk_authz.sources._base import ChunkSource

__all__ = ["chunk_filter_expression"]


def chunk_filter_expression(
    permissions: PermissionSet,
    source: ChunkSource,
) -> ColumnElement[bool]:
    """Compile the chunk decision rule for *permissions* into a WHERE clause.

    The expression accepts exactly the rows ``is_authorized`` accepts:

    - a row with a non-empty label matches iff ``lower(label)`` is granted;
    - otherwise a row with tags matches iff any tag's ``lower(name)`` is
      granted;
    - a row with no label and no tags always matches.

    Granted values are bound in their case-folded form. Case folding in
    SQL uses ``lower()``, which agrees with ``str.casefold()`` for ASCII
    data; backends differ on non-ASCII folding.

    Args:
        permissions: The caller's permission set.
        source: The chunk model mapping to compile against.

    Returns:
        A ``ColumnElement[bool]`` suitable for ``Select.where()``.

    Example::

        expr = chunk_filter_expression(perms, registry.lookup(Chunk))
        stmt = select(Chunk).where(expr).order_by(Chunk.score.desc())
    """
    perms = require_permissions(permissions)
    label = source.label

    unlabeled = or_(label.is_(None), label == "")
    labeled = and_(label.is_not(None), label != "")

    labels = sorted(perms.allowed_labels)
    label_granted: ColumnElement[bool] = func.lower(label).in_(labels) if labels else false()
    classified = and_(labeled, label_granted)

    if source.tags is None:
        return or_(classified, unlabeled)

    tag_name = source.tag_name
    # Any related tag row restricts the chunk, including an empty one.
    has_tags = source.tags.any()

    tags = sorted(perms.allowed_tags)
    tag_granted: ColumnElement[bool] = (
        source.tags.any(func.lower(tag_name).in_(tags)) if tags else false()
    )

    return or_(
        classified,
        and_(unlabeled, has_tags, tag_granted),
        and_(unlabeled, ~has_tags),
    )
