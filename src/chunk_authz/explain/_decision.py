"""explain_decision() / explain_filter() — explain chunk verdicts."""

from __future__ import annotations

from collections.abc import Iterable

from chunk_authz._checks import evaluate_chunk, require_permissions
from chunk_authz._permissions import PermissionSet
from chunk_authz.exceptions import InvalidInput
from chunk_authz.explain._models import DecisionExplanation, FilterEntry, FilterExplanation

__all__ = ["explain_decision", "explain_filter"]


def explain_decision(permissions: PermissionSet, chunk: object) -> DecisionExplanation:
    """Explain why *permissions* can or cannot see *chunk*.

    Uses the same evaluation as :func:`~chunk_authz.is_authorized`, so the
    reported verdict always equals the real one.

    Raises:
        InvalidInput: If *permissions* or *chunk* is absent or malformed.

    Example::

        print(explain_decision(perms, chunk))
    """
    descriptor, rule, allowed = evaluate_chunk(permissions, chunk)

    matched_label: str | None = None
    matched_tags: tuple[str, ...] = ()
    if rule == "classified" and allowed:
        matched_label = descriptor.normalized_label
    elif rule == "tagged":
        matched_tags = tuple(sorted(descriptor.normalized_tags & permissions.allowed_tags))

    return DecisionExplanation(
        user_id=permissions.user_id,
        chunk_id=descriptor.id,
        rule=rule,
        allowed=allowed,
        security_label=descriptor.security_label,
        tags=descriptor.tags,
        matched_label=matched_label,
        matched_tags=matched_tags,
    )


def explain_filter(
    permissions: PermissionSet,
    chunks: Iterable[object],
) -> FilterExplanation:
    """Explain, element by element, what filtering *chunks* would keep.

    Malformed elements are reported with their error instead of raising,
    matching the filter operation's per-element policy.
    """
    perms = require_permissions(permissions)
    entries: list[FilterEntry] = []
    for index, chunk in enumerate(chunks):
        if chunk is None:
            entries.append(FilterEntry(index=index, kept=False, error="chunk is absent"))
            continue
        try:
            decision = explain_decision(perms, chunk)
        except InvalidInput as exc:
            entries.append(FilterEntry(index=index, kept=False, error=str(exc)))
            continue
        entries.append(FilterEntry(index=index, kept=decision.allowed, decision=decision))
    return FilterExplanation(user_id=perms.user_id, entries=entries)
