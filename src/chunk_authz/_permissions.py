"""PermissionSet — a user's granted labels, tags and custom claims."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from chunk_authz.exceptions import InvalidInput

__all__ = ["Claims", "PermissionSet", "normalize_token", "normalize_tokens"]


def normalize_token(value: str) -> str:
    """Return the case-normalized form used for every membership test."""
    return value.casefold()


def normalize_tokens(values: Iterable[str] | None, *, field_name: str) -> frozenset[str]:
    """Normalize a collection of labels or tags into a ``frozenset``.

    Empty strings are discarded. ``None`` is treated as an empty
    collection. A bare string is rejected because iterating it would
    silently grant every single character.

    Raises:
        InvalidInput: If *values* is a string, is not iterable, or holds
            a non-string member.
    """
    if values is None:
        return frozenset()
    if isinstance(values, (str, bytes)):
        raise InvalidInput(f"{field_name} must be a collection of strings, not a bare string")
    try:
        items = list(values)
    except TypeError:
        raise InvalidInput(
            f"{field_name} must be a collection of strings, got {type(values).__name__}"
        ) from None
    normalized: set[str] = set()
    for item in items:
        if not isinstance(item, str):
            raise InvalidInput(f"{field_name} members must be strings, got {item!r}")
        if item:
            normalized.add(normalize_token(item))
    return frozenset(normalized)


class Claims(Mapping[str, str]):
    """Immutable mapping of custom claims with case-insensitive keys.

    Iteration yields keys in their original spelling; lookups ignore case.
    Claims are carried for external policy layers and are never consulted
    by the decision function.

    Example::

        claims = Claims({"Department": "Legal"})
        assert claims["department"] == "Legal"
        assert list(claims) == ["Department"]
    """

    __slots__ = ("_items",)

    def __init__(self, data: Mapping[str, str] | None = None) -> None:
        items: dict[str, tuple[str, str]] = {}
        for key, value in (data or {}).items():
            if not isinstance(key, str) or not key:
                raise InvalidInput(f"claim keys must be non-empty strings, got {key!r}")
            if not isinstance(value, str):
                raise InvalidInput(f"claim {key!r} must have a string value, got {value!r}")
            items[normalize_token(key)] = (key, value)
        self._items = items

    def __getitem__(self, key: str) -> str:
        if not isinstance(key, str):
            raise KeyError(key)
        try:
            return self._items[normalize_token(key)][1]
        except KeyError:
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_token(key) in self._items

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Claims):
            return self._normalized() == other._normalized()
        if isinstance(other, Mapping):
            try:
                return self == Claims(other)  # type: ignore[arg-type]
            except InvalidInput:
                return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._normalized().items()))

    def __repr__(self) -> str:
        return f"Claims({dict(self)!r})"

    def _normalized(self) -> dict[str, str]:
        return {key: value for key, (_, value) in self._items.items()}


@dataclass(frozen=True, slots=True)
class PermissionSet:
    """The labels, tags and claims granted to one user for one request.

    Labels and tags are normalized with ``str.casefold()`` at construction
    and stored as ``frozenset``; empty strings are dropped. The instance is
    immutable and hashable, so it can be shared across threads serving the
    same request and used as a cache key.

    Attributes:
        user_id: Non-empty identifier of the user.
        allowed_labels: Security labels the user may see.
        allowed_tags: Tags the user may see.
        custom_claims: Opaque claims for external policy layers.

    Example::

        perms = PermissionSet("alice", allowed_labels={"Finance"})
        assert perms.has_label("FINANCE")
    """

    user_id: str
    allowed_labels: frozenset[str] = frozenset()
    allowed_tags: frozenset[str] = frozenset()
    custom_claims: Claims = field(default_factory=Claims)

    def __post_init__(self) -> None:
        if not isinstance(self.user_id, str) or not self.user_id:
            raise InvalidInput(f"user_id must be a non-empty string, got {self.user_id!r}")
        # Use object.__setattr__ because the dataclass is frozen
        object.__setattr__(
            self,
            "allowed_labels",
            normalize_tokens(self.allowed_labels, field_name="allowed_labels"),
        )
        object.__setattr__(
            self,
            "allowed_tags",
            normalize_tokens(self.allowed_tags, field_name="allowed_tags"),
        )
        if not isinstance(self.custom_claims, Claims):
            if not isinstance(self.custom_claims, Mapping):
                raise InvalidInput(
                    f"custom_claims must be a mapping, got {type(self.custom_claims).__name__}"
                )
            object.__setattr__(self, "custom_claims", Claims(self.custom_claims))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PermissionSet:
        """Build a permission set from a plain mapping (e.g. decoded JSON claims).

        Recognized keys are ``user_id``, ``allowed_labels``, ``allowed_tags``
        and ``custom_claims``; missing collections default to empty.

        Raises:
            InvalidInput: If *data* is not a mapping or ``user_id`` is missing.
        """
        if not isinstance(data, Mapping):
            raise InvalidInput(f"expected a mapping, got {type(data).__name__}")
        if "user_id" not in data:
            raise InvalidInput("permission mapping has no 'user_id'")
        return cls(
            user_id=data["user_id"],
            allowed_labels=data.get("allowed_labels") or frozenset(),
            allowed_tags=data.get("allowed_tags") or frozenset(),
            custom_claims=data.get("custom_claims") or {},  # type: ignore[arg-type]
        )

    @property
    def is_empty(self) -> bool:
        """True when no label and no tag is granted."""
        return not self.allowed_labels and not self.allowed_tags

    def has_label(self, label: str) -> bool:
        """Case-insensitive membership test against ``allowed_labels``."""
        return normalize_token(label) in self.allowed_labels

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        """True when at least one of *tags* is granted (OR semantics)."""
        return any(normalize_token(tag) in self.allowed_tags for tag in tags if tag)

    def claim(self, key: str, default: str | None = None) -> str | None:
        """Look up a custom claim by case-insensitive key."""
        return self.custom_claims.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "user_id": self.user_id,
            "allowed_labels": sorted(self.allowed_labels),
            "allowed_tags": sorted(self.allowed_tags),
            "custom_claims": dict(self.custom_claims),
        }
