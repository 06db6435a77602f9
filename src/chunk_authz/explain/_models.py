"""Data models for explain output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["DecisionExplanation", "FilterEntry", "FilterExplanation"]


@dataclass(frozen=True, slots=True)
class DecisionExplanation:
    """Why a permission set can or cannot see one chunk.

    Attributes:
        user_id: The user whose permissions were evaluated.
        chunk_id: Identifier of the chunk.
        rule: The branch that decided: ``"classified"``, ``"tagged"`` or
            ``"unrestricted"``.
        allowed: The verdict.
        security_label: The chunk's label, if any.
        tags: The chunk's tags.
        matched_label: The granted label that matched, if any.
        matched_tags: Granted tags that matched (normalized, sorted).
    """

    user_id: str
    chunk_id: Any
    rule: str
    allowed: bool
    security_label: str | None
    tags: tuple[str, ...]
    matched_label: str | None
    matched_tags: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "user_id": self.user_id,
            "chunk_id": self.chunk_id,
            "rule": self.rule,
            "allowed": self.allowed,
            "security_label": self.security_label,
            "tags": list(self.tags),
            "matched_label": self.matched_label,
            "matched_tags": list(self.matched_tags),
        }

    def __str__(self) -> str:
        """Return a human-readable multi-line explanation."""
        verdict = "ALLOWED" if self.allowed else "DENIED"
        lines: list[str] = []
        lines.append(f"Chunk Access: {verdict}")
        lines.append(f"  User: {self.user_id}")
        lines.append(f"  Chunk: {self.chunk_id!r}")
        if self.rule == "classified":
            lines.append(f"  Label: {self.security_label!r} (tags not consulted)")
            if self.matched_label is not None:
                lines.append(f"    granted label {self.matched_label!r}")
            else:
                lines.append("    label not granted")
        elif self.rule == "tagged":
            lines.append(f"  Tags: {', '.join(self.tags)}")
            if self.matched_tags:
                lines.append(f"    granted tags: {', '.join(self.matched_tags)}")
            else:
                lines.append("    no tag granted")
        else:
            lines.append("  UNRESTRICTED (no label, no tags)")
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class FilterEntry:
    """Outcome for one element of a filtered batch.

    Attributes:
        index: Position in the input sequence.
        kept: Whether the element is in the authorized output.
        decision: The decision, or ``None`` when the element was malformed.
        error: Why a malformed element was dropped.
    """

    index: int
    kept: bool
    decision: DecisionExplanation | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "index": self.index,
            "kept": self.kept,
            "decision": self.decision.to_dict() if self.decision is not None else None,
            "error": self.error,
        }


@dataclass(frozen=True, slots=True)
class FilterExplanation:
    """Per-element outcomes of filtering one batch.

    Attributes:
        user_id: The user whose permissions were evaluated.
        entries: One entry per input element, in input order.
    """

    user_id: str
    entries: list[FilterEntry]

    @property
    def kept(self) -> int:
        return sum(1 for e in self.entries if e.kept)

    @property
    def dropped(self) -> int:
        return len(self.entries) - self.kept

    @property
    def malformed(self) -> int:
        return sum(1 for e in self.entries if e.error is not None)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "user_id": self.user_id,
            "kept": self.kept,
            "dropped": self.dropped,
            "malformed": self.malformed,
            "entries": [e.to_dict() for e in self.entries],
        }

    def __str__(self) -> str:
        lines: list[str] = []
        lines.append(f"Filter Explanation for user={self.user_id!r}")
        lines.append(f"  Kept {self.kept} of {len(self.entries)} ({self.malformed} malformed)")
        for e in self.entries:
            if e.error is not None:
                lines.append(f"    [{e.index}] MALFORMED: {e.error}")
            elif e.decision is not None:
                status = "KEEP" if e.kept else "DROP"
                lines.append(f"    [{e.index}] {status} {e.decision.chunk_id!r} ({e.decision.rule})")
        return "\n".join(lines)
