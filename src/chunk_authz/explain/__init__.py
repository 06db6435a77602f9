"""Explain mode — structured insight into chunk authorization decisions."""

from chunk_authz.explain._decision import explain_decision, explain_filter
from chunk_authz.explain._models import DecisionExplanation, FilterEntry, FilterExplanation

__all__ = [
    "DecisionExplanation",
    "FilterEntry",
    "FilterExplanation",
    "explain_decision",
    "explain_filter",
]
