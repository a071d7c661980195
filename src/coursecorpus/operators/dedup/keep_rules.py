"""Keep rules for selecting a cluster's canonical document."""

from collections.abc import Sequence
from enum import Enum

from coursecorpus.core.document import Document


class KeepRule(Enum):
    """Strategy for selecting which document represents a cluster."""

    LONGEST = "longest"  # Most raw bytes; assumed most complete
    FIRST = "first"  # First in discovery order
    MOST_LINES = "most_lines"  # Most raw lines


class KeepRuleSelector:
    """Select the canonical document of a cluster.

    Every rule falls back to the lexicographically smallest id on ties.
    """

    def __init__(self, rule: KeepRule | str = KeepRule.LONGEST):
        self.rule = KeepRule(rule)

    def _sort_key(self, position: int, doc: Document) -> tuple:
        if self.rule == KeepRule.LONGEST:
            return (-doc.size_bytes, doc.id)
        if self.rule == KeepRule.MOST_LINES:
            return (-doc.line_count, doc.id)
        return (position, doc.id)

    def select(self, docs: Sequence[Document]) -> tuple[Document, list[Document]]:
        """Pick the canonical document.

        Args:
            docs: Cluster members in discovery order.

        Returns:
            (kept_doc, other_docs), other_docs in discovery order.
        """
        if not docs:
            raise ValueError("Empty document list")

        ranked = sorted(enumerate(docs), key=lambda item: self._sort_key(*item))
        kept = ranked[0][1]
        return kept, [d for d in docs if d.id != kept.id]
