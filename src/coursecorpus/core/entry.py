"""Ordered table-of-contents entry."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CorpusEntry:
    """A cluster's canonical document placed in the final table of contents.

    ``source`` and ``declared_position`` name the ordering declaration that
    placed the entry; both are None for unordered entries.
    """

    sequence_index: int
    canonical_id: str
    title: str
    module_label: str | None = None
    members: tuple[str, ...] = ()
    ordered: bool = True
    source: str | None = None
    declared_position: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence_index": self.sequence_index,
            "canonical_id": self.canonical_id,
            "title": self.title,
            "module_label": self.module_label,
            "members": list(self.members),
            "ordered": self.ordered,
            "source": self.source,
            "declared_position": self.declared_position,
        }
