"""Duplicate cluster model."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DuplicateCluster:
    """A set of documents judged equivalent or near-equivalent.

    Attributes:
        members: Document ids in discovery order.
        canonical_id: The member chosen as representative.
        similarity_scores: Member id -> similarity to the canonical document,
            for every member except the canonical one.
        is_stub: True for a singleton whose document is empty after
            normalization.
    """

    members: tuple[str, ...]
    canonical_id: str
    similarity_scores: dict[str, float] = field(default_factory=dict, compare=False)
    is_stub: bool = False

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError("Empty cluster")
        if self.canonical_id not in self.members:
            raise ValueError(f"Canonical id {self.canonical_id!r} is not a cluster member")

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def duplicates(self) -> tuple[str, ...]:
        """Members superseded by the canonical document."""
        return tuple(m for m in self.members if m != self.canonical_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "canonical_id": self.canonical_id,
            "members": list(self.members),
            "similarity_scores": dict(self.similarity_scores),
            "is_stub": self.is_stub,
        }
