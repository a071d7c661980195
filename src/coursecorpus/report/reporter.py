"""Structured corpus report.

The report is the loader's only outward interface. Building it has no side
effects; writing it anywhere is left to callers.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from coursecorpus.core.document import Document
from coursecorpus.core.entry import CorpusEntry
from coursecorpus.core.cluster import DuplicateCluster
from coursecorpus.errors import OrderingConflictError, ReadError, UnresolvedReferenceError
from coursecorpus.index.indexer import IndexResult
from coursecorpus.operators.dedup.detector import DetectionResult


@dataclass
class CorpusReport:
    """Summary of one corpus load."""

    total_documents: int
    total_clusters: int
    duplicates_removed: int
    unresolved_references: list[UnresolvedReferenceError] = field(default_factory=list)
    ordering_conflicts: list[OrderingConflictError] = field(default_factory=list)
    ordered_entries: list[CorpusEntry] = field(default_factory=list)

    read_errors: list[ReadError] = field(default_factory=list)
    stubs: list[str] = field(default_factory=list)
    unordered: list[str] = field(default_factory=list)
    truncated: bool = False
    clusters: list[DuplicateCluster] = field(default_factory=list)  # multi-member only
    root: str = ""
    config_hash: str = ""
    timings: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON/YAML-serializable form."""
        return {
            "root": self.root,
            "config_hash": self.config_hash,
            "total_documents": self.total_documents,
            "total_clusters": self.total_clusters,
            "duplicates_removed": self.duplicates_removed,
            "truncated": self.truncated,
            "unresolved_references": [e.to_dict() for e in self.unresolved_references],
            "ordering_conflicts": [e.to_dict() for e in self.ordering_conflicts],
            "read_errors": [e.to_dict() for e in self.read_errors],
            "stubs": list(self.stubs),
            "unordered": list(self.unordered),
            "clusters": [c.to_dict() for c in self.clusters],
            "ordered_entries": [e.to_dict() for e in self.ordered_entries],
            "timings": dict(self.timings),
        }


def build_report(
    documents: Sequence[Document],
    detection: DetectionResult,
    index: IndexResult,
    read_errors: Sequence[ReadError] = (),
    root: str = "",
    config_hash: str = "",
    timings: dict[str, float] | None = None,
) -> CorpusReport:
    """Assemble the report from the outputs of each pipeline stage."""
    total_clusters = len(detection.clusters)
    return CorpusReport(
        total_documents=len(documents),
        total_clusters=total_clusters,
        duplicates_removed=len(documents) - total_clusters,
        unresolved_references=list(index.unresolved),
        ordering_conflicts=list(index.conflicts),
        ordered_entries=list(index.entries),
        read_errors=list(read_errors),
        stubs=detection.stubs,
        unordered=index.unordered,
        truncated=detection.truncated,
        clusters=[c for c in detection.clusters if c.size > 1],
        root=root,
        config_hash=config_hash,
        timings=dict(timings or {}),
    )
