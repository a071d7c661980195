"""Corpus indexer: ordered table of contents from clusters and declared ordering."""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from coursecorpus.core.cluster import DuplicateCluster
from coursecorpus.core.document import Document
from coursecorpus.core.entry import CorpusEntry
from coursecorpus.errors import OrderingConflictError, UnresolvedReferenceError
from coursecorpus.index.references import OrderingReference, OrderingSource

logger = logging.getLogger(__name__)


def normalize_title(title: str) -> str:
    """Case- and whitespace-insensitive title key."""
    return re.sub(r"\s+", " ", title).strip().casefold()


@dataclass
class _Placement:
    source_idx: int
    source: str
    position: int
    module_label: str | None


@dataclass
class IndexResult:
    """Final ordered entries plus everything that could not be resolved."""

    entries: list[CorpusEntry]
    unresolved: list[UnresolvedReferenceError] = field(default_factory=list)
    conflicts: list[OrderingConflictError] = field(default_factory=list)

    @property
    def unordered(self) -> list[str]:
        return [e.canonical_id for e in self.entries if not e.ordered]


class CorpusIndexer:
    """Merge declared ordering with duplicate clusters.

    Declared entries come first, sorted by declared position (earlier
    sources first on equal positions). Clusters no source references
    follow in discovery order. When sources disagree on a cluster's
    position, the later-processed source wins and the conflict is recorded.
    Within one source only the first reference to a cluster counts.
    """

    def __init__(self, title_match: bool = True):
        self.title_match = title_match

    def _build_lookups(
        self,
        clusters: Sequence[DuplicateCluster],
        documents: Mapping[str, Document],
    ) -> tuple[dict[str, int], dict[str, int]]:
        by_path: dict[str, int] = {}
        by_title: dict[str, int] = {}
        for idx, cluster in enumerate(clusters):
            for member in cluster.members:
                by_path[member] = idx
            by_title.setdefault(normalize_title(documents[cluster.canonical_id].title), idx)
        # Duplicate copies' titles only fill gaps left by canonical titles
        for idx, cluster in enumerate(clusters):
            for member in cluster.duplicates:
                by_title.setdefault(normalize_title(documents[member].title), idx)
        return by_path, by_title

    def resolve(
        self,
        ref: OrderingReference,
        by_path: dict[str, int],
        by_title: dict[str, int],
    ) -> int | None:
        """Cluster position for a reference: by path first, then by title."""
        if ref.path and ref.path in by_path:
            return by_path[ref.path]
        if self.title_match and ref.title:
            return by_title.get(normalize_title(ref.title))
        return None

    def index(
        self,
        clusters: Sequence[DuplicateCluster],
        documents: Mapping[str, Document],
        sources: Sequence[OrderingSource] = (),
        module_labels: Mapping[str, str] | None = None,
    ) -> IndexResult:
        """Build the ordered entry list.

        Args:
            clusters: Duplicate clusters in discovery order.
            documents: Document id -> Document for every cluster member.
            sources: Declared ordering sources in processing order.
            module_labels: Document id -> label from directory conventions;
                a label declared by a source takes precedence.
        """
        module_labels = module_labels or {}
        by_path, by_title = self._build_lookups(clusters, documents)

        unresolved: list[UnresolvedReferenceError] = []
        conflicts: list[OrderingConflictError] = []
        placements: dict[int, _Placement] = {}

        for source_idx, source in enumerate(sources):
            placed_here: set[int] = set()
            for ref in source.references:
                cluster_idx = self.resolve(ref, by_path, by_title)
                if cluster_idx is None:
                    err = UnresolvedReferenceError(source.name, ref.position, ref.title, ref.path)
                    logger.warning("%s", err)
                    unresolved.append(err)
                    continue

                if cluster_idx in placed_here:
                    # A source listing two copies of one lesson keeps the first
                    logger.debug(
                        "%s: %s already placed by this source, ignoring position %d",
                        source.name, clusters[cluster_idx].canonical_id, ref.position,
                    )
                    continue
                placed_here.add(cluster_idx)

                previous = placements.get(cluster_idx)
                if previous is not None and previous.position != ref.position:
                    conflict = OrderingConflictError(
                        canonical_id=clusters[cluster_idx].canonical_id,
                        previous_source=previous.source,
                        previous_position=previous.position,
                        winning_source=source.name,
                        winning_position=ref.position,
                    )
                    logger.warning("Ordering conflict: %s", conflict)
                    conflicts.append(conflict)

                placements[cluster_idx] = _Placement(
                    source_idx=source_idx,
                    source=source.name,
                    position=ref.position,
                    module_label=ref.module_label,
                )

        declared = sorted(placements.items(), key=lambda item: (item[1].position, item[1].source_idx))

        entries: list[CorpusEntry] = []
        for cluster_idx, placement in declared:
            cluster = clusters[cluster_idx]
            entries.append(CorpusEntry(
                sequence_index=len(entries),
                canonical_id=cluster.canonical_id,
                title=documents[cluster.canonical_id].title,
                module_label=placement.module_label or module_labels.get(cluster.canonical_id),
                members=cluster.members,
                ordered=True,
                source=placement.source,
                declared_position=placement.position,
            ))

        for cluster_idx, cluster in enumerate(clusters):
            if cluster_idx in placements:
                continue
            entries.append(CorpusEntry(
                sequence_index=len(entries),
                canonical_id=cluster.canonical_id,
                title=documents[cluster.canonical_id].title,
                module_label=module_labels.get(cluster.canonical_id),
                members=cluster.members,
                ordered=False,
            ))

        logger.info(
            "Indexed %d entries (%d declared, %d unordered, %d unresolved, %d conflicts)",
            len(entries), len(placements), len(entries) - len(placements), len(unresolved), len(conflicts),
        )
        return IndexResult(entries=entries, unresolved=unresolved, conflicts=conflicts)
