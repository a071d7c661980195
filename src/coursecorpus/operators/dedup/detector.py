"""Duplicate detection: partition documents into duplicate clusters.

Documents with byte-identical canonical content are merged first. Near
duplicates are then found by scoring candidate pairs, in ascending id
order, and pairs scoring above the configured threshold are merged with
union-find.

All-pairs scoring is O(n^2) in the number of distinct contents. That is
fine for corpora of a few hundred lessons; larger corpora should use
``candidates="minhash"`` to restrict scoring to LSH candidates.
"""

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from coursecorpus.config.schema import DedupConfig
from coursecorpus.core.cluster import DuplicateCluster
from coursecorpus.core.document import Document
from coursecorpus.operators.dedup.exact_doc import ExactIndex
from coursecorpus.operators.dedup.keep_rules import KeepRuleSelector
from coursecorpus.operators.dedup.minhash import MinHashConfig, MinHashIndex
from coursecorpus.operators.dedup.similarity import get_similarity
from coursecorpus.operators.dedup.union_find import UnionFind

logger = logging.getLogger(__name__)


@dataclass
class DetectionStats:
    """Statistics from one detection run."""

    documents: int = 0
    stubs: int = 0
    exact_duplicates: int = 0
    candidate_pairs: int = 0
    pairs_prefiltered: int = 0
    pairs_scored: int = 0
    pairs_matched: int = 0
    pairs_skipped: int = 0

    def to_dict(self) -> dict[str, int]:
        return dict(self.__dict__)


@dataclass
class DetectionResult:
    """Clusters covering every input document exactly once."""

    clusters: list[DuplicateCluster]
    truncated: bool = False
    pair_scores: dict[tuple[str, str], float] = field(default_factory=dict)
    stats: DetectionStats = field(default_factory=DetectionStats)

    @property
    def stubs(self) -> list[str]:
        return [c.canonical_id for c in self.clusters if c.is_stub]

    def cluster_of(self, doc_id: str) -> DuplicateCluster | None:
        for cluster in self.clusters:
            if doc_id in cluster.members:
                return cluster
        return None


def _score_pairs(
    pairs: Sequence[tuple[str, str]],
    features: dict[str, Any],
    measure: Any,
    threshold: float,
    deadline: float | None,
    clock: Callable[[], float],
) -> tuple[list[tuple[str, str, float]], int, int]:
    """Score a batch of pairs.

    Returns:
        (scored, prefiltered, skipped): scored holds (a, b, score) for every
        pair that was actually compared; skipped counts pairs left unscored
        because the deadline passed.
    """
    scored = []
    prefiltered = 0
    for idx, (a, b) in enumerate(pairs):
        if deadline is not None and clock() >= deadline:
            return scored, prefiltered, len(pairs) - idx
        fa, fb = features[a], features[b]
        if measure.upper_bound(fa, fb) <= threshold:
            prefiltered += 1
            continue
        scored.append((a, b, measure.score(fa, fb)))
    return scored, prefiltered, 0


class DuplicateDetector:
    """Cluster exact and near-duplicate documents."""

    def __init__(
        self,
        config: DedupConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or DedupConfig()
        self.measure = get_similarity(self.config.method, self.config.shingle_size)
        self.selector = KeepRuleSelector(self.config.keep_rule)
        self.clock = clock

    def _candidate_pairs(self, rep_ids: list[str], features: dict[str, Any]) -> list[tuple[str, str]]:
        if self.config.candidates == "minhash":
            index = MinHashIndex(MinHashConfig(
                num_bands=self.config.num_bands,
                rows_per_band=self.config.rows_per_band,
                seed=self.config.seed,
            ))
            for doc_id in rep_ids:
                index.add(doc_id, features[doc_id])
            return index.candidate_pairs()

        ordered = sorted(rep_ids)
        return [(a, b) for i, a in enumerate(ordered) for b in ordered[i + 1 :]]

    def _score_all(
        self,
        pairs: list[tuple[str, str]],
        features: dict[str, Any],
        deadline: float | None,
    ) -> tuple[list[tuple[str, str, float]], int, int]:
        threshold = self.config.threshold
        workers = self.config.num_workers
        if workers == 1 or len(pairs) < 2:
            return _score_pairs(pairs, features, self.measure, threshold, deadline, self.clock)

        # Independent partitions, merged in pair order afterwards
        chunk_size = max(1, -(-len(pairs) // (workers * 4)))
        chunks = [pairs[i : i + chunk_size] for i in range(0, len(pairs), chunk_size)]
        scored: list[tuple[str, str, float]] = []
        prefiltered = skipped = 0
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(_score_pairs, chunk, features, self.measure, threshold, deadline, self.clock)
                for chunk in chunks
            ]
            for future in futures:
                part, pre, skip = future.result()
                scored.extend(part)
                prefiltered += pre
                skipped += skip
        scored.sort(key=lambda item: (item[0], item[1]))
        return scored, prefiltered, skipped

    def detect(self, documents: Sequence[Document], deadline: float | None = None) -> DetectionResult:
        """Partition documents into duplicate clusters.

        Args:
            documents: Documents in discovery order; ids must be unique.
            deadline: Optional ``clock()`` value after which pair scoring
                stops. Unscored pairs are treated as non-duplicates and the
                result is marked truncated.
        """
        stats = DetectionStats(documents=len(documents))
        by_id: dict[str, Document] = {}
        for doc in documents:
            if doc.id in by_id:
                raise ValueError(f"Duplicate document id: {doc.id}")
            by_id[doc.id] = doc

        if deadline is None and self.config.timeout_seconds is not None:
            deadline = self.clock() + self.config.timeout_seconds

        uf = UnionFind(doc.id for doc in documents)
        comparable = [doc for doc in documents if not doc.is_stub]
        stats.stubs = len(documents) - len(comparable)

        # Exact duplicates: one representative (smallest id) per content
        exact = ExactIndex().add_all(sorted(comparable, key=lambda d: d.id))
        rep_ids = []
        for group in exact.groups():
            rep_ids.append(group[0])
            for other in group[1:]:
                uf.union(group[0], other)
        stats.exact_duplicates = exact.stats["exact_duplicates"]

        features = {doc_id: self.measure.prepare(by_id[doc_id].canonical_content) for doc_id in rep_ids}
        pairs = self._candidate_pairs(rep_ids, features)
        stats.candidate_pairs = len(pairs)

        scored, stats.pairs_prefiltered, stats.pairs_skipped = self._score_all(pairs, features, deadline)
        pair_scores: dict[tuple[str, str], float] = {}
        for a, b, score in scored:
            pair_scores[(a, b)] = score
            if score > self.config.threshold:
                stats.pairs_matched += 1
                uf.union(a, b)
        stats.pairs_scored = len(scored)

        truncated = stats.pairs_skipped > 0
        if truncated:
            logger.warning(
                "Pair comparison hit its deadline: %d of %d pairs left unscored",
                stats.pairs_skipped, stats.candidate_pairs,
            )

        clusters = self._build_clusters(documents, by_id, uf, pair_scores)
        logger.info(
            "Detected %d clusters from %d documents (%d exact duplicates, %d near-duplicate pairs)",
            len(clusters), len(documents), stats.exact_duplicates, stats.pairs_matched,
        )
        return DetectionResult(clusters=clusters, truncated=truncated, pair_scores=pair_scores, stats=stats)

    def _similarity_to(self, canonical: Document, member: Document, pair_scores: dict[tuple[str, str], float]) -> float:
        if canonical.canonical_content == member.canonical_content:
            return 1.0
        key = (min(canonical.id, member.id), max(canonical.id, member.id))
        if key in pair_scores:
            return pair_scores[key]
        return self.measure.score(
            self.measure.prepare(canonical.canonical_content),
            self.measure.prepare(member.canonical_content),
        )

    def _build_clusters(
        self,
        documents: Sequence[Document],
        by_id: dict[str, Document],
        uf: UnionFind,
        pair_scores: dict[tuple[str, str], float],
    ) -> list[DuplicateCluster]:
        # Group in discovery order; a group's position is its first member's
        grouped: dict[str, list[Document]] = {}
        for doc in documents:
            grouped.setdefault(uf.find(doc.id), []).append(doc)

        clusters = []
        for members in grouped.values():
            if len(members) == 1:
                doc = members[0]
                clusters.append(DuplicateCluster(members=(doc.id,), canonical_id=doc.id, is_stub=doc.is_stub))
                continue

            kept, others = self.selector.select(members)
            scores = {d.id: round(self._similarity_to(kept, d, pair_scores), 6) for d in others}
            clusters.append(DuplicateCluster(
                members=tuple(d.id for d in members),
                canonical_id=kept.id,
                similarity_scores=scores,
            ))
        return clusters
