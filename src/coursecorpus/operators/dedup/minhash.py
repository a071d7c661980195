"""MinHash LSH candidate generation for near-duplicate detection.

All-pairs comparison is O(n^2). For larger corpora, documents are sketched
with MinHash and only pairs sharing at least one LSH band become
candidates. Candidates are still verified with the configured similarity
measure, so this only trades recall for speed.
"""

import hashlib
import random
import struct
from collections import defaultdict
from collections.abc import Hashable, Iterable
from dataclasses import dataclass

_MERSENNE_PRIME = (1 << 61) - 1
_MAX_HASH = (1 << 32) - 1


@dataclass
class MinHashConfig:
    """MinHash configuration."""

    num_bands: int = 16
    rows_per_band: int = 4  # 16x4 = 64 hash functions
    seed: int = 42


class MinHashIndex:
    """Near-duplicate candidate index using MinHash LSH."""

    def __init__(self, config: MinHashConfig | None = None):
        self.config = config or MinHashConfig()
        self.num_hashes = self.config.num_bands * self.config.rows_per_band
        rng = random.Random(self.config.seed)
        self._perms = [
            (rng.randint(1, _MERSENNE_PRIME - 1), rng.randint(0, _MERSENNE_PRIME - 1))
            for _ in range(self.num_hashes)
        ]
        self._buckets: dict[int, dict[tuple[int, ...], list[str]]] = defaultdict(lambda: defaultdict(list))
        self._doc_ids: list[str] = []

    @staticmethod
    def _hash_element(element: Hashable) -> int:
        h = hashlib.md5(repr(element).encode("utf-8")).digest()
        return struct.unpack("<I", h[:4])[0]

    def compute_signature(self, elements: Iterable[Hashable]) -> list[int]:
        """Compute MinHash signature."""
        hashed = {self._hash_element(e) for e in elements}
        if not hashed:
            return [_MAX_HASH] * self.num_hashes

        signature = []
        for a, b in self._perms:
            signature.append(min(((a * h + b) % _MERSENNE_PRIME) & _MAX_HASH for h in hashed))
        return signature

    def _get_bands(self, signature: list[int]) -> list[tuple[int, ...]]:
        rows = self.config.rows_per_band
        return [tuple(signature[i * rows : (i + 1) * rows]) for i in range(self.config.num_bands)]

    def add(self, doc_id: str, elements: Iterable[Hashable]) -> None:
        """Sketch a document and add it to the LSH buckets."""
        signature = self.compute_signature(elements)
        for band_idx, band in enumerate(self._get_bands(signature)):
            self._buckets[band_idx][band].append(doc_id)
        self._doc_ids.append(doc_id)

    def candidate_pairs(self) -> list[tuple[str, str]]:
        """Pairs sharing at least one band, each as (smaller id, larger id), sorted."""
        pairs: set[tuple[str, str]] = set()
        for bands in self._buckets.values():
            for ids in bands.values():
                if len(ids) < 2:
                    continue
                ordered = sorted(ids)
                for i, a in enumerate(ordered):
                    for b in ordered[i + 1 :]:
                        pairs.add((a, b))
        return sorted(pairs)

    def reset(self) -> None:
        self._buckets.clear()
        self._doc_ids.clear()

    @property
    def stats(self) -> dict[str, int]:
        return {
            "total_docs": len(self._doc_ids),
            "num_hashes": self.num_hashes,
            "candidate_pairs": len(self.candidate_pairs()),
        }
