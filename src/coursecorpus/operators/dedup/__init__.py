"""Duplicate detection operators."""

from coursecorpus.operators.dedup.exact_doc import ExactIndex
from coursecorpus.operators.dedup.minhash import MinHashIndex, MinHashConfig
from coursecorpus.operators.dedup.similarity import (
    ShingleSimilarity, TokenJaccardSimilarity, LineDiffSimilarity, get_similarity, similarity,
)
from coursecorpus.operators.dedup.union_find import UnionFind
from coursecorpus.operators.dedup.keep_rules import KeepRule, KeepRuleSelector
from coursecorpus.operators.dedup.detector import DuplicateDetector, DetectionResult, DetectionStats

__all__ = [
    "ExactIndex",
    "MinHashIndex", "MinHashConfig",
    "ShingleSimilarity", "TokenJaccardSimilarity", "LineDiffSimilarity", "get_similarity", "similarity",
    "UnionFind",
    "KeepRule", "KeepRuleSelector",
    "DuplicateDetector", "DetectionResult", "DetectionStats",
]
