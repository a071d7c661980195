"""Operators for normalizing and deduplicating lesson documents."""

from coursecorpus.operators.normalize import Normalizer, normalize
from coursecorpus.operators.dedup import DuplicateDetector, DetectionResult, similarity

__all__ = [
    "Normalizer", "normalize",
    "DuplicateDetector", "DetectionResult", "similarity",
]
