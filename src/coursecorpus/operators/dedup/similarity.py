"""Symmetric similarity measures over canonical content.

Each measure splits into ``prepare`` (per document, done once) and
``score`` (per pair). ``upper_bound`` is a cheap size-only bound used to
skip pairs that cannot exceed the threshold.
"""

import re
from difflib import SequenceMatcher
from typing import Any

_TOKEN = re.compile(r"\w+", re.UNICODE)


def tokenize(text: str) -> list[str]:
    return _TOKEN.findall(text.lower())


def _jaccard(a: frozenset, b: frozenset) -> float:
    if not a and not b:
        return 0.0
    inter = len(a & b)
    return inter / (len(a) + len(b) - inter)


class ShingleSimilarity:
    """Jaccard similarity over word n-gram shingles."""

    name = "shingle"

    def __init__(self, shingle_size: int = 3):
        self.shingle_size = shingle_size

    def prepare(self, text: str) -> frozenset:
        tokens = tokenize(text)
        n = self.shingle_size
        if len(tokens) < n:
            return frozenset([tuple(tokens)]) if tokens else frozenset()
        return frozenset(tuple(tokens[i : i + n]) for i in range(len(tokens) - n + 1))

    def score(self, a: frozenset, b: frozenset) -> float:
        return _jaccard(a, b)

    def upper_bound(self, a: frozenset, b: frozenset) -> float:
        # |A & B| <= min and |A | B| >= max
        hi = max(len(a), len(b))
        return min(len(a), len(b)) / hi if hi else 0.0


class TokenJaccardSimilarity(ShingleSimilarity):
    """Jaccard similarity over the set of word tokens."""

    name = "token_jaccard"

    def __init__(self) -> None:
        super().__init__(shingle_size=1)


class LineDiffSimilarity:
    """difflib ratio over canonical lines.

    SequenceMatcher is not symmetric in general, so the pair is always
    scored in a fixed order of the two line sequences.
    """

    name = "line_diff"

    def prepare(self, text: str) -> tuple[str, ...]:
        return tuple(line for line in text.split("\n") if line)

    def score(self, a: tuple[str, ...], b: tuple[str, ...]) -> float:
        if not a and not b:
            return 0.0
        if b < a:
            a, b = b, a
        return SequenceMatcher(None, a, b, autojunk=False).ratio()

    def upper_bound(self, a: tuple[str, ...], b: tuple[str, ...]) -> float:
        total = len(a) + len(b)
        return 2.0 * min(len(a), len(b)) / total if total else 0.0


def get_similarity(method: str = "shingle", shingle_size: int = 3) -> Any:
    """Build a similarity measure by name."""
    if method == "shingle":
        return ShingleSimilarity(shingle_size)
    if method == "token_jaccard":
        return TokenJaccardSimilarity()
    if method == "line_diff":
        return LineDiffSimilarity()
    raise ValueError(f"Unknown similarity method: {method}")


def similarity(a: str, b: str, method: str = "shingle", shingle_size: int = 3) -> float:
    """Similarity of two canonical texts in [0, 1]; sim(a, b) == sim(b, a)."""
    measure = get_similarity(method, shingle_size)
    return measure.score(measure.prepare(a), measure.prepare(b))
