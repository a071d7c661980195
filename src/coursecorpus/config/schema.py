"""Configuration schema for corpus loads."""

from dataclasses import dataclass, field
from typing import Any

from coursecorpus.errors import ConfigError

SIMILARITY_METHODS = ("shingle", "token_jaccard", "line_diff")
CANDIDATE_STRATEGIES = ("all_pairs", "minhash")
KEEP_RULES = ("longest", "first", "most_lines")
MODULE_LABEL_MODES = ("directory", "none")


@dataclass
class ReaderConfig:
    """Directory walk and decoding settings."""

    extensions: list[str] = field(default_factory=lambda: [".md", ".markdown", ".txt"])
    exclude_dirs: list[str] = field(default_factory=lambda: [".git", "node_modules", "_book"])
    include_hidden: bool = False
    encoding: str = "utf-8"
    num_workers: int = 1

    def __post_init__(self) -> None:
        if self.num_workers < 1:
            raise ConfigError(f"reader.num_workers must be >= 1, got {self.num_workers}")
        self.extensions = [e.lower() if e.startswith(".") else f".{e.lower()}" for e in self.extensions]


@dataclass
class NormalizerConfig:
    """Canonical-form settings."""

    link_placeholder: str = "<url>"
    lowercase: bool = False
    collapse_blank_lines: bool = True


@dataclass
class DedupConfig:
    """Duplicate detection settings."""

    method: str = "shingle"  # shingle, token_jaccard, line_diff
    threshold: float = 0.85
    shingle_size: int = 3
    candidates: str = "all_pairs"  # all_pairs, minhash
    num_bands: int = 16
    rows_per_band: int = 4
    seed: int = 42
    keep_rule: str = "longest"  # longest, first, most_lines
    num_workers: int = 1
    timeout_seconds: float | None = None

    def __post_init__(self) -> None:
        if self.method not in SIMILARITY_METHODS:
            raise ConfigError(f"Unknown similarity method: {self.method}. Available: {list(SIMILARITY_METHODS)}")
        if self.candidates not in CANDIDATE_STRATEGIES:
            raise ConfigError(f"Unknown candidate strategy: {self.candidates}. Available: {list(CANDIDATE_STRATEGIES)}")
        if self.keep_rule not in KEEP_RULES:
            raise ConfigError(f"Unknown keep rule: {self.keep_rule}. Available: {list(KEEP_RULES)}")
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigError(f"dedup.threshold must be in [0, 1], got {self.threshold}")
        if self.shingle_size < 1:
            raise ConfigError(f"dedup.shingle_size must be >= 1, got {self.shingle_size}")
        if self.num_workers < 1:
            raise ConfigError(f"dedup.num_workers must be >= 1, got {self.num_workers}")
        if self.num_bands < 1 or self.rows_per_band < 1:
            raise ConfigError("dedup.num_bands and dedup.rows_per_band must be >= 1")
        if self.timeout_seconds is not None and self.timeout_seconds < 0:
            raise ConfigError(f"dedup.timeout_seconds must be >= 0, got {self.timeout_seconds}")


@dataclass
class IndexConfig:
    """Declared-ordering settings."""

    index_files: list[str] = field(default_factory=lambda: ["SUMMARY.md"])
    title_match: bool = True
    module_labels: str = "directory"  # directory, none

    def __post_init__(self) -> None:
        if self.module_labels not in MODULE_LABEL_MODES:
            raise ConfigError(f"Unknown module label mode: {self.module_labels}. Available: {list(MODULE_LABEL_MODES)}")


@dataclass
class LoaderConfig:
    """Complete configuration for one corpus load."""

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    normalizer: NormalizerConfig = field(default_factory=NormalizerConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    index: IndexConfig = field(default_factory=IndexConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "reader": {
                "extensions": list(self.reader.extensions),
                "exclude_dirs": list(self.reader.exclude_dirs),
                "include_hidden": self.reader.include_hidden,
                "encoding": self.reader.encoding,
                "num_workers": self.reader.num_workers,
            },
            "normalizer": {
                "link_placeholder": self.normalizer.link_placeholder,
                "lowercase": self.normalizer.lowercase,
                "collapse_blank_lines": self.normalizer.collapse_blank_lines,
            },
            "dedup": {
                "method": self.dedup.method,
                "threshold": self.dedup.threshold,
                "shingle_size": self.dedup.shingle_size,
                "candidates": self.dedup.candidates,
                "num_bands": self.dedup.num_bands,
                "rows_per_band": self.dedup.rows_per_band,
                "seed": self.dedup.seed,
                "keep_rule": self.dedup.keep_rule,
                "num_workers": self.dedup.num_workers,
                "timeout_seconds": self.dedup.timeout_seconds,
            },
            "index": {
                "index_files": list(self.index.index_files),
                "title_match": self.index.title_match,
                "module_labels": self.index.module_labels,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "LoaderConfig":
        """Create from dictionary; missing keys take their defaults."""
        data = data or {}
        unknown = set(data) - {"reader", "normalizer", "dedup", "index"}
        if unknown:
            raise ConfigError(f"Unknown config sections: {sorted(unknown)}")

        try:
            return cls(
                reader=ReaderConfig(**(data.get("reader") or {})),
                normalizer=NormalizerConfig(**(data.get("normalizer") or {})),
                dedup=DedupConfig(**(data.get("dedup") or {})),
                index=IndexConfig(**(data.get("index") or {})),
            )
        except TypeError as e:
            raise ConfigError(f"Invalid config: {e}") from e
