"""Configuration for the course corpus loader."""

from coursecorpus.config.schema import LoaderConfig, ReaderConfig, NormalizerConfig, DedupConfig, IndexConfig
from coursecorpus.config.hash import compute_config_hash, config_to_yaml, config_from_yaml, load_config

__all__ = [
    "LoaderConfig", "ReaderConfig", "NormalizerConfig", "DedupConfig", "IndexConfig",
    "compute_config_hash", "config_to_yaml", "config_from_yaml", "load_config",
]
