"""Course corpus loader: deduplicate and order lesson documents."""

from coursecorpus.core import CorpusEntry, Document, DuplicateCluster
from coursecorpus.config import LoaderConfig
from coursecorpus.errors import (
    ConfigError, CorpusError, CorpusRootError, OrderingConflictError, ReadError, UnresolvedReferenceError,
)
from coursecorpus.pipeline import load_corpus
from coursecorpus.report import CorpusReport

__version__ = "0.1.0"

__all__ = [
    "CorpusEntry", "Document", "DuplicateCluster",
    "LoaderConfig",
    "ConfigError", "CorpusError", "CorpusRootError", "OrderingConflictError", "ReadError",
    "UnresolvedReferenceError",
    "load_corpus",
    "CorpusReport",
]
