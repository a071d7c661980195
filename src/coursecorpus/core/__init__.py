"""Core data models for the course corpus loader."""

from coursecorpus.core.document import Document, build_document, extract_title, title_from_path
from coursecorpus.core.cluster import DuplicateCluster
from coursecorpus.core.entry import CorpusEntry

__all__ = [
    "Document", "build_document", "extract_title", "title_from_path",
    "DuplicateCluster",
    "CorpusEntry",
]
