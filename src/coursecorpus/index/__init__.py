"""Ordering and table-of-contents construction."""

from coursecorpus.index.references import OrderingReference, OrderingSource
from coursecorpus.index.markdown_index import parse_index, load_index_file, normalize_reference_path
from coursecorpus.index.module_labels import directory_module_label, build_module_labels
from coursecorpus.index.indexer import CorpusIndexer, IndexResult

__all__ = [
    "OrderingReference", "OrderingSource",
    "parse_index", "load_index_file", "normalize_reference_path",
    "directory_module_label", "build_module_labels",
    "CorpusIndexer", "IndexResult",
]
